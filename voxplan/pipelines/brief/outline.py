"""Outline generation and repair (Stage 03 of the brief pipeline).

The orchestrator walks a fixed sequence:

``Generate -> ParseDirect -> (StructuralRepair) -> FieldValidate``

and degrades to :meth:`OutlineDocument.fallback` whenever a step cannot be
recovered. Callers always receive an :class:`OutlineResult`; provider and
schema failures are reported through ``outcome``/``reason``, never raised.
"""

from __future__ import annotations

import logging

from voxplan.services import (
    CompletionService,
    InferenceError,
    JsonRepairService,
    OUTLINE_FIELDS,
    OutlineDocument,
    SchemaInvalid,
)
from voxplan.telemetry import record_outline_outcome

from .normalizer import clean_outline_fields, strip_field_label
from .prompts import (
    OUTLINE_JSON_HINT,
    OUTLINE_SYSTEM_PROMPT,
    build_field_repair_prompt,
    build_outline_user_prompt,
)
from .spacing import SpacingDictionary, garbling_signals
from .types import FallbackReason, OutlineOutcome, OutlineResult

logger = logging.getLogger("voxplan.pipeline")

EMPTY_TRANSCRIPT_DRAFT = "Aucune transcription fournie."
OUTLINE_MAX_TOKENS = 4000
FIELD_REPAIR_MAX_TOKENS = 1000


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


class OutlineOrchestrator:
    """Produce a validated outline document or a fallback with its reason."""

    def __init__(
        self,
        completion: CompletionService,
        json_repair: JsonRepairService,
        *,
        dictionary: SpacingDictionary | None = None,
        field_repair_poll_interval: float | None = None,
        field_repair_max_polls: int | None = None,
    ) -> None:
        self._completion = completion
        self._json_repair = json_repair
        self._dictionary = dictionary
        self._field_poll_interval = field_repair_poll_interval
        self._field_max_polls = field_repair_max_polls

    async def generate(self, transcript: str | None) -> OutlineResult:
        text = (transcript or "").strip()
        if not text:
            logger.info("Outline skipped: empty transcript")
            return self._fallback(EMPTY_TRANSCRIPT_DRAFT, FallbackReason.EMPTY_TRANSCRIPT)

        try:
            raw = await self._completion.complete(
                build_outline_user_prompt(text),
                system_prompt=OUTLINE_SYSTEM_PROMPT,
                verbosity="low",
                reasoning_effort="minimal",
                max_tokens=OUTLINE_MAX_TOKENS,
                suffix=OUTLINE_JSON_HINT,
                stage="outline",
            )
        except InferenceError as exc:
            logger.error("Outline generation failed: %s", exc)
            return self._fallback(f"Analyse indisponible: {exc}", FallbackReason.GENERATION_FAILED)

        logger.info("Outline raw length=%s preview=%s", len(raw), _truncate(raw, 300))

        outcome = OutlineOutcome.PARSED
        try:
            document = OutlineDocument.from_json(raw)
            logger.info("Outline parsed directly")
        except SchemaInvalid as parse_error:
            logger.warning("Direct parse failed (%s), trying structural repair", parse_error)
            document = await self._structural_repair(raw)
            if document is None:
                return self._fallback(raw, FallbackReason.SCHEMA_INVALID)
            outcome = OutlineOutcome.REPAIRED
            logger.info("Outline recovered by structural repair")

        document, corrected = await self._validate_fields(document)
        record_outline_outcome(outcome.value)
        return OutlineResult(
            document=document,
            outcome=outcome,
            corrected_fields=tuple(corrected),
        )

    async def _structural_repair(self, raw: str) -> OutlineDocument | None:
        repaired = await self._json_repair.repair(raw)
        if repaired is None:
            return None
        try:
            return OutlineDocument.from_mapping(repaired)
        except SchemaInvalid as exc:
            logger.warning("Repaired outline still invalid: %s", exc)
            return None

    async def _validate_fields(self, document: OutlineDocument) -> tuple[OutlineDocument, list[str]]:
        data = clean_outline_fields(document.model_dump())
        corrected: list[str] = []

        for name in OUTLINE_FIELDS:
            value = data[name]
            signals = garbling_signals(value, self._dictionary)
            if not signals:
                continue

            logger.info("Field %s looks garbled: %s", name, signals.raised())
            fixed = await self._repair_field(name, value)
            if fixed:
                data[name] = fixed
                corrected.append(name)

        return OutlineDocument.model_validate(data), corrected

    async def _repair_field(self, name: str, value: str) -> str | None:
        try:
            output = await self._completion.complete(
                build_field_repair_prompt(value),
                verbosity="low",
                reasoning_effort="minimal",
                max_tokens=FIELD_REPAIR_MAX_TOKENS,
                poll_interval=self._field_poll_interval,
                max_polls=self._field_max_polls,
                stage="field_repair",
            )
        except InferenceError as exc:
            logger.warning("Field repair for %s failed, keeping original: %s", name, exc)
            return None

        fixed = strip_field_label(output).strip()
        if not fixed:
            logger.warning("Field repair for %s returned nothing, keeping original", name)
            return None
        return fixed

    @staticmethod
    def _fallback(draft: str, reason: FallbackReason) -> OutlineResult:
        logger.warning("Outline fallback reason=%s", reason.value)
        record_outline_outcome(OutlineOutcome.FALLBACK.value)
        return OutlineResult(
            document=OutlineDocument.fallback(draft),
            outcome=OutlineOutcome.FALLBACK,
            reason=reason,
        )


__all__ = ["EMPTY_TRANSCRIPT_DRAFT", "OutlineOrchestrator"]
