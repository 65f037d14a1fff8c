"""Model-backed check that a text is free of spacing corruption."""

from __future__ import annotations

import logging

from voxplan.services import CompletionService, InferenceError

from .prompts import VALIDATION_CHECK_TEMPLATE, VALIDATION_FIX_TEMPLATE
from .types import ValidationReport

logger = logging.getLogger("voxplan.pipeline")

CHECK_MAX_TOKENS = 20
FIX_MAX_TOKENS = 1000


class TextValidator:
    """Ask the model whether text is garbled and, if so, for a corrected copy."""

    def __init__(
        self,
        completion: CompletionService,
        *,
        model: str | None = None,
        poll_interval: float | None = None,
        max_polls: int | None = None,
    ) -> None:
        self._completion = completion
        self._models = [model] if model else None
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    async def _ask(self, prompt: str, max_tokens: int, stage: str) -> str:
        return await self._completion.complete(
            prompt,
            verbosity="low",
            reasoning_effort="minimal",
            max_tokens=max_tokens,
            models=self._models,
            poll_interval=self._poll_interval,
            max_polls=self._max_polls,
            stage=stage,
        )

    async def validate(self, text: str, field: str | None = None) -> ValidationReport:
        """Raises ``InferenceError`` only when the YES/NO check itself fails."""

        answer = await self._ask(
            VALIDATION_CHECK_TEMPLATE.format(text=text),
            CHECK_MAX_TOKENS,
            "validation_check",
        )
        has_problems = "YES" in answer.upper()
        logger.info("Validation field=%s problems=%s", field or "-", has_problems)

        if not has_problems:
            return ValidationReport(is_valid=True, has_problems=False, corrected_text=text)

        try:
            corrected = await self._ask(
                VALIDATION_FIX_TEMPLATE.format(text=text),
                FIX_MAX_TOKENS,
                "validation_fix",
            )
        except InferenceError as exc:
            logger.warning("Correction failed for field=%s: %s", field or "-", exc)
            return ValidationReport(is_valid=False, has_problems=True, corrected_text=text)

        return ValidationReport(
            is_valid=True,
            has_problems=True,
            corrected_text=corrected.strip() or text,
        )


__all__ = ["TextValidator"]
