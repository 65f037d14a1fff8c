"""End-to-end orchestration of the brief pipeline.

``/pipeline`` runs the stages below in order, one request at a time:

1. ``ingestion`` – resolve the extension and store the recording in S3.
2. ``transcription`` – negotiate a Whisper model/shape on the signed URL.
3. ``outline`` – generate, parse, repair and spacing-check the outline.
4. ``reformat`` – rewrite the draft for spoken-word fluency.
5. ``synthesis`` – chunk, voice and re-host the audio.

Stages 1 and 2 are hard: their errors reach the caller. Stages 3 to 5 degrade
and report what went wrong through ``PipelineResult.warnings``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List

from voxplan.config.settings import PipelineConfig
from voxplan.services import (
    InferenceError,
    ObjectStorage,
    OutlineDocument,
    SynthesisError,
    build_object_key,
)

from .ingestion import resolve_upload_extension
from .normalizer import normalize_prose
from .outline import OutlineOrchestrator
from .reformat import SpeechReformatter
from .synthesis import SpeechSynthesizer
from .transcription import Transcriber
from .types import PipelineResult

logger = logging.getLogger("voxplan.pipeline")

UPLOAD_CATEGORY = "briefs"


@dataclass(frozen=True)
class PipelineStage:
    """Human-readable description of one stage in the brief pipeline."""

    order: int
    name: str
    module: str
    summary: str


def pick_source_text(document: OutlineDocument) -> str:
    """Prefer the draft; otherwise stitch introduction, plan and conclusion."""

    draft = document.draft.strip()
    if draft:
        return draft
    parts = [document.introduction, document.detailed_plan, document.conclusion]
    return "\n\n".join(part.strip() for part in parts if part and part.strip())


class BriefPipeline:
    """Recording in, outline and spoken audio out."""

    _STAGES: List[PipelineStage] = [
        PipelineStage(
            1,
            "Ingestion",
            "voxplan.pipelines.brief.ingestion",
            "Read the upload, derive its extension and persist it under briefs/.",
        ),
        PipelineStage(
            2,
            "Transcription",
            "voxplan.pipelines.brief.transcription",
            "Try each Whisper model and input shape until a transcript comes back.",
        ),
        PipelineStage(
            3,
            "Outline",
            "voxplan.pipelines.brief.outline",
            "Generate the essay outline, repair its JSON and garbled fields, or fall back.",
        ),
        PipelineStage(
            4,
            "Reformat",
            "voxplan.pipelines.brief.reformat",
            "Rewrite the draft for speech; plain prose normalization if the model fails.",
        ),
        PipelineStage(
            5,
            "Synthesis",
            "voxplan.pipelines.brief.synthesis",
            "Chunk the spoken text, voice each chunk and re-host the audio in S3.",
        ),
    ]

    def __init__(
        self,
        storage: ObjectStorage,
        transcriber: Transcriber,
        outline: OutlineOrchestrator,
        reformatter: SpeechReformatter,
        synthesizer: SpeechSynthesizer,
        *,
        config: PipelineConfig | None = None,
    ) -> None:
        self._storage = storage
        self._transcriber = transcriber
        self._outline = outline
        self._reformatter = reformatter
        self._synthesizer = synthesizer
        self._config = config or PipelineConfig()

    @classmethod
    def describe(cls) -> Iterable[PipelineStage]:
        """Expose the ordered list of stages for debugging and documentation."""

        return tuple(cls._STAGES)

    async def run(
        self,
        audio_bytes: bytes,
        filename: str | None = None,
        content_type: str | None = None,
    ) -> PipelineResult:
        extension = resolve_upload_extension(filename, content_type)
        key = build_object_key(UPLOAD_CATEGORY, extension)
        source = await self._storage.put(
            key,
            audio_bytes,
            content_type or f"audio/{extension}",
        )
        logger.info("Stored recording key=%s bytes=%s", key, len(audio_bytes))

        transcription = await self._transcriber.transcribe(source.url)
        transcript = transcription.transcript

        outline = await self._outline.generate(transcript)
        warnings: list[str] = []
        if outline.is_fallback and outline.reason is not None:
            warnings.append(f"outline fallback: {outline.reason.value}")

        source_text = pick_source_text(outline.document)
        spoken_text = await self._spoken_text(source_text, warnings)

        result = PipelineResult(
            source=source,
            transcript=transcript,
            outline=outline,
            spoken_text=spoken_text,
            warnings=warnings,
        )

        if len(spoken_text.strip()) <= self._config.min_synthesis_length:
            logger.info("Spoken text too short (%s chars), skipping synthesis", len(spoken_text.strip()))
            return result

        try:
            result.synthesis = await self._synthesizer.synthesize(spoken_text)
        except (SynthesisError, InferenceError) as exc:
            logger.error("Synthesis failed: %s", exc)
            warnings.append(f"synthesis failed: {exc}")
        return result

    async def _spoken_text(self, source_text: str, warnings: list[str]) -> str:
        if len(source_text.strip()) <= self._config.min_reformat_length:
            return normalize_prose(source_text)
        try:
            reformatted = await self._reformatter.reformat(source_text)
        except InferenceError as exc:
            logger.warning("Reformat failed, using normalized prose: %s", exc)
            warnings.append(f"reformat failed: {exc}")
            return normalize_prose(source_text)
        return reformatted or normalize_prose(source_text)


__all__ = ["BriefPipeline", "PipelineStage", "pick_source_text"]
