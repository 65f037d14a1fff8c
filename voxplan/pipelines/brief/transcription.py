"""Speech-to-text stage (Stage 02 of the brief pipeline)."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from voxplan.services import ShapeNegotiator

from .types import TranscriptionOutcome

logger = logging.getLogger("voxplan.pipeline")
transcript_logger = logging.getLogger("voxplan.logs.transcript")


def normalize_whisper_output(output: Any) -> str:
    """Whisper variants answer with a str, a list of segments or an object."""

    if output is None:
        return ""
    if isinstance(output, str):
        return output
    if isinstance(output, (list, tuple)):
        return "\n".join(str(part) for part in output if part is not None)
    if isinstance(output, dict):
        for key in ("text", "transcription"):
            value = output.get(key)
            if isinstance(value, str):
                return value
    return ""


def transcription_shapes(audio_url: str, language: str = "fr") -> list[dict[str, Any]]:
    base = {
        "task": "transcribe",
        "language": language,
        "translate": False,
        "temperature": 0,
    }
    return [{key: audio_url, **base} for key in ("audio", "audio_url", "file_url")]


class Transcriber:
    """Turn a publicly reachable audio URL into French text."""

    def __init__(
        self,
        negotiator: ShapeNegotiator,
        *,
        models: Sequence[str],
        language: str = "fr",
        min_length: int = 5,
        max_polls: int | None = None,
    ) -> None:
        self._negotiator = negotiator
        self._models = list(models)
        self._language = language
        self._min_length = min_length
        self._max_polls = max_polls

    def _accept(self, output: Any) -> bool:
        return len(normalize_whisper_output(output).strip()) > self._min_length

    async def transcribe(self, audio_url: str) -> TranscriptionOutcome:
        """Raises ``AllShapesExhausted`` when no model/shape yields a usable text."""

        negotiated = await self._negotiator.try_shapes(
            self._models,
            transcription_shapes(audio_url, self._language),
            self._accept,
            stage="transcription",
            max_polls=self._max_polls,
        )
        transcript = normalize_whisper_output(negotiated.output).strip()
        logger.info(
            "Transcription ok model=%s shape=%s length=%s",
            negotiated.model,
            negotiated.shape_index + 1,
            len(transcript),
        )
        transcript_logger.info("audio=%s transcript=%s", audio_url, transcript)
        return TranscriptionOutcome(
            transcript=transcript,
            model=negotiated.model,
            shape_index=negotiated.shape_index,
        )


__all__ = ["Transcriber", "normalize_whisper_output", "transcription_shapes"]
