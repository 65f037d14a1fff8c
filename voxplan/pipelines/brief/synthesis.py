"""TTS synthesis stage (Stage 05) of the brief pipeline."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from voxplan.config.settings import VoiceConfig
from voxplan.services import (
    AllShapesExhausted,
    ObjectStorage,
    ShapeNegotiator,
    StorageError,
    SynthesisError,
)

from .chunking import chunk_text
from .normalizer import prepare_for_synthesis
from .types import AudioArtifact, SynthesisResult, TextChunk

logger = logging.getLogger("voxplan.pipeline")

TTS_CATEGORY = "tts"


def extract_audio_url(output: Any) -> str | None:
    """Speech models answer with a URL, a list of URLs or ``{"audio": url}``."""

    if isinstance(output, list) and output:
        output = output[0]
    if isinstance(output, dict):
        output = output.get("audio")
    if isinstance(output, str) and output.strip():
        return output.strip()
    return None


def synthesis_shapes(text: str, voice: VoiceConfig) -> list[dict[str, Any]]:
    return [
        {
            "text": text,
            "voice_id": voice.voice_id,
            "speed": voice.speed,
            "volume": voice.volume,
            "pitch": voice.pitch,
            "sample_rate": voice.sample_rate,
            "bitrate": voice.bitrate,
            "channel": voice.channel,
            "english_normalization": False,
            "language_boost": voice.language_boost,
        },
        {
            "text": text,
            "voice": voice.voice_id,
            "speed": voice.speed,
            "volume": voice.volume,
            "pitch": voice.pitch,
        },
        {"prompt": text, "voice_id": voice.voice_id},
        {"input": text, "voice_id": voice.voice_id},
    ]


class SpeechSynthesizer:
    """Chunk, voice and persist text; one audio artifact per chunk."""

    def __init__(
        self,
        negotiator: ShapeNegotiator,
        storage: ObjectStorage,
        *,
        model: str,
        voice: VoiceConfig,
        chunk_max_length: int = 1400,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._negotiator = negotiator
        self._storage = storage
        self._model = model
        self._voice = voice
        self._chunk_max_length = chunk_max_length
        self._http_client = http_client

    async def synthesize(self, text: str) -> SynthesisResult:
        prepared = prepare_for_synthesis(text)
        chunks = chunk_text(prepared, self._chunk_max_length)
        if not chunks:
            raise SynthesisError("No text to synthesize")

        logger.info("Synthesizing %s chunk(s), %s chars", len(chunks), len(prepared))
        artifacts: list[AudioArtifact] = []
        for chunk in chunks:
            artifact = await self._synthesize_chunk(chunk, total=len(chunks))
            if artifact is not None:
                artifacts.append(artifact)

        if not artifacts:
            raise SynthesisError("No audio generated")
        return SynthesisResult(artifacts=tuple(artifacts), chunk_count=len(chunks))

    async def _synthesize_chunk(self, chunk: TextChunk, *, total: int) -> AudioArtifact | None:
        try:
            negotiated = await self._negotiator.try_shapes(
                self._model,
                synthesis_shapes(chunk.text, self._voice),
                lambda output: extract_audio_url(output) is not None,
                stage="synthesis",
            )
        except AllShapesExhausted as exc:
            logger.error("Chunk %s/%s produced no audio: %s", chunk.index + 1, total, exc)
            return None

        provider_url = extract_audio_url(negotiated.output)
        if provider_url is None:
            return None

        persisted_url: str | None = None
        try:
            stored = await self._storage.rehost(
                provider_url,
                category=TTS_CATEGORY,
                index=chunk.index,
                fallback_extension=self._voice.audio_format,
                http_client=self._http_client,
            )
            persisted_url = stored.url
        except StorageError as exc:
            logger.warning(
                "Could not persist chunk %s audio, keeping provider URL: %s",
                chunk.index + 1,
                exc,
            )

        return AudioArtifact(
            index=chunk.index,
            source_text=chunk.text,
            provider_url=provider_url,
            persisted_url=persisted_url,
        )


__all__ = ["SpeechSynthesizer", "extract_audio_url", "synthesis_shapes"]
