"""Typed containers shared across the brief pipeline.

These dataclasses live in their own module so the stages (`outline`,
`transcription`, `synthesis`, `flow`) can import them without circular
dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from voxplan.services.outline_contract import OutlineDocument
from voxplan.services.storage import StoredObject


class OutlineOutcome(str, Enum):
    PARSED = "parsed"
    REPAIRED = "repaired"
    FALLBACK = "fallback"


class FallbackReason(str, Enum):
    EMPTY_TRANSCRIPT = "empty_transcript"
    GENERATION_FAILED = "generation_failed"
    SCHEMA_INVALID = "schema_invalid"


@dataclass(frozen=True)
class OutlineResult:
    """Validated outline, or the fallback document with the reason it was used."""

    document: OutlineDocument
    outcome: OutlineOutcome
    reason: FallbackReason | None = None
    corrected_fields: tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return self.outcome is OutlineOutcome.FALLBACK


@dataclass(frozen=True)
class TextChunk:
    index: int
    text: str


@dataclass(frozen=True)
class AudioArtifact:
    """Synthesized audio for one chunk."""

    index: int
    source_text: str
    provider_url: str
    persisted_url: str | None = None

    @property
    def url(self) -> str:
        return self.persisted_url or self.provider_url

    @property
    def durable(self) -> bool:
        return self.persisted_url is not None


@dataclass(frozen=True)
class SynthesisResult:
    artifacts: tuple[AudioArtifact, ...]
    chunk_count: int

    @property
    def urls(self) -> list[str]:
        return [artifact.url for artifact in self.artifacts]


@dataclass(frozen=True)
class TranscriptionOutcome:
    transcript: str
    model: str
    shape_index: int


@dataclass(frozen=True)
class ValidationReport:
    is_valid: bool
    has_problems: bool
    corrected_text: str


@dataclass
class PipelineResult:
    """Everything one end-to-end run produced."""

    source: StoredObject
    transcript: str
    outline: OutlineResult
    spoken_text: str
    synthesis: SynthesisResult | None = None
    warnings: list[str] = field(default_factory=list)


__all__ = [
    "AudioArtifact",
    "FallbackReason",
    "OutlineOutcome",
    "OutlineResult",
    "PipelineResult",
    "SynthesisResult",
    "TextChunk",
    "TranscriptionOutcome",
    "ValidationReport",
]
