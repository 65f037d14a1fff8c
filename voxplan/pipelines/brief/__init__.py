"""Voice brief pipeline package.

Modules are organised by the order in which `/pipeline` executes:

1. `ingestion` – validate the upload and pick a storage extension.
2. `transcription` – Whisper through the shape negotiator.
3. `outline` – outline generation, JSON repair and field spacing checks.
4. `reformat` – spoken-word rewrite of the draft.
5. `synthesis` – chunked TTS with re-hosting.

`normalizer`/`spacing` hold the pure text clean-up shared by every stage and
`flow` ties the stages together.
"""

from .chunking import chunk_text
from .flow import BriefPipeline, PipelineStage, pick_source_text
from .ingestion import read_upload_bytes, resolve_upload_extension
from .normalizer import (
    normalize_for_display,
    normalize_prose,
    prepare_for_synthesis,
    strip_invisibles,
)
from .outline import OutlineOrchestrator
from .reformat import SpeechReformatter
from .spacing import SpacingDictionary, detect_garbling, load_dictionary, repair_spacing_heuristically
from .synthesis import SpeechSynthesizer
from .transcription import Transcriber
from .types import (
    AudioArtifact,
    FallbackReason,
    OutlineOutcome,
    OutlineResult,
    PipelineResult,
    SynthesisResult,
    TextChunk,
    TranscriptionOutcome,
    ValidationReport,
)
from .validation import TextValidator

__all__ = [
    "AudioArtifact",
    "BriefPipeline",
    "FallbackReason",
    "OutlineOrchestrator",
    "OutlineOutcome",
    "OutlineResult",
    "PipelineResult",
    "PipelineStage",
    "SpacingDictionary",
    "SpeechReformatter",
    "SpeechSynthesizer",
    "SynthesisResult",
    "TextChunk",
    "TextValidator",
    "Transcriber",
    "TranscriptionOutcome",
    "ValidationReport",
    "chunk_text",
    "detect_garbling",
    "load_dictionary",
    "normalize_for_display",
    "normalize_prose",
    "pick_source_text",
    "prepare_for_synthesis",
    "read_upload_bytes",
    "repair_spacing_heuristically",
    "resolve_upload_extension",
    "strip_invisibles",
]
