"""Pydantic schemas used as views in the MVC architecture."""

from .brief import (
    AnalyzeRequest,
    OutlineResponse,
    PipelineResponse,
    ReformatResponse,
    SpeechResponse,
    TextRequest,
    TranscribeRequest,
    TranscribeResponse,
    UploadResponse,
    ValidateRequest,
    ValidateResponse,
)
from .common import ErrorResponse

__all__ = [
    "AnalyzeRequest",
    "ErrorResponse",
    "OutlineResponse",
    "PipelineResponse",
    "ReformatResponse",
    "SpeechResponse",
    "TextRequest",
    "TranscribeRequest",
    "TranscribeResponse",
    "UploadResponse",
    "ValidateRequest",
    "ValidateResponse",
]
