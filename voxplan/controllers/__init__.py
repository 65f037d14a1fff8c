"""FastAPI routers acting as controllers in the MVC architecture."""

from . import analyze, pipeline, reformat, transcribe, tts, upload, validate

__all__ = ["analyze", "pipeline", "reformat", "transcribe", "tts", "upload", "validate"]
