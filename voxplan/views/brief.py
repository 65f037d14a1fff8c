"""Request and response schemas for the brief endpoints.

Field names on the wire are camelCase to match the browser client.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class UploadResponse(CamelModel):
    public_url: str = Field(alias="publicUrl")
    signed_url: str = Field(alias="signedUrl")


class TranscribeRequest(CamelModel):
    audio_url: str = Field(alias="audioUrl", min_length=1)


class TranscribeResponse(CamelModel):
    transcript: str


class AnalyzeRequest(CamelModel):
    transcript: str = ""

    @field_validator("transcript", mode="before")
    @classmethod
    def text_or_empty(cls, value: Any) -> str:
        # null or non-string transcripts get the empty-transcript outline
        return value if isinstance(value, str) else ""


class OutlineResponse(CamelModel):
    task_understanding: str
    introduction: str
    detailed_plan: str
    conclusion: str
    draft: str


class TextRequest(CamelModel):
    text: str = Field(min_length=1)


class ReformatResponse(CamelModel):
    reformatted_text: str = Field(alias="reformattedText")


class ValidateRequest(TextRequest):
    field: Optional[str] = None


class ValidateResponse(CamelModel):
    is_valid: bool = Field(alias="isValid")
    has_problems: bool = Field(alias="hasProblems")
    corrected_text: str = Field(alias="correctedText")


class SpeechResponse(CamelModel):
    audio_url: Optional[str] = Field(default=None, alias="audioUrl")
    audio_urls: Optional[List[str]] = Field(default=None, alias="audioUrls")


class PipelineResponse(SpeechResponse):
    transcript: str
    outline: OutlineResponse
    outcome: str
    fallback_reason: Optional[str] = Field(default=None, alias="fallbackReason")
    spoken_text: str = Field(alias="spokenText")
    source: UploadResponse
    warnings: List[str] = []
