"""End-to-end brief endpoint.

For a stage-by-stage map see `voxplan.pipelines.brief.flow.BriefPipeline`.
Upload and transcription failures are returned as errors; outline, reformat
and synthesis problems degrade and are listed under ``warnings``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile, status

from voxplan.config.dependencies import PipelineDep
from voxplan.pipelines.brief import BriefPipeline, read_upload_bytes
from voxplan.services import InferenceError, StorageError
from voxplan.views import OutlineResponse, PipelineResponse, UploadResponse

from .errors import ERROR_RESPONSES, api_error, inference_http_error
from .tts import speech_response

router = APIRouter(tags=["brief"], responses=ERROR_RESPONSES)

logger = logging.getLogger(__name__)

PIPELINE_STAGES = tuple(BriefPipeline.describe())
"""Ordered pipeline metadata used for quick reference and debugging."""

_AUDIO_FILE_UPLOAD = File(None)


@router.post("/pipeline", response_model=PipelineResponse, response_model_exclude_none=True)
async def run_pipeline(
    pipeline: PipelineDep,
    file: Optional[UploadFile] = _AUDIO_FILE_UPLOAD,
) -> PipelineResponse:
    """Upload, transcribe, outline, reformat and voice one recording."""

    data = await read_upload_bytes(file)
    try:
        result = await pipeline.run(data, file.filename, file.content_type)
    except StorageError as exc:
        logger.exception("Pipeline upload failed")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Upload failed", str(exc)) from exc
    except InferenceError as exc:
        raise inference_http_error(exc, "Transcription failed") from exc

    speech = speech_response(result.synthesis) if result.synthesis else None
    return PipelineResponse(
        transcript=result.transcript,
        outline=OutlineResponse(**result.outline.document.model_dump()),
        outcome=result.outline.outcome.value,
        fallback_reason=result.outline.reason.value if result.outline.reason else None,
        spoken_text=result.spoken_text,
        source=UploadResponse(
            public_url=result.source.public_url,
            signed_url=result.source.url,
        ),
        audio_url=speech.audio_url if speech else None,
        audio_urls=speech.audio_urls if speech else None,
        warnings=result.warnings,
    )
