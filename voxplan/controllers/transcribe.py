"""Speech-to-text endpoint."""

from fastapi import APIRouter

from voxplan.config.dependencies import TranscriberDep
from voxplan.services import InferenceError
from voxplan.views import TranscribeRequest, TranscribeResponse

from .errors import ERROR_RESPONSES, inference_http_error

router = APIRouter(tags=["brief"], responses=ERROR_RESPONSES)


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(request: TranscribeRequest, transcriber: TranscriberDep) -> TranscribeResponse:
    try:
        outcome = await transcriber.transcribe(request.audio_url)
    except InferenceError as exc:
        raise inference_http_error(exc, "Transcription failed") from exc
    return TranscribeResponse(transcript=outcome.transcript)
