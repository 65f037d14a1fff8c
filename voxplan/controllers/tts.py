"""Text-to-speech endpoint backed by the chunked synthesizer."""

import logging

from fastapi import APIRouter, status

from voxplan.config.dependencies import SynthesizerDep
from voxplan.pipelines.brief import SynthesisResult
from voxplan.services import InferenceError, SynthesisError
from voxplan.views import SpeechResponse, TextRequest

from .errors import ERROR_RESPONSES, api_error, inference_http_error

router = APIRouter(tags=["tts"], responses=ERROR_RESPONSES)

logger = logging.getLogger(__name__)


def speech_response(result: SynthesisResult) -> SpeechResponse:
    """One chunk gives ``audioUrl``; several give the ordered ``audioUrls``."""

    urls = result.urls
    if len(urls) == 1:
        return SpeechResponse(audio_url=urls[0])
    return SpeechResponse(audio_urls=urls)


@router.post("/tts", response_model=SpeechResponse, response_model_exclude_none=True)
async def text_to_speech(request: TextRequest, synthesizer: SynthesizerDep) -> SpeechResponse:
    try:
        result = await synthesizer.synthesize(request.text)
    except SynthesisError as exc:
        logger.error("TTS produced no audio: %s", exc)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "No audio generated", str(exc)) from exc
    except InferenceError as exc:
        raise inference_http_error(
            exc,
            "Speech synthesis failed",
            exhausted_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        ) from exc
    return speech_response(result)
