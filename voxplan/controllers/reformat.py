"""Spoken-word reformatting endpoint."""

from fastapi import APIRouter, status

from voxplan.config.dependencies import ReformatterDep
from voxplan.services import InferenceError
from voxplan.views import ReformatResponse, TextRequest

from .errors import ERROR_RESPONSES, api_error, inference_http_error

router = APIRouter(tags=["text"], responses=ERROR_RESPONSES)


@router.post("/reformat", response_model=ReformatResponse)
async def reformat(request: TextRequest, reformatter: ReformatterDep) -> ReformatResponse:
    try:
        text = await reformatter.reformat(request.text)
    except InferenceError as exc:
        raise inference_http_error(
            exc,
            "Reformatting failed",
            exhausted_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        ) from exc
    if not text:
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Reformatting failed", "Empty output")
    return ReformatResponse(reformatted_text=text)
