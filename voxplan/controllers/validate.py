"""Spacing-corruption check endpoint."""

from fastapi import APIRouter, status

from voxplan.config.dependencies import ValidatorDep
from voxplan.services import InferenceError
from voxplan.views import ValidateRequest, ValidateResponse

from .errors import ERROR_RESPONSES, inference_http_error

router = APIRouter(tags=["text"], responses=ERROR_RESPONSES)


@router.post("/validate", response_model=ValidateResponse)
async def validate(request: ValidateRequest, validator: ValidatorDep) -> ValidateResponse:
    try:
        report = await validator.validate(request.text, request.field)
    except InferenceError as exc:
        raise inference_http_error(
            exc,
            "Validation failed",
            exhausted_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        ) from exc
    return ValidateResponse(
        is_valid=report.is_valid,
        has_problems=report.has_problems,
        corrected_text=report.corrected_text,
    )
