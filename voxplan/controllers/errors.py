"""Translate service failures into HTTP errors with an ``{error, details}`` body."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from voxplan.services import AllShapesExhausted, InferenceError, ProviderUnavailable
from voxplan.views import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def api_error(status_code: int, error: str, details: str | None = None) -> HTTPException:
    body: dict[str, str] = {"error": error}
    if details:
        body["details"] = details
    return HTTPException(status_code=status_code, detail=body)


def inference_http_error(
    exc: InferenceError,
    error: str,
    *,
    exhausted_status: int = status.HTTP_502_BAD_GATEWAY,
) -> HTTPException:
    """Unavailable provider -> 503; every model/shape rejected -> ``exhausted_status``."""

    if isinstance(exc, ProviderUnavailable):
        logger.error("%s: provider unavailable: %s", error, exc)
        return api_error(status.HTTP_503_SERVICE_UNAVAILABLE, error, str(exc))
    if isinstance(exc, AllShapesExhausted):
        logger.error("%s: %s", error, exc)
        return api_error(exhausted_status, error, exc.last_error or str(exc))
    logger.error("%s: %s", error, exc)
    return api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, error, str(exc))


__all__ = ["ERROR_RESPONSES", "api_error", "inference_http_error"]
