"""Prometheus instrumentation for HTTP requests."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from voxplan.telemetry import observe_request

_UNINSTRUMENTED_PATHS = frozenset({"/metrics"})


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Count requests and time them per route template."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path in _UNINSTRUMENTED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            # The matched route is only known once routing has run.
            observe_request(
                request.method,
                _route_template(request),
                status_code,
                time.perf_counter() - start_time,
            )
        return response


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or request.url.path


__all__ = ["TelemetryMiddleware"]
