"""Prometheus instrumentation for every HTTP request."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.routing import BaseRoute

from audio_processor.telemetry import observe_request

_UNMATCHED_ROUTE = "unmatched"


def _route_template(request: Request) -> str:
    # The router only sets scope["route"] once it has matched, so this must
    # run after the downstream call. Raw paths would put session ids in labels.
    route = request.scope.get("route")
    if isinstance(route, BaseRoute):
        return getattr(route, "path", None) or _UNMATCHED_ROUTE
    return _UNMATCHED_ROUTE


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Count requests and time them per route template."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            observe_request(
                request.method,
                _route_template(request),
                status_code,
                time.perf_counter() - started,
            )
