"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from app.telemetry import observe_request

# Asset and scrape traffic would drown the per-route series.
_UNTRACKED_PREFIXES = ("/metrics", "/static/")


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request metrics for Prometheus."""

    def __init__(self, app, *, untracked_prefixes: tuple[str, ...] = _UNTRACKED_PREFIXES) -> None:
        super().__init__(app)
        self._untracked_prefixes = untracked_prefixes

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        if request.url.path.startswith(self._untracked_prefixes):
            return await call_next(request)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            observe_request(
                request.method,
                self._route_label(request),
                500,
                time.perf_counter() - start_time,
            )
            raise

        observe_request(
            request.method,
            self._route_label(request),
            response.status_code,
            time.perf_counter() - start_time,
        )
        return response

    @staticmethod
    def _route_label(request: Request) -> str:
        """Use the matched route template; unmatched paths share one label."""

        route = request.scope.get("route")
        path = getattr(route, "path", None)
        if path:
            return path
        if request.url.path.startswith("/schoolImages/"):
            return "/schoolImages"
        return "unmatched"
