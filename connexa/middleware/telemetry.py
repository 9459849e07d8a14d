"""Telemetry middleware for request instrumentation."""

from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from connexa.telemetry import observe_request

UNMATCHED_ROUTE = "unmatched"


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Collect request metrics for Prometheus, labelled by route template."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            observe_request(
                request.method,
                self._route_template(request),
                status_code,
                time.perf_counter() - start_time,
            )

    @staticmethod
    def _route_template(request: Request) -> str:
        """Return the matched path template (``/groups/{group_id}``), never the raw URL.

        Raw paths would create one label set per group id.
        """

        route = request.scope.get("route")
        path = getattr(route, "path", None)
        return path or UNMATCHED_ROUTE
