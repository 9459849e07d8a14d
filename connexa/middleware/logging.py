"""Structured logging middleware for FastAPI requests."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from connexa.utils import AuthenticationError, decode_access_token

logger = logging.getLogger("connexa.middleware.structured")

COLOR_RESET = "\u001b[0m"
COLOR_GREEN = "\u001b[32m"
COLOR_CYAN = "\u001b[36m"
COLOR_YELLOW = "\u001b[33m"
COLOR_RED = "\u001b[31m"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one log line per HTTP request."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        log_payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "url": str(request.url),
            "client_ip": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception as exc:
            log_payload["status_code"] = 500
            log_payload["duration_ms"] = self._elapsed_ms(start_time)
            log_payload["user_id"] = self._resolve_user_id(request)
            log_payload["error"] = repr(exc)
            logger.exception(self._format_console_message(log_payload))
            raise

        log_payload["status_code"] = response.status_code
        log_payload["duration_ms"] = self._elapsed_ms(start_time)
        log_payload["user_id"] = self._resolve_user_id(request)
        logger.info(self._format_console_message(log_payload))
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        """Return elapsed milliseconds rounded to two decimals."""

        return round((time.perf_counter() - start_time) * 1000, 2)

    @classmethod
    def _resolve_user_id(cls, request: Request) -> Optional[int]:
        """Best-effort caller id: ``request.state.user_id`` first, then the bearer token."""

        user_id = getattr(request.state, "user_id", None)
        if user_id is not None:
            return user_id

        token = cls._extract_bearer_token(request)
        if not token:
            return None

        try:
            return decode_access_token(token).user_id
        except (AuthenticationError, ValueError):
            return None

    @staticmethod
    def _extract_bearer_token(request: Request) -> Optional[str]:
        """Return the bearer token from the request headers when present."""

        auth_header = request.headers.get("authorization")
        if not auth_header:
            return None

        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None

        return token

    @staticmethod
    def _format_console_message(payload: dict[str, Any]) -> str:
        """Return request metadata wrapped with ANSI color codes."""

        status = payload.get("status_code") or 0
        if 200 <= status < 300:
            color = COLOR_GREEN
        elif 400 <= status < 500:
            color = COLOR_YELLOW
        elif status >= 500:
            color = COLOR_RED
        else:
            color = COLOR_CYAN

        fields = (
            "timestamp",
            "method",
            "url",
            "status_code",
            "duration_ms",
            "client_ip",
            "user_id",
        )
        message = ", ".join(
            f"{name}={payload[name] if payload.get(name) is not None else '-'}"
            for name in fields
        )
        return f"{color}{message}{COLOR_RESET}"
