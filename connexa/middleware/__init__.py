"""Application middleware package."""

from .logging import StructuredLoggingMiddleware
from .security import SecurityHeadersMiddleware
from .telemetry import TelemetryMiddleware

__all__ = [
    "SecurityHeadersMiddleware",
    "StructuredLoggingMiddleware",
    "TelemetryMiddleware",
]
