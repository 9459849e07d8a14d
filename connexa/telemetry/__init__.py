"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    GROUP_EVENTS,
    LOGIN_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    increment_login,
    observe_request,
    record_group_event,
)

__all__ = [
    "ERROR_COUNTER",
    "GROUP_EVENTS",
    "LOGIN_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "increment_login",
    "observe_request",
    "record_group_event",
]
