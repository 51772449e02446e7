"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    IMAGE_STORAGE_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SCHOOLS_CREATED,
    increment_schools_created,
    observe_request,
    record_storage_attempt,
)

__all__ = [
    "ERROR_COUNTER",
    "IMAGE_STORAGE_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SCHOOLS_CREATED",
    "increment_schools_created",
    "observe_request",
    "record_storage_attempt",
]
