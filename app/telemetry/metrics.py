"""Prometheus collectors for the school directory."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Uploads of a few MiB to S3 dominate the slow end of the distribution.
_LATENCY_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 15.0, 30.0)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "HTTP requests served, by route and status",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "Time spent serving HTTP requests",
    ("method", "route"),
    buckets=_LATENCY_BUCKETS,
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Requests answered with a 5xx status",
    ("method", "route"),
)

IMAGE_STORAGE_COUNTER = Counter(
    "image_storage_attempts_total",
    "Image storage attempts by backend and outcome",
    ("backend", "outcome"),
)

SCHOOLS_CREATED = Counter(
    "schools_created_total",
    "School records created",
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record count, latency and 5xx errors for one finished request."""

    labels = {"method": method or "UNKNOWN", "route": route or "unknown"}
    REQUEST_COUNT.labels(status=str(status_code), **labels).inc()
    REQUEST_LATENCY.labels(**labels).observe(max(duration_seconds, 0.0))
    if status_code >= 500:
        ERROR_COUNTER.labels(**labels).inc()


def record_storage_attempt(backend: str, outcome: str) -> None:
    IMAGE_STORAGE_COUNTER.labels(backend=backend, outcome=outcome).inc()


def increment_schools_created() -> None:
    SCHOOLS_CREATED.inc()
