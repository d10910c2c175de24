"""Prometheus metrics for HTTP traffic and the transcription/generation stages."""

from __future__ import annotations

from typing import Optional

from prometheus_client import Counter, Histogram

_NAMESPACE = "audio_processor"

# AI calls dominate latency; the upper buckets cover slow generations.
_HTTP_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)
_GENERATION_BUCKETS = (0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "HTTP requests served, by route template and status",
    ("method", "route", "status"),
    namespace=_NAMESPACE,
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    namespace=_NAMESPACE,
    buckets=_HTTP_BUCKETS,
)
ERROR_COUNTER = Counter(
    "internal_errors_total",
    "Requests that ended in a 5xx response",
    ("method", "route"),
    namespace=_NAMESPACE,
)

TRANSCRIPTION_COUNTER = Counter(
    "transcriptions_total",
    "Audio transcriptions attempted, by outcome",
    ("outcome",),
    namespace=_NAMESPACE,
)
GENERATION_COUNTER = Counter(
    "document_generations_total",
    "Document generations attempted, by processing mode and outcome",
    ("mode", "outcome"),
    namespace=_NAMESPACE,
)
GENERATION_LATENCY = Histogram(
    "document_generation_duration_seconds",
    "Time spent waiting for the AI service to generate a document",
    ("mode",),
    namespace=_NAMESPACE,
    buckets=_GENERATION_BUCKETS,
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    labels = {"method": method or "UNKNOWN", "route": route or "unknown"}
    REQUEST_COUNT.labels(status=str(status_code), **labels).inc()
    REQUEST_LATENCY.labels(**labels).observe(max(duration_seconds, 0))
    if status_code >= 500:
        ERROR_COUNTER.labels(**labels).inc()


def record_transcription(outcome: str) -> None:
    TRANSCRIPTION_COUNTER.labels(outcome=outcome).inc()


def record_generation(
    mode: str,
    outcome: str,
    duration_seconds: Optional[float] = None,
) -> None:
    GENERATION_COUNTER.labels(mode=mode, outcome=outcome).inc()
    if duration_seconds is not None:
        GENERATION_LATENCY.labels(mode=mode).observe(max(duration_seconds, 0))
