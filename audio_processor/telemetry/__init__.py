"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    GENERATION_COUNTER,
    GENERATION_LATENCY,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    TRANSCRIPTION_COUNTER,
    observe_request,
    record_generation,
    record_transcription,
)

__all__ = [
    "ERROR_COUNTER",
    "GENERATION_COUNTER",
    "GENERATION_LATENCY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "TRANSCRIPTION_COUNTER",
    "observe_request",
    "record_generation",
    "record_transcription",
]
