"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    INFERENCE_JOBS,
    OUTLINE_OUTCOMES,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SHAPE_ATTEMPTS,
    observe_request,
    record_inference_job,
    record_outline_outcome,
    record_shape_attempt,
)

__all__ = [
    "ERROR_COUNTER",
    "INFERENCE_JOBS",
    "OUTLINE_OUTCOMES",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SHAPE_ATTEMPTS",
    "observe_request",
    "record_inference_job",
    "record_outline_outcome",
    "record_shape_attempt",
]
