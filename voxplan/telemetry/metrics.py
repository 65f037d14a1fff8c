"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
        60.0,
        120.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

INFERENCE_JOBS = Counter(
    "inference_jobs_total",
    "Predictions that reached a terminal state or timed out",
    ("stage", "status"),
)

SHAPE_ATTEMPTS = Counter(
    "shape_attempts_total",
    "Model/payload combinations tried during shape negotiation",
    ("stage", "result"),
)

OUTLINE_OUTCOMES = Counter(
    "outline_outcomes_total",
    "Outline generations by final outcome",
    ("outcome",),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def record_inference_job(stage: str, status: str) -> None:
    INFERENCE_JOBS.labels(stage=stage or "inference", status=status).inc()


def record_shape_attempt(stage: str, result: str) -> None:
    SHAPE_ATTEMPTS.labels(stage=stage or "inference", result=result).inc()


def record_outline_outcome(outcome: str) -> None:
    OUTLINE_OUTCOMES.labels(outcome=outcome).inc()
