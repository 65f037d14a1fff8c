"""Failure taxonomy shared by the inference stages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .shapes import ShapeAttempt


class InferenceError(RuntimeError):
    """Base class for every provider-side failure."""


class ProviderUnavailable(InferenceError):
    """Raised when the provider rejects a prediction outright."""


class MissingCredentials(ProviderUnavailable):
    """Raised when no API token is configured."""


class MalformedResponse(ProviderUnavailable):
    """Raised when the provider answers 2xx with a body that is not a prediction."""


class JobFailed(InferenceError):
    """Raised when a prediction ends as failed or canceled."""

    def __init__(self, job_id: str, status: str, error: str | None = None) -> None:
        self.job_id = job_id
        self.status = status
        self.error = error
        super().__init__(f"Prediction {job_id} {status}: {error or 'no details'}")


class InferenceTimeout(InferenceError):
    """Raised when a prediction is still running after the last allowed poll."""

    def __init__(self, job_id: str, polls: int) -> None:
        self.job_id = job_id
        self.polls = polls
        super().__init__(f"Prediction {job_id} still running after {polls} polls")


class AllShapesExhausted(InferenceError):
    """Raised when no model/payload combination produced an accepted output."""

    def __init__(
        self,
        stage: str,
        last_error: str | None,
        attempts: Sequence["ShapeAttempt"] = (),
    ) -> None:
        self.stage = stage
        self.last_error = last_error
        self.attempts = tuple(attempts)
        super().__init__(
            f"All {stage} input shapes failed after {len(self.attempts)} attempts"
        )


class SchemaInvalid(ValueError):
    """Raised when model output does not satisfy the outline contract."""


class SynthesisError(RuntimeError):
    """Raised when no chunk of a text could be synthesized."""


__all__ = [
    "InferenceError",
    "ProviderUnavailable",
    "MissingCredentials",
    "MalformedResponse",
    "JobFailed",
    "InferenceTimeout",
    "AllShapesExhausted",
    "SchemaInvalid",
    "SynthesisError",
]
