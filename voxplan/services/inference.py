"""Single "submit then poll until terminal" contract for every inference stage.

Transcription, completion, JSON repair and speech synthesis all run through
:class:`InferenceGateway`; the stages only differ by model identifier and
payload shape.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol

import httpx

from voxplan.telemetry import record_inference_job

from .errors import JobFailed, InferenceTimeout, MissingCredentials, ProviderUnavailable
from .replicate_client import InferenceJob, JobStatus

logger = logging.getLogger("voxplan.pipeline")


class PredictionClient(Protocol):
    async def create_prediction(
        self, model_ref: str, payload: Mapping[str, Any]
    ) -> InferenceJob: ...

    async def get_prediction(self, job_id: str, model: str = "") -> InferenceJob: ...


class InferenceGateway:
    """Submit predictions and wait for their terminal state."""

    def __init__(
        self,
        client: PredictionClient,
        *,
        poll_interval: float = 2.0,
        max_polls: int = 30,
    ) -> None:
        self._client = client
        self._poll_interval = poll_interval
        self._max_polls = max_polls

    async def submit(self, model_ref: str, payload: Mapping[str, Any]) -> InferenceJob:
        """Start a prediction; synchronous rejections become ``ProviderUnavailable``."""

        try:
            job = await self._client.create_prediction(model_ref, payload)
        except MissingCredentials:
            raise
        except httpx.HTTPStatusError as exc:
            detail = _response_detail(exc.response)
            raise ProviderUnavailable(
                f"{model_ref} rejected the prediction ({exc.response.status_code}): {detail}"
            ) from exc
        except httpx.RequestError as exc:
            raise ProviderUnavailable(f"Unable to reach provider for {model_ref}: {exc}") from exc

        logger.info("Prediction created id=%s model=%s status=%s", job.id, model_ref, job.status.value)
        return job

    async def await_completion(
        self,
        job: InferenceJob,
        *,
        poll_interval: float | None = None,
        max_polls: int | None = None,
        stage: str = "inference",
    ) -> Any:
        """Poll ``job`` at a fixed interval until it succeeds, fails, or the bound runs out."""

        interval = self._poll_interval if poll_interval is None else poll_interval
        limit = self._max_polls if max_polls is None else max_polls

        current = job
        for poll in range(limit + 1):
            if current.status is JobStatus.SUCCEEDED:
                record_inference_job(stage, current.status.value)
                return current.output
            if current.status.terminal:
                record_inference_job(stage, current.status.value)
                raise JobFailed(current.id, current.status.value, current.error)
            if poll == limit:
                break

            await asyncio.sleep(interval)
            try:
                current = await self._client.get_prediction(current.id, current.model)
            except httpx.HTTPError as exc:
                raise ProviderUnavailable(f"Polling prediction {job.id} failed: {exc}") from exc
            logger.debug("Poll %s/%s id=%s status=%s", poll + 1, limit, current.id, current.status.value)

        record_inference_job(stage, "timeout")
        raise InferenceTimeout(current.id, limit)

    async def run(
        self,
        model_ref: str,
        payload: Mapping[str, Any],
        *,
        poll_interval: float | None = None,
        max_polls: int | None = None,
        stage: str = "inference",
    ) -> Any:
        """Submit and wait; the usual entry point for one-shot calls."""

        job = await self.submit(model_ref, payload)
        return await self.await_completion(
            job,
            poll_interval=poll_interval,
            max_polls=max_polls,
            stage=stage,
        )


def _response_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, Mapping):
        return str(body.get("detail") or body.get("title") or body)[:200]
    return str(body)[:200]


__all__ = ["InferenceGateway", "PredictionClient"]
