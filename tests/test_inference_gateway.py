"""Submit-and-poll behaviour of the inference gateway."""

from __future__ import annotations

from typing import Any, Mapping

import httpx
import pytest

from voxplan.services import (
    InferenceGateway,
    InferenceJob,
    InferenceTimeout,
    JobFailed,
    JobStatus,
    MissingCredentials,
    ProviderUnavailable,
)


class SequenceClient:
    """Returns a queued job, then the given statuses one poll at a time."""

    def __init__(self, statuses: list[JobStatus], output: Any = "done", error: str | None = None) -> None:
        self.statuses = list(statuses)
        self.output = output
        self.error = error
        self.polls = 0

    async def create_prediction(self, model_ref: str, payload: Mapping[str, Any]) -> InferenceJob:
        return InferenceJob(id="p-1", model=model_ref, input=dict(payload), status=JobStatus.QUEUED)

    async def get_prediction(self, job_id: str, model: str = "") -> InferenceJob:
        status = self.statuses[min(self.polls, len(self.statuses) - 1)]
        self.polls += 1
        return InferenceJob(
            id=job_id,
            model=model,
            input={},
            status=status,
            output=self.output if status is JobStatus.SUCCEEDED else None,
            error=self.error,
        )


class RaisingClient:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def create_prediction(self, model_ref: str, payload: Mapping[str, Any]) -> InferenceJob:
        raise self.exc

    async def get_prediction(self, job_id: str, model: str = "") -> InferenceJob:
        raise AssertionError("not reached")


@pytest.mark.anyio
async def test_polls_until_success():
    client = SequenceClient([JobStatus.RUNNING, JobStatus.SUCCEEDED], output=["a", "b"])
    gateway = InferenceGateway(client, poll_interval=0, max_polls=5)

    assert await gateway.run("owner/model", {"prompt": "x"}) == ["a", "b"]
    assert client.polls == 2


@pytest.mark.anyio
async def test_failed_job_raises_job_failed():
    client = SequenceClient([JobStatus.FAILED], error="CUDA out of memory")
    gateway = InferenceGateway(client, poll_interval=0, max_polls=5)

    with pytest.raises(JobFailed) as excinfo:
        await gateway.run("owner/model", {})
    assert excinfo.value.error == "CUDA out of memory"
    assert excinfo.value.status == "failed"


@pytest.mark.anyio
async def test_canceled_job_raises_job_failed():
    gateway = InferenceGateway(SequenceClient([JobStatus.CANCELED]), poll_interval=0, max_polls=5)

    with pytest.raises(JobFailed):
        await gateway.run("owner/model", {})


@pytest.mark.anyio
async def test_poll_bound_raises_timeout():
    client = SequenceClient([JobStatus.RUNNING])
    gateway = InferenceGateway(client, poll_interval=0, max_polls=3)

    with pytest.raises(InferenceTimeout) as excinfo:
        await gateway.run("owner/model", {})
    assert client.polls == 3
    assert excinfo.value.polls == 3


@pytest.mark.anyio
async def test_per_call_poll_limit_overrides_default():
    client = SequenceClient([JobStatus.RUNNING])
    gateway = InferenceGateway(client, poll_interval=0, max_polls=30)

    with pytest.raises(InferenceTimeout):
        await gateway.run("owner/model", {}, max_polls=1)
    assert client.polls == 1


@pytest.mark.anyio
async def test_rejected_submission_is_provider_unavailable():
    request = httpx.Request("POST", "https://api.replicate.com/v1/predictions")
    response = httpx.Response(422, json={"detail": "input.audio is required"}, request=request)
    gateway = InferenceGateway(
        RaisingClient(httpx.HTTPStatusError("422", request=request, response=response)),
        poll_interval=0,
    )

    with pytest.raises(ProviderUnavailable) as excinfo:
        await gateway.run("owner/model", {})
    assert "input.audio is required" in str(excinfo.value)


@pytest.mark.anyio
async def test_network_error_is_provider_unavailable():
    request = httpx.Request("POST", "https://api.replicate.com/v1/predictions")
    gateway = InferenceGateway(RaisingClient(httpx.ConnectError("boom", request=request)), poll_interval=0)

    with pytest.raises(ProviderUnavailable):
        await gateway.run("owner/model", {})


@pytest.mark.anyio
async def test_missing_credentials_propagate_unchanged():
    gateway = InferenceGateway(RaisingClient(MissingCredentials("no token")), poll_interval=0)

    with pytest.raises(MissingCredentials):
        await gateway.run("owner/model", {})
