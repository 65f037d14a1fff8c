"""HTTP contract of the Replicate client."""

from __future__ import annotations

import json

import httpx
import pytest

from voxplan.config.settings import ReplicateConfig
from voxplan.services import JobStatus, MalformedResponse, MissingCredentials, ModelRef, ReplicateClient

BASE_URL = "https://api.replicate.com/v1"


def client_with(handler, token: str | None = "r8_test") -> ReplicateClient:
    http_client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return ReplicateClient(ReplicateConfig(api_token=token), http_client=http_client)


def test_model_ref_parsing():
    assert ModelRef.parse("openai/whisper") == ModelRef(slug="openai/whisper")
    assert ModelRef.parse("openai/whisper:abc123") == ModelRef(slug="openai/whisper", version="abc123")
    assert ModelRef.parse("abc123") == ModelRef(slug=None, version="abc123")
    assert str(ModelRef.parse("openai/whisper:abc123")) == "openai/whisper:abc123"


def test_status_vocabulary_mapping():
    assert JobStatus.from_provider("starting") is JobStatus.QUEUED
    assert JobStatus.from_provider("processing") is JobStatus.RUNNING
    assert JobStatus.from_provider("succeeded") is JobStatus.SUCCEEDED
    assert JobStatus.from_provider("canceled") is JobStatus.CANCELED
    assert JobStatus.from_provider("failed") is JobStatus.FAILED
    assert JobStatus.SUCCEEDED.terminal and not JobStatus.RUNNING.terminal


@pytest.mark.anyio
async def test_slug_only_model_uses_model_predictions_endpoint():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": "p1", "status": "starting", "input": {}})

    client = client_with(handler)
    job = await client.create_prediction("openai/gpt-5", {"prompt": "Bonjour"})

    assert seen[0].url.path == "/v1/models/openai/gpt-5/predictions"
    assert seen[0].headers["Authorization"] == "Bearer r8_test"
    assert json.loads(seen[0].content) == {"input": {"prompt": "Bonjour"}}
    assert job.id == "p1"
    assert job.status is JobStatus.QUEUED
    assert job.model == "openai/gpt-5"


@pytest.mark.anyio
async def test_versioned_model_posts_version_to_predictions():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": "p2", "status": "processing"})

    client = client_with(handler)
    await client.create_prediction("openai/whisper:abc123", {"audio": "https://a/b.webm"})

    assert seen[0].url.path == "/v1/predictions"
    assert json.loads(seen[0].content) == {"version": "abc123", "input": {"audio": "https://a/b.webm"}}


@pytest.mark.anyio
async def test_get_prediction_reads_output_and_error():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/predictions/p3"
        return httpx.Response(200, json={"id": "p3", "status": "failed", "error": "bad audio"})

    job = await client_with(handler).get_prediction("p3", "openai/whisper")

    assert job.status is JobStatus.FAILED
    assert job.error == "bad audio"
    assert job.model == "openai/whisper"


@pytest.mark.anyio
async def test_http_errors_are_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"detail": "invalid input"})

    with pytest.raises(httpx.HTTPStatusError):
        await client_with(handler).create_prediction("owner/model", {})


@pytest.mark.anyio
async def test_missing_token_fails_before_any_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    client = client_with(handler, token=None)
    assert not client.configured
    with pytest.raises(MissingCredentials):
        await client.create_prediction("owner/model", {})


@pytest.mark.anyio
async def test_non_json_success_body_is_malformed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    with pytest.raises(MalformedResponse, match="non-JSON"):
        await client_with(handler).create_prediction("owner/model", {})


@pytest.mark.anyio
async def test_non_mapping_prediction_body_is_malformed():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=["not", "a", "prediction"])

    with pytest.raises(MalformedResponse, match="list"):
        await client_with(handler).get_prediction("p4", "openai/whisper")
