"""Shared fakes for the pipeline tests.

Provider calls never leave the process: :class:`ScriptedClient` answers
``create_prediction`` through a handler so each test decides, per model and
payload, whether a prediction succeeds, fails or is rejected.
"""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable, Mapping

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from voxplan.services import (  # noqa: E402
    CompletionService,
    InferenceGateway,
    InferenceJob,
    JobStatus,
    JsonRepairService,
    ShapeNegotiator,
    StorageError,
    StoredObject,
)

Handler = Callable[[str, dict[str, Any]], Any]


def failed(message: str = "bad input") -> InferenceJob:
    """Handler return value meaning "the provider reported a failure"."""

    return InferenceJob(id="failed", model="", input={}, status=JobStatus.FAILED, error=message)


class ScriptedClient:
    """Prediction client whose jobs finish immediately with the handler's output."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def create_prediction(self, model_ref: str, payload: Mapping[str, Any]) -> InferenceJob:
        data = dict(payload)
        self.calls.append((model_ref, data))
        result = self.handler(model_ref, data)
        if isinstance(result, Exception):
            raise result
        if isinstance(result, InferenceJob):
            return result
        return InferenceJob(
            id=f"job-{len(self.calls)}",
            model=model_ref,
            input=data,
            status=JobStatus.SUCCEEDED,
            output=result,
        )

    async def get_prediction(self, job_id: str, model: str = "") -> InferenceJob:
        raise AssertionError("scripted jobs never need polling")


class FakeStorage:
    """In-memory stand-in for ObjectStorage."""

    def __init__(
        self,
        *,
        fail_put: bool = False,
        fail_rehost: set[int] | None = None,
        sign: bool = True,
    ) -> None:
        self.fail_put = fail_put
        self.sign = sign
        self.fail_rehost = fail_rehost or set()
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.rehosted: list[tuple[str, str, int | None]] = []

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        if self.fail_put:
            raise StorageError("bucket unavailable")
        self.objects[key] = (data, content_type)
        return StoredObject(
            key=key,
            public_url=f"https://bucket.example/{key}",
            signed_url=f"https://bucket.example/{key}?sig=1" if self.sign else None,
            ttl_seconds=3600,
        )

    async def rehost(
        self,
        source_url: str,
        *,
        category: str,
        index: int | None = None,
        fallback_extension: str = "mp3",
        http_client: Any = None,
    ) -> StoredObject:
        if index in self.fail_rehost:
            raise StorageError(f"could not download {source_url}")
        self.rehosted.append((source_url, category, index))
        key = f"{category}/{index}.{fallback_extension}"
        return StoredObject(key=key, public_url=f"https://bucket.example/{key}", signed_url=None, ttl_seconds=3600)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def scripted() -> Callable[[Handler], ScriptedClient]:
    return ScriptedClient


def build_services(client: ScriptedClient) -> tuple[InferenceGateway, ShapeNegotiator, CompletionService, JsonRepairService]:
    gateway = InferenceGateway(client, poll_interval=0, max_polls=3)
    negotiator = ShapeNegotiator(gateway)
    completion = CompletionService(negotiator, model="openai/gpt-5")
    json_repair = JsonRepairService(gateway, model="intelligent-utilities/repair-json", poll_interval=0)
    return gateway, negotiator, completion, json_repair
