"""Thin httpx wrapper around the Replicate predictions API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

import httpx

from voxplan.config.settings import ReplicateConfig

from .errors import MalformedResponse, MissingCredentials

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    """Lifecycle of a prediction as seen by the pipeline."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def terminal(self) -> bool:
        return self in (JobStatus.SUCCEEDED, JobStatus.FAILED, JobStatus.CANCELED)

    @classmethod
    def from_provider(cls, value: Any) -> "JobStatus":
        """Map Replicate's status vocabulary onto ours."""

        raw = str(value or "").strip().lower()
        if raw in ("starting", "queued", ""):
            return cls.QUEUED
        if raw in ("processing", "running"):
            return cls.RUNNING
        if raw == "succeeded":
            return cls.SUCCEEDED
        if raw == "canceled" or raw == "cancelled":
            return cls.CANCELED
        return cls.FAILED


@dataclass(frozen=True)
class InferenceJob:
    """Snapshot of one prediction; every poll returns a fresh instance."""

    id: str
    model: str
    input: Mapping[str, Any]
    status: JobStatus
    output: Any = None
    error: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], model: str = "") -> "InferenceJob":
        error = payload.get("error")
        return cls(
            id=str(payload.get("id") or ""),
            model=str(payload.get("model") or model),
            input=payload.get("input") or {},
            status=JobStatus.from_provider(payload.get("status")),
            output=payload.get("output"),
            error=str(error) if error else None,
        )


@dataclass(frozen=True)
class ModelRef:
    """Model identifier split into slug and optional pinned version."""

    slug: str | None
    version: str | None = None

    @classmethod
    def parse(cls, value: str) -> "ModelRef":
        cleaned = (value or "").strip()
        if ":" in cleaned:
            slug, version = cleaned.split(":", 1)
            return cls(slug=slug or None, version=version or None)
        if "/" in cleaned:
            return cls(slug=cleaned)
        # Bare hashes are version identifiers.
        return cls(slug=None, version=cleaned or None)

    def __str__(self) -> str:
        if self.slug and self.version:
            return f"{self.slug}:{self.version}"
        return self.slug or self.version or ""


def _job_from(response: httpx.Response, model: str) -> InferenceJob:
    """Decode a prediction body; anything else is a malformed provider answer."""

    source = model or "provider"
    try:
        payload = response.json()
    except ValueError as exc:
        raise MalformedResponse(
            f"{source} answered {response.status_code} with a non-JSON body: {response.text[:200]!r}"
        ) from exc
    if not isinstance(payload, Mapping):
        raise MalformedResponse(
            f"{source} answered {response.status_code} with {type(payload).__name__} instead of a prediction"
        )
    return InferenceJob.from_payload(payload, model=model)


class ReplicateClient:
    """Create and fetch predictions over HTTP."""

    def __init__(
        self,
        config: ReplicateConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token = config.api_token.get_secret_value() if config.api_token else ""
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.request_timeout,
        )

    @property
    def configured(self) -> bool:
        return bool(self._token)

    def _headers(self) -> dict[str, str]:
        if not self._token:
            raise MissingCredentials("REPLICATE_API_TOKEN is not configured")
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    async def create_prediction(
        self,
        model_ref: str,
        payload: Mapping[str, Any],
    ) -> InferenceJob:
        """Start a prediction and return its first snapshot."""

        ref = ModelRef.parse(model_ref)
        headers = self._headers()
        if ref.version:
            body: dict[str, Any] = {"version": ref.version, "input": dict(payload)}
            path = "/predictions"
        elif ref.slug:
            body = {"input": dict(payload)}
            path = f"/models/{ref.slug}/predictions"
        else:
            raise ValueError("An empty model reference cannot be submitted")

        logger.debug("POST %s input_keys=%s", path, sorted(payload.keys()))
        response = await self._http.post(path, json=body, headers=headers)
        response.raise_for_status()
        return _job_from(response, str(ref))

    async def get_prediction(self, job_id: str, model: str = "") -> InferenceJob:
        """Fetch the current state of a prediction."""

        response = await self._http.get(f"/predictions/{job_id}", headers=self._headers())
        response.raise_for_status()
        return _job_from(response, model)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()


__all__ = ["InferenceJob", "JobStatus", "ModelRef", "ReplicateClient"]
