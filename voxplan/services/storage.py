"""S3 storage helpers for uploaded briefs and synthesized audio."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse
from uuid import uuid4

import httpx
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from voxplan.config.settings import StorageConfig

from .aws import create_boto3_client

logger = logging.getLogger("voxplan.pipeline")

_MIME_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mp4": "m4a",
    "audio/aac": "aac",
}


class StorageError(RuntimeError):
    """Raised when S3 asset persistence fails."""


@dataclass(frozen=True)
class StoredObject:
    """Location of a persisted object."""

    key: str
    public_url: str
    signed_url: str | None
    ttl_seconds: int

    @property
    def url(self) -> str:
        return self.signed_url or self.public_url


def _sanitize_extension(value: str | None) -> str:
    return re.sub(r"[^a-z0-9]", "", (value or "").lower())


def build_object_key(category: str, extension: str, index: int | None = None) -> str:
    """Return ``{category}/{timestamp}-{index?}-{random}.{ext}``."""

    parts = [str(int(time.time() * 1000))]
    if index is not None:
        parts.append(str(index))
    parts.append(uuid4().hex[:12])
    ext = _sanitize_extension(extension) or "bin"
    return f"{category.strip('/')}/{'-'.join(parts)}.{ext}"


def extension_for(
    content_type: str | None,
    url: str | None = None,
    fallback: str = "mp3",
) -> str:
    """Derive an extension from a MIME type, then a URL path suffix, then ``fallback``."""

    mime = (content_type or "").split(";")[0].strip().lower()
    if mime in _MIME_EXTENSIONS:
        return _MIME_EXTENSIONS[mime]
    if mime.startswith("audio/"):
        candidate = _sanitize_extension(mime.removeprefix("audio/"))
        if candidate:
            return candidate

    if url:
        path = urlparse(url).path.lower()
        match = re.search(r"\.([a-z0-9]+)$", path)
        if match:
            return match.group(1)

    return _sanitize_extension(fallback) or "mp3"


class ObjectStorage:
    """Put objects in the configured bucket and hand out retrievable URLs."""

    def __init__(
        self,
        config: StorageConfig,
        *,
        s3_client: Any | None = None,
    ) -> None:
        self._config = config
        self._client = s3_client or create_boto3_client("s3", config)

    @property
    def bucket(self) -> str:
        return self._config.bucket_name

    def public_url(self, key: str) -> str:
        if self._config.endpoint_url:
            return f"{self._config.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        region = self._config.region
        if region == "us-east-1":
            return f"https://{self.bucket}.s3.amazonaws.com/{key}"
        return f"https://{self.bucket}.s3.{region}.amazonaws.com/{key}"

    async def signed_url(self, key: str, ttl_seconds: int | None = None) -> str:
        ttl = ttl_seconds or self._config.signed_url_ttl
        try:
            return await run_in_threadpool(
                self._client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to sign {key}: {exc}") from exc

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        """Write ``data`` under ``key``; keys are unique so writes never overwrite."""

        if not data:
            raise StorageError("Payload for upload was empty.")
        if not self.bucket:
            raise StorageError("S3 bucket name is not configured.")

        try:
            await run_in_threadpool(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Failed to upload {key}: {exc}") from exc

        ttl = self._config.signed_url_ttl
        try:
            signed = await self.signed_url(key, ttl)
        except StorageError as exc:
            logger.warning("Signed URL unavailable for %s, using public URL: %s", key, exc)
            signed = None

        return StoredObject(
            key=key,
            public_url=self.public_url(key),
            signed_url=signed,
            ttl_seconds=ttl,
        )

    async def rehost(
        self,
        source_url: str,
        *,
        category: str,
        index: int | None = None,
        fallback_extension: str = "mp3",
        http_client: httpx.AsyncClient | None = None,
    ) -> StoredObject:
        """Copy an ephemeral provider URL into the bucket."""

        owns_client = http_client is None
        client = http_client or httpx.AsyncClient(timeout=60.0, follow_redirects=True)
        try:
            response = await client.get(source_url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise StorageError(f"Could not download {source_url}: {exc}") from exc
        finally:
            if owns_client:
                await client.aclose()

        header_type = response.headers.get("content-type", "")
        extension = extension_for(header_type, source_url, fallback_extension)
        content_type = header_type if header_type.startswith("audio/") else f"audio/{extension}"
        key = build_object_key(category, extension, index)
        return await self.put(key, response.content, content_type)


__all__ = [
    "ObjectStorage",
    "StorageError",
    "StoredObject",
    "build_object_key",
    "extension_for",
]
