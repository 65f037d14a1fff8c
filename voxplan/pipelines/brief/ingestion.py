"""Request ingestion helpers (Stage 01 of the brief pipeline)."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Final

from fastapi import HTTPException, UploadFile, status

_EXTENSION_BY_CONTENT_TYPE: Final[dict[str, str]] = {
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/x-m4a": "m4a",
    "audio/m4a": "m4a",
}


def _sanitize(extension: str) -> str:
    return re.sub(r"[^a-z0-9]", "", extension.lower())


def resolve_upload_extension(
    filename: str | None,
    content_type: str | None,
    fallback: str = "webm",
) -> str:
    """File name suffix first, then the MIME type, then ``fallback``."""

    if filename:
        suffix = _sanitize(PurePosixPath(filename).suffix.lstrip("."))
        if suffix:
            return suffix

    if content_type:
        base_type = content_type.split(";", 1)[0].strip().lower()
        mapped = _EXTENSION_BY_CONTENT_TYPE.get(base_type)
        if mapped:
            return mapped

    return _sanitize(fallback) or "webm"


async def read_upload_bytes(upload: UploadFile | None) -> bytes:
    """Load the upload fully into memory, rejecting missing or empty payloads."""

    if upload is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )

    data = await upload.read()
    await upload.close()

    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty",
        )
    return data


__all__ = ["read_upload_bytes", "resolve_upload_extension"]
