"""Recording upload endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, File, UploadFile, status

from voxplan.config.dependencies import StorageDep
from voxplan.pipelines.brief import read_upload_bytes, resolve_upload_extension
from voxplan.pipelines.brief.flow import UPLOAD_CATEGORY
from voxplan.services import StorageError, build_object_key
from voxplan.views import UploadResponse

from .errors import ERROR_RESPONSES, api_error

router = APIRouter(tags=["brief"], responses=ERROR_RESPONSES)

logger = logging.getLogger(__name__)

_AUDIO_FILE_UPLOAD = File(None)


@router.post("/upload", response_model=UploadResponse)
async def upload_recording(
    storage: StorageDep,
    file: Optional[UploadFile] = _AUDIO_FILE_UPLOAD,
) -> UploadResponse:
    """Store a recording and return a public and a short-lived signed URL."""

    data = await read_upload_bytes(file)
    extension = resolve_upload_extension(file.filename, file.content_type)
    key = build_object_key(UPLOAD_CATEGORY, extension)

    try:
        stored = await storage.put(key, data, file.content_type or f"audio/{extension}")
    except StorageError as exc:
        logger.exception("Upload failed key=%s", key)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Upload failed", str(exc)) from exc

    return UploadResponse(public_url=stored.public_url, signed_url=stored.url)
