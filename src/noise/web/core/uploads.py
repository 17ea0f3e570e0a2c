"""Validation of multipart audio uploads."""

import logging
from dataclasses import dataclass

from fastapi import UploadFile

from noise.config.models import UploadConfig
from noise.web.core.errors import ApiError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class AudioUpload:
    """An accepted audio upload held in memory."""

    content: bytes
    filename: str
    mime_type: str


async def read_audio_upload(upload: UploadFile | None, config: UploadConfig) -> AudioUpload:
    """Check an uploaded file against the allowed mime types and size limit.

    Raises:
        ApiError: 400 when the file is missing, of the wrong type or too large
    """
    if upload is None or not upload.filename:
        raise ApiError.bad_request("Audio file is required")

    mime_type = (upload.content_type or "").split(";")[0].strip().lower()
    if mime_type not in config.allowed_mime_types:
        raise ApiError.bad_request(
            f"Invalid file type. Allowed types: {', '.join(config.allowed_mime_types)}",
            error="Invalid File Type",
        )

    limit = config.max_file_size_bytes
    chunks: list[bytes] = []
    size = 0
    while chunk := await upload.read(READ_CHUNK_SIZE):
        size += len(chunk)
        if size > limit:
            logger.info("Rejected upload %s over %d bytes", upload.filename, limit)
            raise ApiError.bad_request(
                f"File size exceeds maximum limit of {config.max_file_size_mb}MB",
                error="File Too Large",
            )
        chunks.append(chunk)

    if size == 0:
        raise ApiError.bad_request("Uploaded audio file is empty", error="Upload Error")

    return AudioUpload(content=b"".join(chunks), filename=upload.filename, mime_type=mime_type)
