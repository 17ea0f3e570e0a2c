import logging
from pathlib import Path

from noise.config.models import S3Config
from noise.storage.base import StorageBackend, StorageError

logger = logging.getLogger(__name__)


class S3Storage(StorageBackend):
    """Placeholder for S3-backed storage.

    Selected with ``storage.type: s3``; uploads fail until an S3 client is wired in.
    """

    def __init__(self, config: S3Config) -> None:
        self.config = config
        logger.warning(
            "S3 storage selected for bucket %s but not implemented; uploads will fail",
            config.bucket,
        )

    async def save_file(self, content: bytes, original_name: str, mime_type: str) -> str:
        raise StorageError(
            "S3 storage not fully implemented. Use local storage for development."
        )

    async def delete_file(self, file_url: str) -> None:
        raise StorageError("S3 storage not fully implemented.")

    def get_file_path(self, file_url: str) -> Path | str:
        return file_url
