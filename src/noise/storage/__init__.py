"""Audio file storage backends."""

from noise.config.models import NoiseConfig
from noise.storage.base import StorageBackend, StorageError, extension_for
from noise.storage.local import LocalStorage
from noise.storage.s3 import S3Storage
from noise.system.path_resolver import PathResolver


def create_storage(config: NoiseConfig, path_resolver: PathResolver) -> StorageBackend:
    """Build the storage backend selected by ``storage.type``."""
    if config.storage.type == "s3":
        return S3Storage(config.storage.s3)
    return LocalStorage(path_resolver.get_uploads_dir(config.upload.upload_dir))


__all__ = [
    "LocalStorage",
    "S3Storage",
    "StorageBackend",
    "StorageError",
    "create_storage",
    "extension_for",
]
