import asyncio
import logging
import uuid
from pathlib import Path

from noise.storage.base import StorageBackend, StorageError, extension_for

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads/"


class LocalStorage(StorageBackend):
    """Stores audio files in a directory served under ``/uploads``."""

    def __init__(self, upload_dir: Path) -> None:
        self.upload_dir = upload_dir.resolve()
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save_file(self, content: bytes, original_name: str, mime_type: str) -> str:
        filename = f"{uuid.uuid4()}{extension_for(mime_type)}"
        file_path = self.upload_dir / filename
        try:
            await asyncio.to_thread(file_path.write_bytes, content)
        except OSError as e:
            raise StorageError(f"Could not save {original_name or 'upload'}: {e}") from e

        logger.info("Saved audio file %s (%d bytes)", filename, len(content))
        return f"{URL_PREFIX}{filename}"

    async def delete_file(self, file_url: str) -> None:
        file_path = self.get_file_path(file_url)
        try:
            await asyncio.to_thread(file_path.unlink)
        except FileNotFoundError:
            logger.warning("Could not delete file, it does not exist: %s", file_path)
        except OSError as e:
            logger.warning("Could not delete file %s: %s", file_path, e)

    def get_file_path(self, file_url: str) -> Path:
        filename = file_url.removeprefix(URL_PREFIX)
        file_path = (self.upload_dir / filename).resolve()
        # Keep resolved paths inside the upload directory
        if file_path.parent != self.upload_dir:
            raise StorageError(f"Refusing path outside upload directory: {file_url}")
        return file_path

    def list_files(self) -> list[Path]:
        """List every stored file."""
        return sorted(p for p in self.upload_dir.iterdir() if p.is_file())

    def url_for(self, file_path: Path) -> str:
        """Public URL of a stored file."""
        return f"{URL_PREFIX}{file_path.name}"
