"""Storage backend interface for uploaded audio files."""

from abc import ABC, abstractmethod
from pathlib import Path

MIME_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/ogg": ".ogg",
    "audio/wav": ".wav",
    "audio/wave": ".wav",
    "audio/x-wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
}
DEFAULT_EXTENSION = ".webm"


class StorageError(Exception):
    """A storage backend could not complete an operation."""


def extension_for(mime_type: str) -> str:
    """Pick the file extension for an audio mime type, falling back to ``.webm``."""
    return MIME_EXTENSIONS.get(mime_type.split(";")[0].strip().lower(), DEFAULT_EXTENSION)


class StorageBackend(ABC):
    """Persists audio files and hands back the URL clients fetch them from."""

    @abstractmethod
    async def save_file(self, content: bytes, original_name: str, mime_type: str) -> str:
        """Store ``content`` and return its public URL."""

    @abstractmethod
    async def delete_file(self, file_url: str) -> None:
        """Remove the file behind ``file_url``; missing files are not an error."""

    @abstractmethod
    def get_file_path(self, file_url: str) -> Path | str:
        """Resolve ``file_url`` to where the backend keeps the file."""
