import os
from pathlib import Path


class PathResolver:
    """Central authority for all file path resolution in NOISE.

    Uses environment variables for configuration with sensible defaults.
    """

    def __init__(self) -> None:
        """Initialize PathResolver with environment-based configuration."""
        self.app_dir = Path(os.getenv("NOISE_APP", Path(__file__).resolve().parents[3]))
        self.data_dir = Path(os.getenv("NOISE_DATA", "./data"))

    def get_noise_config_path(self) -> Path:
        """Get the path to the main configuration file.

        Checks NOISE_CONFIG environment variable first, then falls back to default.
        """
        config_path = os.getenv("NOISE_CONFIG")
        if config_path:
            return Path(config_path)

        return self.data_dir / "config" / "noise.yaml"

    def get_repo_path(self) -> Path:
        """Get the path to the NOISE repository root."""
        return self.app_dir

    def get_data_dir(self) -> Path:
        """Get the data directory path."""
        return self.data_dir

    def get_database_dir(self) -> Path:
        """Get the directory for database files."""
        return self.data_dir / "database"

    def get_database_path(self) -> Path:
        """Get the path to the main SQLite database."""
        return self.data_dir / "database" / "noise.db"

    def get_uploads_dir(self, upload_dir: str | None = None) -> Path:
        """Get the directory where uploaded audio files are stored.

        Args:
            upload_dir: Optional directory from configuration; relative paths
                are resolved against the data directory.
        """
        if upload_dir:
            path = Path(upload_dir)
            return path if path.is_absolute() else self.data_dir / path
        return self.data_dir / "uploads"
