"""Configuration management with environment overrides."""

import logging
import os
import shutil
from collections.abc import Callable, Mapping
from typing import Any

import yaml
from pydantic import ValidationError

from noise.config.models import NoiseConfig
from noise.system.path_resolver import PathResolver

logger = logging.getLogger(__name__)


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _ms_to_seconds(value: str) -> float:
    return int(value) / 1000


# Environment variable -> (config path, converter)
ENV_OVERRIDES: dict[str, tuple[tuple[str, ...], Callable[[str], Any]]] = {
    "PORT": (("server", "port"), int),
    "NODE_ENV": (("environment",), str),
    "NOISE_ENV": (("environment",), str),
    "JWT_SECRET": (("jwt", "secret"), str),
    "JWT_EXPIRES_IN_DAYS": (("jwt", "expires_in_days"), int),
    "CORS_ORIGINS": (("cors", "origins"), _split_csv),
    "MAX_FILE_SIZE_MB": (("upload", "max_file_size_mb"), int),
    "UPLOAD_DIR": (("upload", "upload_dir"), str),
    "STORAGE_TYPE": (("storage", "type"), str),
    "AWS_ACCESS_KEY_ID": (("storage", "s3", "access_key_id"), str),
    "AWS_SECRET_ACCESS_KEY": (("storage", "s3", "secret_access_key"), str),
    "AWS_REGION": (("storage", "s3", "region"), str),
    "S3_BUCKET_NAME": (("storage", "s3", "bucket"), str),
    "S3_ENDPOINT": (("storage", "s3", "endpoint"), str),
    "RATE_LIMIT_WINDOW_MS": (("rate_limit", "window_seconds"), _ms_to_seconds),
    "RATE_LIMIT_MAX_REQUESTS": (("rate_limit", "max_requests"), int),
    "UPLOAD_RATE_LIMIT_WINDOW_MS": (("rate_limit", "upload_window_seconds"), _ms_to_seconds),
    "UPLOAD_RATE_LIMIT_MAX_REQUESTS": (("rate_limit", "upload_max_requests"), int),
}


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(
        self,
        path_resolver: PathResolver | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        """Initialize ConfigManager.

        Args:
            path_resolver: Optional PathResolver instance. If None, creates a new one.
            environ: Environment mapping used for overrides. Defaults to os.environ.
        """
        self.path_resolver = path_resolver or PathResolver()
        self.environ = os.environ if environ is None else environ
        self.config_path = self.path_resolver.get_noise_config_path()

    def load(self) -> NoiseConfig:
        """Load configuration, apply environment overrides and validate.

        Returns:
            NoiseConfig: Loaded and validated configuration

        Raises:
            ValueError: If the resulting configuration is invalid
        """
        self._ensure_config_exists()
        raw_config = self._read_yaml()
        raw_config = self._apply_env_overrides(raw_config)

        try:
            return NoiseConfig(**raw_config)
        except ValidationError as e:
            errors = [
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            raise ValueError(f"Configuration validation failed: {', '.join(errors)}") from e

    def save(self, config: NoiseConfig) -> None:
        """Save configuration to file with backup.

        Args:
            config: Configuration to save

        Raises:
            PermissionError: If config file cannot be written
        """
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            backup_path = self.config_path.with_suffix(".yaml.backup")
            try:
                shutil.copy2(self.config_path, backup_path)
            except PermissionError:
                logger.warning("Could not create backup at %s", backup_path)

        config_yaml = yaml.dump(config.model_dump(), default_flow_style=False, sort_keys=False)
        self.config_path.write_text(config_yaml)
        logger.info("Configuration saved successfully to %s", self.config_path)

    def reload(self) -> NoiseConfig:
        """Reload configuration from disk."""
        return self.load()

    @staticmethod
    def should_enable_debug() -> bool:
        """Check whether verbose debug output was requested via NOISE_DEBUG."""
        return os.getenv("NOISE_DEBUG", "0").lower() in ("1", "true", "yes")

    def _ensure_config_exists(self) -> None:
        """Ensure config file exists, create it from defaults if needed."""
        if not self.config_path.exists():
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            config_yaml = yaml.dump(
                NoiseConfig().model_dump(), default_flow_style=False, sort_keys=False
            )
            self.config_path.write_text(config_yaml)
            logger.info("Created default configuration at %s", self.config_path)

    def _read_yaml(self) -> dict[str, Any]:
        """Read YAML config file.

        Returns:
            dict: Raw configuration dictionary
        """
        config_text = self.config_path.read_text()
        return yaml.safe_load(config_text) or {}

    def _apply_env_overrides(self, raw_config: dict[str, Any]) -> dict[str, Any]:
        """Overlay environment variables onto the raw configuration."""
        for env_name, (path, convert) in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value is None or value == "":
                continue
            try:
                converted = convert(value)
            except ValueError as e:
                raise ValueError(f"Invalid value for {env_name}: {value!r}") from e

            section = raw_config
            for key in path[:-1]:
                if not isinstance(section.get(key), dict):
                    section[key] = {}
                section = section[key]
            section[path[-1]] = converted
        return raw_config
