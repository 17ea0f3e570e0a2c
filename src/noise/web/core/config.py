"""Configuration loading for the web application."""

from noise.config import ConfigManager, NoiseConfig
from noise.system.path_resolver import PathResolver


def get_config(path_resolver: PathResolver | None = None) -> NoiseConfig:
    """Load NOISE configuration.

    Uses ConfigManager, which handles the YAML file and environment overrides.

    Args:
        path_resolver: Optional PathResolver instance to use. If not provided,
                      creates a new PathResolver instance.

    Returns:
        NoiseConfig: The loaded and validated configuration.
    """
    if path_resolver is None:
        path_resolver = PathResolver()
    return ConfigManager(path_resolver).load()
