"""NOISE configuration package.

This package provides centralized configuration management with:
- Typed settings models
- YAML parsing and serialization
- Environment variable overrides
"""

from .manager import ConfigManager
from .models import NoiseConfig

__all__ = [
    "ConfigManager",
    "NoiseConfig",
]
