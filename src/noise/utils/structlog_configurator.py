"""Structlog-based logging configuration for NOISE.

This module provides structured logging configuration using structlog.
Standard library loggers are routed through the same processor chain, so
``logging.getLogger(__name__)`` calls across the code base produce the same
structured output.

Supports different deployment targets:
- Docker: Uses stdout with JSON output
- Production: JSON output for log shippers
- Development: Human-readable console output unless JSON is requested
"""

import logging
import os
import sys
from collections.abc import Callable
from importlib import metadata
from typing import Any

import structlog

from noise.config.models import NoiseConfig


def is_docker_environment() -> bool:
    """Check if running in a Docker container."""
    return os.path.exists("/.dockerenv") or os.environ.get("DOCKER_CONTAINER") == "true"


def get_package_version() -> str:
    """Get the installed package version for log context."""
    try:
        return metadata.version("noise-board")
    except metadata.PackageNotFoundError:
        return "unknown"


def get_deployment_environment(config: NoiseConfig) -> str:
    """Get deployment environment name."""
    if is_docker_environment():
        return "docker"
    return config.environment


def _add_static_context(extra_fields: dict[str, str]) -> Callable:
    """Processor to add static context fields to all log entries."""

    def processor(
        logger: structlog.BoundLogger, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for key, value in extra_fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def _shared_processors(config: NoiseConfig) -> list:
    """Build the processors shared by structlog and stdlib log records."""
    extra_fields = {
        "service": "noise",
        "version": get_package_version(),
        "deployment": get_deployment_environment(config),
        **config.logging.extra_fields,  # Allow config to override/add fields
    }

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_static_context(extra_fields),
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
    ]

    if config.logging.include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder())

    return processors


def _use_json(config: NoiseConfig) -> bool:
    """Decide between JSON and human-readable output."""
    if config.logging.json_logs is not None:
        return config.logging.json_logs
    if os.environ.get("NOISE_JSON_LOGS", "").lower() == "true":
        return True
    # Auto-detect: JSON for Docker/production, human-readable otherwise
    return is_docker_environment() or config.is_production


def configure_structlog(config: NoiseConfig) -> None:
    """Configure structlog-based logging system.

    Args:
        config: The NoiseConfig instance containing logging settings.
    """
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)
    shared = _shared_processors(config)
    use_json = _use_json(config)

    renderer = (
        structlog.processors.JSONRenderer()
        if use_json
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*shared, structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Structured logging configured",
        log_level=config.logging.level,
        environment=get_deployment_environment(config),
        json_output=use_json,
    )
