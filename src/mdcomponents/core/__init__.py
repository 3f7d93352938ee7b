"""Core utilities shared across :mod:`mdcomponents`.

Configuration loading, logging setup and workspace path resolution live here
so the component modules stay free of host concerns.

Example:
    >>> from mdcomponents.core import get_logger
    >>> logger = get_logger(__name__)
    >>> isinstance(logger, object)
    True
"""

from __future__ import annotations

from .config import AppConfig, ComponentSettings, ConfigError, load_config
from .logging import configure_logging, get_logger
from .paths import WorkspacePaths, resolve_workspace

__all__ = [
    "AppConfig",
    "ComponentSettings",
    "ConfigError",
    "configure_logging",
    "get_logger",
    "load_config",
    "WorkspacePaths",
    "resolve_workspace",
]
