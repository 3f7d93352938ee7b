"""Logging helpers for :mod:`mdcomponents`.

Console output goes to stderr through Rich so that commands which print
rendered HTML on stdout stay pipeable. When a log directory is supplied, a
JSON file handler with daily gzip rotation is installed alongside it.
"""

from __future__ import annotations

import gzip
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import shutil
from typing import Any, Iterable

from rich.console import Console
from rich.logging import RichHandler
import structlog

Logger = structlog.stdlib.BoundLogger

LOG_FILENAME = "mdcomponents.log"

_CONSOLE_RENDERER = structlog.dev.ConsoleRenderer(colors=False)
_JSON_RENDERER = structlog.processors.JSONRenderer(sort_keys=True)
_TIMESTAMPER = structlog.processors.TimeStamper(fmt="iso", utc=True)
_BACKUP_COUNT = 7

_FOREIGN_PRE_CHAIN = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    _TIMESTAMPER,
)


def resolve_level(level: str, *, debug: bool = False) -> int:
    """Return the numeric logging level for ``level``.

    ``debug`` forces :data:`logging.DEBUG` regardless of ``level``.

    Raises:
        ValueError: If the level name is not recognized.

    Example:
        >>> resolve_level("warning")
        30
        >>> resolve_level("error", debug=True)
        10
    """

    if debug:
        return logging.DEBUG
    value = logging.getLevelName(level.strip().upper())
    if isinstance(value, str):  # unknown names are echoed back
        raise ValueError(f"Unsupported log level: {level!r}")
    return value


def _replace_handlers(
    root: logging.Logger,
    handlers: Iterable[logging.Handler],
) -> None:
    for handler in list(root.handlers):
        root.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # pragma: no cover - close failures are irrelevant here
            pass
    for handler in handlers:
        root.addHandler(handler)


def _configure_structlog() -> None:
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            _TIMESTAMPER,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _gzip_rotator(source: str, dest: str) -> None:
    with open(source, "rb") as src, gzip.open(dest, "wb") as target:
        shutil.copyfileobj(src, target)
    Path(source).unlink(missing_ok=True)


def _file_handler(log_file: Path, level: int) -> TimedRotatingFileHandler:
    handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        backupCount=_BACKUP_COUNT,
        utc=True,
        encoding="utf-8",
        delay=True,
    )
    handler.setLevel(level)
    handler.suffix = "%Y-%m-%d"
    handler.namer = lambda name: f"{name}.gz"
    handler.rotator = _gzip_rotator
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_JSON_RENDERER,
            foreign_pre_chain=list(_FOREIGN_PRE_CHAIN),
        )
    )
    return handler


def _console_handler(level: int, console: Console | None) -> RichHandler:
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        markup=False,
        enable_link_path=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=_CONSOLE_RENDERER,
            foreign_pre_chain=list(_FOREIGN_PRE_CHAIN),
        )
    )
    return handler


def configure_logging(
    *,
    level: str = "INFO",
    log_dir: str | Path | None = None,
    debug: bool = False,
    console: Console | None = None,
) -> Path | None:
    """Route structlog and stdlib logging to the console and a log file.

    Args:
        level: Log level name for the root logger (case-insensitive).
        log_dir: Optional directory receiving ``mdcomponents.log``.
        debug: Force ``DEBUG`` level, mirroring the ``debug_mode`` setting.
        console: Optional Rich console override, primarily for tests.

    Returns:
        The log file path when a file handler was installed.

    Raises:
        ValueError: If ``level`` is not a recognized level name.
    """

    log_level = resolve_level(level, debug=debug)

    root = logging.getLogger()
    root.setLevel(log_level)
    _configure_structlog()

    handlers: list[logging.Handler] = [_console_handler(log_level, console)]

    log_file: Path | None = None
    if log_dir is not None:
        directory = Path(log_dir).expanduser().resolve(strict=False)
        directory.mkdir(parents=True, exist_ok=True)
        log_file = directory / LOG_FILENAME
        handlers.append(_file_handler(log_file, log_level))

    _replace_handlers(root, handlers)
    logging.captureWarnings(True)
    return log_file


def get_logger(name: str | None = None, **initial_context: Any) -> Logger:
    """Return a structured logger bound to ``initial_context``.

    Example:
        >>> logger = get_logger(__name__, component="button")
        >>> isinstance(logger, structlog.stdlib.BoundLogger)
        True
    """

    return structlog.get_logger(name).bind(**initial_context)


__all__ = [
    "LOG_FILENAME",
    "Logger",
    "configure_logging",
    "get_logger",
    "resolve_level",
]
