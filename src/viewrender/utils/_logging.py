"""Logging utilities for viewrender.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to stderr or a log file. Each logger is
self-contained and does not modify global structlog configuration.
"""

import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TextIO, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]


def _log_level_from_string(level: str | None, *, respect_env: bool = True) -> int:
    """Convert a log level string to a logging level integer.

    The level is determined by (in order of precedence):
    1. VIEWRENDER_DEBUG environment variable (if set and respect_env)
    2. The ``level`` argument
    3. VIEWRENDER_LOG_LEVEL environment variable
    4. Default: WARNING

    Args:
        level: Log level string (debug, info, warning, error), or None.
        respect_env: If True, environment variables are consulted.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("VIEWRENDER_DEBUG", None):
        return logging.DEBUG

    if level is None:
        level = getenv("VIEWRENDER_LOG_LEVEL", "warning") if respect_env else "warning"

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def _open_log_target(log_file: str) -> TextIO:
    if not log_file:
        return sys.stderr
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return log_path.open("a", encoding="utf-8")


def create_view_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str = "",
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone structlog logger for view rendering.

    Args:
        level: Log level threshold (debug, info, warning, error). Falls back
            to VIEWRENDER_LOG_LEVEL, then WARNING. VIEWRENDER_DEBUG forces DEBUG.
        log_format: Output format, either "json" or "text".
        log_file: Path to a log file opened in append mode. Empty writes to
            stderr.

    Returns:
        A configured FilteringBoundLogger instance.
    """
    effective_level = _log_level_from_string(level)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        # Structured exception info for render_failed events
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    logger_factory = structlog.WriteLoggerFactory(file=_open_log_target(log_file))

    # wrap_logger leaves the global structlog configuration untouched
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
