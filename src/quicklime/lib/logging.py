"""Structlog configuration for the quicklime CLI."""

from __future__ import annotations

import logging as std_logging
import os
import sys

import structlog

_LEVELS_BY_NAME: dict[str, int] = {
    "debug": std_logging.DEBUG,
    "info": std_logging.INFO,
    "warning": std_logging.WARNING,
    "error": std_logging.ERROR,
}


def resolve_level(verbosity: int) -> int:
    """Map `-v` count to a level; `QUICKLIME_LOG_LEVEL` wins when set."""

    override = os.getenv("QUICKLIME_LOG_LEVEL", "").strip().lower()
    if override:
        if override not in _LEVELS_BY_NAME:
            raise ValueError(
                f"Invalid environment override 'QUICKLIME_LOG_LEVEL': expected one of "
                f"{sorted(_LEVELS_BY_NAME)}, got {override!r}."
            )
        return _LEVELS_BY_NAME[override]
    if verbosity <= 0:
        return std_logging.WARNING
    if verbosity == 1:
        return std_logging.INFO
    return std_logging.DEBUG


def configure_logging(json_mode: bool = False, verbosity: int = 0) -> None:
    """Send structured logs to stderr, keeping stdout for command output."""

    level = resolve_level(verbosity)
    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    renderer: structlog.typing.Processor = (
        structlog.processors.JSONRenderer() if json_mode else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
