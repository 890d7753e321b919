"""Structured logging setup."""

import logging
import sys
from typing import Optional

import structlog

from .config import IndexSettings, get_settings


def configure_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    settings: Optional[IndexSettings] = None,
) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        level: Log level name for the root logger; defaults to
            ``settings.log_level``
        fmt: ``json`` for machine readable output, ``console`` for humans;
            defaults to ``settings.log_format``
        settings: Settings to read missing values from
    """
    if level is None or fmt is None:
        settings = settings or get_settings()
        level = level or settings.log_level
        fmt = fmt or settings.log_format

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    if fmt == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
