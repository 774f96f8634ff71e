"""Structured logging configuration for bizledger."""

import logging
import sys
from typing import Literal, Optional

import structlog

from bizledger.config.settings import Settings


def configure_logging(
    settings: Optional[Settings] = None,
    level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None,
    format: Optional[Literal["json", "console"]] = None,
) -> None:
    """Configure structured logging for the application.

    Log lines go to stderr so command output on stdout stays clean.

    Args:
        settings: Settings to read defaults from
        level: Log level override
        format: Output format override (json or console)
    """
    log_level = level or (settings.log_level if settings else "INFO")
    log_format = format or (settings.log_format if settings else "console")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
