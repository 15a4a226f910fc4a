"""Logging utilities for WalGraph."""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from ..config import get_settings


def configure_logging(log_level: Optional[str] = None) -> None:
    """Configure structured logging for the engine.

    Args:
        log_level: Optional log level to override settings
    """
    settings = get_settings()
    level = log_level or settings.log_level

    # Convert string level to numeric level
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        stream=sys.stderr,
        force=True,
    )

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # JSON lines in production, pretty console output otherwise
    if settings.environment == "production":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=False, exception_formatter=structlog.dev.plain_traceback)
        )

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def log_exception(
    logger: structlog.BoundLogger,
    exc: Exception,
    message: str = "An error occurred",
    level: str = "error",
    **kwargs
) -> None:
    """Log exception with context.

    Args:
        logger: Logger to use
        exc: Exception to log
        message: Message to log
        level: Log level
        **kwargs: Additional context
    """
    log_method = getattr(logger, level.lower())
    log_method(
        message,
        error=str(exc),
        error_type=exc.__class__.__name__,
        **kwargs,
    )
