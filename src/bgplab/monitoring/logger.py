"""Structured logging configuration using structlog."""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from bgplab.config import settings


def add_log_level(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level to event dict."""
    event_dict["level"] = method_name.upper()
    return event_dict


def configure_logging() -> structlog.BoundLogger:
    """
    Configure structured logging with JSON output to stdout.

    Validation rejections are logged at INFO and reach Sentry (when enabled)
    only as breadcrumbs. ERROR and above become Sentry issues.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Sentry's LoggingIntegration must be installed before logging is configured
    from bgplab.monitoring.sentry_helper import init_sentry

    sentry_enabled = init_sentry()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger()
    if sentry_enabled:
        logger.info("sentry_logging_enabled", breadcrumbs="INFO+", issues="ERROR+")

    return logger  # type: ignore[no-any-return]


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a logger instance for a specific module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
