"""Sentry integration helper functions.

Sentry is configured with LoggingIntegration, which captures records from
Python's logging module (which structlog writes to):

1. INFO+ logs become breadcrumbs, so every validation step leading up to a
   failure is visible in the issue
2. ERROR+ logs become issues

Validation rejections are expected user-facing outcomes and are logged at
INFO via log_validation_outcome(). Only unexpected exceptions are captured
as issues, via capture_engine_error().

Usage:
    from bgplab.monitoring.sentry_helper import capture_engine_error

    try:
        run_walkthrough(session)
    except Exception as e:
        capture_engine_error("demo", str(e), exception=e)
"""

from typing import Any

import structlog

from bgplab.config import settings
from bgplab.protocol.types import Outcome

logger = structlog.get_logger(__name__)

# Track if Sentry is enabled
_sentry_enabled = False
_sentry_sdk = None


def init_sentry() -> bool:
    """
    Initialize Sentry SDK if configured.

    Returns:
        True if Sentry was initialized, False otherwise
    """
    global _sentry_enabled, _sentry_sdk

    if not settings.sentry_dsn:
        logger.debug("sentry_disabled")
        return False

    try:
        import logging as stdlib_logging

        import sentry_sdk
        from sentry_sdk.integrations.logging import LoggingIntegration

        _sentry_sdk = sentry_sdk

        sentry_logging = LoggingIntegration(
            level=stdlib_logging.INFO,  # Capture INFO+ as breadcrumbs
            event_level=stdlib_logging.ERROR,  # Capture ERROR+ as issues
        )

        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.sentry_environment,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            max_breadcrumbs=100,
            integrations=[sentry_logging],
        )

        _sentry_enabled = True
        logger.info("sentry_initialized", environment=settings.sentry_environment)
        return True

    except ImportError:
        logger.warning("sentry_sdk_not_installed", sentry_dsn=settings.sentry_dsn)
        return False


def is_sentry_enabled() -> bool:
    """
    Check if Sentry is enabled.

    Returns:
        True if Sentry is enabled
    """
    return _sentry_enabled


def get_sentry_sdk() -> Any:
    """
    Get Sentry SDK instance for direct use (spans, transactions, etc.).

    Returns:
        Sentry SDK instance or None if Sentry not enabled
    """
    return _sentry_sdk if _sentry_enabled else None


def log_validation_outcome(validator: str, outcome: Outcome[Any], **context: Any) -> None:
    """
    Log a validator result (sent to Sentry as a breadcrumb).

    Args:
        validator: Validator name (ibgp, ebgp, zone)
        outcome: Result returned by the validator
        **context: Extra structured fields (isp, zone_id, ...)
    """
    error = outcome.error
    if error is None:
        logger.info(f"{validator}_accepted", message=outcome.message, **context)
        return

    logger.info(
        f"{validator}_rejected",
        code=error.code.value,
        kind=error.kind.value,
        message=error.message,
        **context,
    )


def capture_engine_error(
    operation: str,
    error_message: str,
    exception: Exception | None = None,
) -> None:
    """
    Capture an unexpected engine error to both stdout and Sentry.

    Args:
        operation: Operation being performed (calc, demo, ...)
        error_message: Error message
        exception: Exception object to capture in Sentry (optional)
    """
    logger.error("engine_error", operation=operation, error=error_message)

    if _sentry_sdk:
        if exception:
            with _sentry_sdk.push_scope() as scope:
                scope.set_tag("operation", operation)
                _sentry_sdk.capture_exception(exception)
        else:
            _sentry_sdk.capture_message(
                f"{operation} failed: {error_message}",
                level="error",
                extras={"operation": operation},
            )
