"""
Logger factory and helpers.

Provides:
- get_logger(): Get a configured logger instance
- log_with_context(): Bind common context (e.g. the masked email)
- mask_email(): Privacy-safe email rendering for log fields
"""

import structlog
from structlog.stdlib import BoundLogger

from shared.logging_config import mask_email, setup_logging


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("otp_resend_sent", email=mask_email("a@b.com"))
    """
    return structlog.get_logger(name)


def log_with_context(logger: BoundLogger, **context) -> BoundLogger:
    """Bind context to a logger for all subsequent log calls."""
    return logger.bind(**context)


__all__ = [
    "get_logger",
    "log_with_context",
    "mask_email",
    "setup_logging",
]
