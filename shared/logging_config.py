"""
Centralized logging configuration.

This module sets up structured logging with:
- Environment-based configuration (dev vs production)
- JSON formatting for production, pretty console for development
- Email masking in production so addresses never land in log storage
- Redaction of codes, tokens and secrets
"""

import hashlib
import logging
import os
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor

from config import LoggingSettings


# Environment configuration
ENV = os.getenv("ENV", "development")
IS_PRODUCTION = ENV == "production"

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "code",
    "otp",
    "otp_code",
    "otp_input",
    "password",
    "token",
    "api_key",
    "authorization",
    "cookie",
    "secret",
}

_SENSITIVE_FRAGMENTS = ("password", "token", "secret")
_PRESERVED_KEYS = {"level", "event", "timestamp", "logger", "error_code"}


def mask_email(email: str) -> str:
    """
    Mask an email address for production logs.

    In production the local part is reduced to its first character plus a
    short digest, so the same user stays correlatable across events.
    In development the address is returned unchanged.
    """
    if not IS_PRODUCTION or not email or "@" not in email:
        return email
    local, _, domain = email.partition("@")
    digest = hashlib.sha256(email.lower().encode()).hexdigest()[:8]
    return f"{local[:1]}***{digest}@{domain}"


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for key in list(event_dict.keys()):
        if key in _PRESERVED_KEYS:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            fragment in lowered for fragment in _SENSITIVE_FRAGMENTS
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(log_format: str) -> None:
    """
    Configure structlog with appropriate processors for the environment.

    Production: JSON formatting for easy parsing
    Development: Pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event_to=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(log_level: str) -> None:
    """Route stdlib logging to stdout at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Initialize logging system for the application.

    Called on import with settings read from the environment; call again
    with explicit settings to reconfigure.
    """
    settings = settings or LoggingSettings()
    log_format = settings.log_format
    if IS_PRODUCTION and "LOG_FORMAT" not in os.environ:
        log_format = "json"

    configure_stdlib_logging(settings.log_level)
    configure_structlog(log_format)

    structlog.get_logger(__name__).debug(
        "logging_initialized",
        env=ENV,
        log_level=settings.log_level,
        log_format=log_format,
    )


# Initialize logging when module is imported
setup_logging()
