"""
Application error hierarchy.

AppError is the base for all typed errors. Infrastructure adapters raise
them; the OTP controller catches them at its boundary and hands them back
inside a Result so callers only ever render ``error.message``.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    error_code = "validation_error"


class InvalidFormatError(ValidationError):
    error_code = "invalid_format"


class LockedError(AppError):
    error_code = "locked"


class ExpiredError(AppError):
    error_code = "expired"


class InvalidCodeError(AppError):
    error_code = "invalid_code"


class TooManyAttemptsError(AppError):
    error_code = "too_many_attempts"


class ResendFailedError(AppError):
    error_code = "resend_failed"


class TransportError(AppError):
    """Network or server failure talking to an auth service."""

    error_code = "transport_error"


class StorageError(AppError):
    error_code = "storage_unavailable"
