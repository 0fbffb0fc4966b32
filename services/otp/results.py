"""Controller states and operation results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from errors import AppError


class OtpState(str, Enum):
    ACTIVE = "active"
    LOCKED = "locked"
    EXPIRED = "expired"
    VERIFIED = "verified"


class Outcome(str, Enum):
    VERIFIED = "verified"
    RESENT = "resent"
    INVALID_FORMAT = "invalid_format"
    LOCKED = "locked"
    EXPIRED = "expired"
    INVALID_CODE = "invalid_code"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    TRANSPORT_ERROR = "transport_error"
    RESEND_FAILED = "resend_failed"
    COOLDOWN = "cooldown"
    # The call did nothing: a verification was already in flight, the session
    # is already verified, or the controller was unmounted mid-request.
    IGNORED = "ignored"


@dataclass(frozen=True)
class Result:
    outcome: Outcome
    error: Optional[AppError] = None
    redirect_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (Outcome.VERIFIED, Outcome.RESENT)

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error is not None else None
