"""
Verification session state and its email-scoped persistence.

Only the two timer anchors are persisted: ``code_issued_at`` (drives code
expiry) and ``resend_cooldown_until``. Attempts and lockout are
session-local and reset on reload.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from errors import StorageError
from infrastructure.storage.protocol import KeyValueStore
from shared.logging import get_logger, mask_email

log = get_logger(__name__)


@dataclass
class VerificationSession:
    """Mutable state of one sign-in verification, keyed by ``email``.

    Timestamps are epoch milliseconds.
    """

    email: str
    code_issued_at: Optional[int] = None
    resend_cooldown_until: Optional[int] = None
    attempt_count: int = 0
    lockout_until: Optional[int] = None
    otp_input: str = ""

    def reset_for_new_code(self, issued_at: int, cooldown_until: int) -> None:
        self.code_issued_at = issued_at
        self.resend_cooldown_until = cooldown_until
        self.attempt_count = 0
        self.lockout_until = None
        self.otp_input = ""


class SessionStorage:
    """Reads and writes timer anchors under email-scoped keys.

    Store failures are logged and treated as "nothing persisted"; the
    caller keeps working from memory.
    """

    def __init__(self, store: KeyValueStore, prefix: str = "otp") -> None:
        self._store = store
        self._prefix = prefix

    def issued_at_key(self, email: str) -> str:
        return f"{self._prefix}_timestamp_{email}"

    def cooldown_key(self, email: str) -> str:
        return f"{self._prefix}_resend_cooldown_{email}"

    def _read_ms(self, name: str, email: str) -> Optional[int]:
        try:
            raw = self._store.get(name)
        except StorageError as e:
            log.warning("session_read_failed", email=mask_email(email), error=e.message)
            return None
        if raw is None:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            log.warning("session_value_invalid", email=mask_email(email), raw=raw[:32])
            return None

    def _write_ms(self, name: str, email: str, value: int) -> None:
        try:
            self._store.set(name, str(value))
        except StorageError as e:
            log.warning("session_write_failed", email=mask_email(email), error=e.message)

    def load_issued_at(self, email: str) -> Optional[int]:
        return self._read_ms(self.issued_at_key(email), email)

    def save_issued_at(self, email: str, issued_at: int) -> None:
        self._write_ms(self.issued_at_key(email), email, issued_at)

    def load_cooldown_until(self, email: str) -> Optional[int]:
        return self._read_ms(self.cooldown_key(email), email)

    def save_cooldown_until(self, email: str, cooldown_until: int) -> None:
        self._write_ms(self.cooldown_key(email), email, cooldown_until)

    def clear(self, email: str) -> None:
        for name in (self.issued_at_key(email), self.cooldown_key(email)):
            try:
                self._store.remove(name)
            except StorageError as e:
                log.warning(
                    "session_clear_failed", email=mask_email(email), error=e.message
                )
