"""
Input validators for the verification flow. Pure functions.

All validators are stateless; the expected code length is passed in so the
controller's configured policy stays the single source of truth.
"""

from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"[^0-9]")


def is_valid_code(code: str, length: int = 6) -> bool:
    """Return True if *code* is exactly *length* ASCII digits.

    ``str.isdigit`` is not used because it accepts non-ASCII digits such as
    ``"١٢٣"`` which the verification service would reject.
    """
    if not isinstance(code, str):
        return False
    return re.fullmatch(rf"[0-9]{{{length}}}", code) is not None


def sanitize_code_input(value: str, length: int = 6) -> str:
    """Strip everything but digits and cap the result at *length* characters.

    Mirrors what an OTP input widget does on each keystroke, so pasted values
    like ``"123 456"`` or ``"12-34-56"`` still land as ``"123456"``.
    """
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)[:length]


def validate_email(email: str) -> bool:
    """Cheap shape check; the auth service owns real address validation."""
    if not email or len(email) > 254:
        return False
    return re.fullmatch(r"[^@\s]+@[^@\s]+\.[^@\s]+", email) is not None
