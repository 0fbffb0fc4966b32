"""
View DTOs rendered by the verify-code screen.

InboxLink        — webmail shortcut entry
VerificationView — snapshot returned by OtpVerificationController.view()
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from services.otp.results import OtpState


class InboxLink(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    url: str


class VerificationView(BaseModel):
    """Everything the screen needs to render one frame.

    ``expiry_display`` stays at the ``"10:00"`` placeholder until the
    controller has hydrated its timer anchor from storage.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    state: OtpState
    hydrated: bool
    otp_input: str
    is_loading: bool
    error: Optional[str] = None
    error_code: Optional[str] = None
    notice: Optional[str] = None

    attempts_used: int
    attempts_remaining: Optional[int] = None  # only shown after a failure

    expiry_seconds: int
    expiry_display: str
    lockout_seconds: int = 0
    lockout_display: Optional[str] = None

    resend_cooldown_seconds: int = 0
    resend_label: str
    can_resend: bool
    can_submit: bool

    inbox_links: list[InboxLink] = []
