"""
Request DTOs sent to the authentication service.

VerifyCodeRequest — POST {verify_code_path}
SendCodeRequest   — POST {send_code_path}
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class VerifyCodeRequest(BaseModel):
    """Request body for the code verification endpoint.

    ``code`` is the 6-digit OTP the user typed.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    code: str


class SendCodeRequest(BaseModel):
    """Request body asking the provider to email a fresh code."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    redirect: bool = False
