"""
Response DTOs returned by the authentication service.

VerifyCodeResponse — POST {verify_code_path}  (200 / 4xx)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class VerifyCodeResponse(BaseModel):
    """Body of a verify-code response.

    Accepted codes come back as ``{"success": true}``; rejections carry a
    human-readable ``error``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = False
    error: Optional[str] = None
