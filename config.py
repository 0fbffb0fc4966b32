"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The OTP policy numbers (validity window, attempt budget, lockout and resend
cooldown) live in OtpSettings so deployments can tune them without touching
the controller.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class OtpSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    otp_length: int = Field(default=6, ge=4, le=10)
    code_validity_seconds: int = Field(default=600, gt=0)
    max_attempts: int = Field(default=5, ge=1)
    lockout_seconds: int = Field(default=300, gt=0)
    resend_cooldown_seconds: int = Field(default=60, ge=0)
    tick_interval_seconds: float = Field(default=1.0, gt=0)

    # Transient verify failures do not burn attempt budget unless enabled
    count_transport_errors_as_attempts: bool = False

    storage_key_prefix: str = "otp"


class AuthServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_url: str = "http://localhost:3000"
    verify_code_path: str = "/api/auth/verify-code"
    send_code_path: str = "/api/auth/signin/nodemailer"
    callback_path_template: str = (
        "/api/auth/callback/nodemailer"
        "?token={token}&email={email}&callbackUrl={callback_url}"
    )
    post_login_path: str = "/dashboard"
    login_path: str = "/login"
    http_timeout_seconds: float = 5.0

    # Sender used to pre-filter the Gmail inbox shortcut
    mail_sender: str = "noreply@vulniq.org"


class RedisSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Optional; without Redis the timer anchors live in memory only
    redis_uri: Optional[str] = None
    redis_ttl_seconds: int = 3600


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    env: str = "development"
    app_name: str = "VulnIQ"

    # Sub-configs (composed via model_validator below)
    otp: Optional[OtpSettings] = None
    auth: Optional[AuthServiceSettings] = None
    redis: Optional[RedisSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.otp is None:
            self.otp = OtpSettings()
        if self.auth is None:
            self.auth = AuthServiceSettings()
        if self.redis is None:
            self.redis = RedisSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
