"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    AuthServiceSettings,
    LoggingSettings,
    OtpSettings,
    RedisSettings,
)


# ---------------------------------------------------------------------------
# OtpSettings
# ---------------------------------------------------------------------------


class TestOtpSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "OTP_LENGTH",
            "CODE_VALIDITY_SECONDS",
            "MAX_ATTEMPTS",
            "LOCKOUT_SECONDS",
            "RESEND_COOLDOWN_SECONDS",
            "COUNT_TRANSPORT_ERRORS_AS_ATTEMPTS",
        ):
            monkeypatch.delenv(var, raising=False)
        s = OtpSettings()
        assert s.otp_length == 6
        assert s.code_validity_seconds == 600
        assert s.max_attempts == 5
        assert s.lockout_seconds == 300
        assert s.resend_cooldown_seconds == 60
        assert s.tick_interval_seconds == 1.0
        assert s.count_transport_errors_as_attempts is False
        assert s.storage_key_prefix == "otp"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MAX_ATTEMPTS", "3")
        monkeypatch.setenv("COUNT_TRANSPORT_ERRORS_AS_ATTEMPTS", "true")
        s = OtpSettings()
        assert s.max_attempts == 3
        assert s.count_transport_errors_as_attempts is True

    @pytest.mark.parametrize(
        "var, value",
        [
            ("MAX_ATTEMPTS", "0"),
            ("CODE_VALIDITY_SECONDS", "0"),
            ("LOCKOUT_SECONDS", "-1"),
            ("OTP_LENGTH", "2"),
            ("TICK_INTERVAL_SECONDS", "0"),
        ],
    )
    def test_rejects_out_of_range(self, monkeypatch, var, value):
        monkeypatch.setenv(var, value)
        with pytest.raises(PydanticValidationError):
            OtpSettings()


# ---------------------------------------------------------------------------
# AuthServiceSettings
# ---------------------------------------------------------------------------


class TestAuthServiceSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("APP_URL", raising=False)
        s = AuthServiceSettings()
        assert s.verify_code_path == "/api/auth/verify-code"
        assert s.post_login_path == "/dashboard"
        assert "{token}" in s.callback_path_template
        assert s.http_timeout_seconds == 5.0

    def test_app_url_loaded(self, monkeypatch):
        monkeypatch.setenv("APP_URL", "https://vulniq.org")
        assert AuthServiceSettings().app_url == "https://vulniq.org"


# ---------------------------------------------------------------------------
# RedisSettings / LoggingSettings
# ---------------------------------------------------------------------------


class TestRedisSettings:
    def test_redis_uri_optional(self, monkeypatch):
        monkeypatch.delenv("REDIS_URI", raising=False)
        assert RedisSettings().redis_uri is None

    def test_redis_uri_loaded(self, monkeypatch):
        monkeypatch.setenv("REDIS_URI", "redis://localhost:6379")
        assert RedisSettings().redis_uri == "redis://localhost:6379"

    def test_default_ttl(self, monkeypatch):
        monkeypatch.delenv("REDIS_TTL_SECONDS", raising=False)
        assert RedisSettings().redis_ttl_seconds == 3600


class TestLoggingSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        s = LoggingSettings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


class TestAppSettings:
    def test_sub_configs_populated(self):
        s = AppSettings()
        assert isinstance(s.otp, OtpSettings)
        assert isinstance(s.auth, AuthServiceSettings)
        assert isinstance(s.redis, RedisSettings)
        assert isinstance(s.logging, LoggingSettings)

    def test_sub_configs_read_same_env(self, monkeypatch):
        monkeypatch.setenv("LOCKOUT_SECONDS", "120")
        monkeypatch.setenv("APP_URL", "https://staging.vulniq.org")
        s = AppSettings()
        assert s.otp.lockout_seconds == 120
        assert s.auth.app_url == "https://staging.vulniq.org"

    def test_explicit_sub_config_kept(self):
        s = AppSettings(otp=OtpSettings(max_attempts=2))
        assert s.otp.max_attempts == 2

    @pytest.mark.parametrize("env, expected", [("production", True), ("development", False)])
    def test_is_production(self, monkeypatch, env, expected):
        monkeypatch.setenv("ENV", env)
        assert AppSettings().is_production is expected
