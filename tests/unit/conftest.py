"""
Unit test configuration.

Patches dotenv so pydantic-settings never reads the project's real .env file
during unit tests. Tests control config exclusively through monkeypatch.setenv().

Also provides in-memory fakes for every port the OTP controller talks to.
"""

from typing import Optional

import pytest

from config import AuthServiceSettings, OtpSettings
from errors import StorageError
from infrastructure.storage.memory import MemoryStore
from infrastructure.verification.protocol import VerificationResponse
from services.otp.controller import OtpVerificationController

EMAIL = "a@b.com"
T0 = 1_700_000_000_000


@pytest.fixture(autouse=True)
def disable_dotenv_loading(monkeypatch):
    """Prevent pydantic-settings from loading .env files in all unit tests."""
    import pydantic_settings.sources.providers.dotenv as ps_dotenv

    monkeypatch.setattr(ps_dotenv, "dotenv_values", lambda *a, **kw: {})


class FakeClock:
    def __init__(self, start_ms: int = T0) -> None:
        self.now = start_ms

    def now_ms(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


class FakeVerifier:
    """Returns queued responses (or raises queued exceptions), else ``default``."""

    def __init__(self, default: Optional[VerificationResponse] = None) -> None:
        self.default = default or VerificationResponse(accepted=False)
        self.queue: list = []
        self.calls: list[tuple[str, str]] = []

    async def verify(self, email: str, code: str) -> VerificationResponse:
        self.calls.append((email, code))
        item = self.queue.pop(0) if self.queue else self.default
        if isinstance(item, Exception):
            raise item
        return item


class FakeIssuer:
    def __init__(self, result=True) -> None:
        self.result = result
        self.calls: list[str] = []

    async def send_code(self, email: str) -> bool:
        self.calls.append(email)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class RecordingNavigator:
    def __init__(self) -> None:
        self.urls: list[str] = []

    def navigate(self, url: str) -> None:
        self.urls.append(url)


class BrokenStore:
    """A store whose backend is gone, like storage in a locked-down browser."""

    def get(self, key):
        raise StorageError("unavailable")

    def set(self, key, value):
        raise StorageError("unavailable")

    def remove(self, key):
        raise StorageError("unavailable")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
def issuer():
    return FakeIssuer()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def otp_settings():
    return OtpSettings()


@pytest.fixture
def auth_settings():
    return AuthServiceSettings(app_url="https://vulniq.org")


@pytest.fixture
def make_controller(verifier, issuer, navigator, store, clock, otp_settings, auth_settings):
    def _make(email: str = EMAIL, **overrides) -> OtpVerificationController:
        kwargs = dict(
            verifier=verifier,
            issuer=issuer,
            store=store,
            navigator=navigator,
            otp_settings=otp_settings,
            auth_settings=auth_settings,
            clock=clock,
        )
        kwargs.update(overrides)
        return OtpVerificationController(email, **kwargs)

    return _make


@pytest.fixture
def controller(make_controller):
    ctrl = make_controller()
    ctrl.hydrate()
    return ctrl


@pytest.fixture
def broken_store():
    return BrokenStore()
