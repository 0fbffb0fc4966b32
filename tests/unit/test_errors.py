"""Unit tests for AppError hierarchy."""

import pytest

from errors import (
    AppError,
    ExpiredError,
    InvalidCodeError,
    InvalidFormatError,
    LockedError,
    ResendFailedError,
    StorageError,
    TooManyAttemptsError,
    TransportError,
    ValidationError,
)
from services.otp.results import Outcome


class TestAppErrorSubclasses:
    @pytest.mark.parametrize(
        "cls, code",
        [
            (ValidationError, "validation_error"),
            (InvalidFormatError, "invalid_format"),
            (LockedError, "locked"),
            (ExpiredError, "expired"),
            (InvalidCodeError, "invalid_code"),
            (TooManyAttemptsError, "too_many_attempts"),
            (ResendFailedError, "resend_failed"),
            (TransportError, "transport_error"),
            (StorageError, "storage_unavailable"),
        ],
    )
    def test_error_codes(self, cls, code):
        e = cls("msg")
        assert isinstance(e, AppError)
        assert e.error_code == code
        assert e.message == "msg"

    def test_invalid_format_is_a_validation_error(self):
        assert issubclass(InvalidFormatError, ValidationError)

    @pytest.mark.parametrize(
        "cls",
        [
            InvalidFormatError,
            LockedError,
            ExpiredError,
            InvalidCodeError,
            TooManyAttemptsError,
            ResendFailedError,
            TransportError,
        ],
    )
    def test_controller_errors_map_to_outcomes(self, cls):
        assert Outcome(cls.error_code).value == cls.error_code


class TestAppErrorToDict:
    def test_basic(self):
        e = ExpiredError("code expired")
        assert e.to_dict() == {"error": "code expired", "code": "expired"}

    @pytest.mark.parametrize(
        "kwargs, key, value",
        [
            ({"field": "code"}, "field", "code"),
            ({"details": {"retry_after": 299}}, "details", {"retry_after": 299}),
        ],
        ids=["with_field", "with_details"],
    )
    def test_optional_key_present(self, kwargs, key, value):
        e = LockedError("locked", **kwargs)
        assert e.to_dict()[key] == value

    def test_no_optional_keys_when_absent(self):
        d = InvalidCodeError("nope").to_dict()
        assert "field" not in d
        assert "details" not in d
