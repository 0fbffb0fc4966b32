"""
OTP verification controller.

Gates the "verify code" action behind format, lockout and expiry checks,
delegates verification and resend to the auth service, and keeps three
countdowns (code expiry, lockout, resend cooldown) current with a
once-per-second tick.

Every countdown is recomputed from an absolute epoch-ms anchor on each tick,
so reloads and a sleeping event loop cannot make them drift. Nothing raises
past this class: operations return a Result and the error message is also
kept for the view.
"""

from __future__ import annotations

import asyncio
from typing import Optional

from config import AuthServiceSettings, OtpSettings
from errors import (
    AppError,
    ExpiredError,
    InvalidCodeError,
    InvalidFormatError,
    LockedError,
    ResendFailedError,
    TooManyAttemptsError,
    TransportError,
    ValidationError,
)
from infrastructure.navigation.protocol import Navigator
from infrastructure.storage.protocol import KeyValueStore
from infrastructure.verification.protocol import CodeIssuer, VerificationService
from schemas.dto.responses.verification import InboxLink, VerificationView
from services.otp.results import OtpState, Outcome, Result
from services.otp.session import SessionStorage, VerificationSession
from shared.callback import build_callback_url
from shared.clock import (
    Clock,
    SystemClock,
    format_countdown,
    seconds_remaining,
    seconds_until,
)
from shared.logging import get_logger, log_with_context, mask_email
from shared.mail_providers import inbox_links
from shared.validators import is_valid_code, sanitize_code_input, validate_email

log = get_logger(__name__)

MSG_INVALID_FORMAT = "Please enter a valid {length}-digit code"
MSG_EXPIRED = "Code has expired. Please request a new one."
MSG_INVALID_CODE = "Invalid code. Please try again."
MSG_TRANSPORT = "Something went wrong. Please try again."
MSG_RESEND_FAILED = "Failed to send new code. Please try again."
MSG_RESENT = "New verification code sent!"


def _describe_wait(seconds: int) -> str:
    if seconds % 60 == 0:
        minutes = seconds // 60
        return f"{minutes} minute{'' if minutes == 1 else 's'}"
    return f"{seconds} seconds"


class OtpVerificationController:
    """State machine for one email's code verification.

    Lifecycle: ``mount()`` hydrates the timer anchor from storage and starts
    the tick task; ``unmount()`` cancels it. The controller is also an async
    context manager doing both.
    """

    def __init__(
        self,
        email: str,
        *,
        verifier: VerificationService,
        issuer: CodeIssuer,
        store: KeyValueStore,
        navigator: Navigator,
        otp_settings: OtpSettings,
        auth_settings: AuthServiceSettings,
        clock: Optional[Clock] = None,
    ) -> None:
        if not email:
            raise ValidationError("Missing email address", field="email")
        if not validate_email(email):
            raise ValidationError("Invalid email address", field="email")

        self._session = VerificationSession(email=email)
        self._verifier = verifier
        self._issuer = issuer
        self._storage = SessionStorage(store, prefix=otp_settings.storage_key_prefix)
        self._navigator = navigator
        self._otp = otp_settings
        self._auth = auth_settings
        self._clock = clock or SystemClock()
        self._log = log_with_context(log, email=mask_email(email))

        self._hydrated = False
        self._verified = False
        self._verifying = False
        self._resending = False
        self._error: Optional[AppError] = None
        self._notice: Optional[str] = None

        # Derived countdowns, refreshed by tick() and before every gate check
        self._expiry_seconds = otp_settings.code_validity_seconds
        self._lockout_remaining = 0
        self._resend_remaining = 0

        self._task: Optional[asyncio.Task] = None
        # Bumped on unmount; responses from an older generation are dropped
        self._generation = 0
        # Bumped on each successful resend; verifies of a replaced code are dropped
        self._code_serial = 0

    # ── Read-only state ──────────────────────────────────────────────────────

    @property
    def email(self) -> str:
        return self._session.email

    @property
    def session(self) -> VerificationSession:
        return self._session

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    @property
    def mounted(self) -> bool:
        return self._task is not None

    @property
    def is_verifying(self) -> bool:
        return self._verifying

    @property
    def error(self) -> Optional[AppError]:
        return self._error

    @property
    def code_expiry_seconds(self) -> int:
        return self._expiry_seconds

    @property
    def lockout_remaining(self) -> int:
        return self._lockout_remaining

    @property
    def resend_cooldown_remaining(self) -> int:
        return self._resend_remaining

    @property
    def state(self) -> OtpState:
        if self._verified:
            return OtpState.VERIFIED
        if self._session.lockout_until is not None:
            return OtpState.LOCKED
        if self._expiry_seconds <= 0:
            return OtpState.EXPIRED
        return OtpState.ACTIVE

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def hydrate(self) -> None:
        """Load timer anchors for this email, creating the issue timestamp if absent."""
        if self._hydrated:
            return
        now = self._clock.now_ms()
        email = self._session.email

        issued_at = self._storage.load_issued_at(email)
        if issued_at is None:
            issued_at = now
            self._storage.save_issued_at(email, issued_at)
            self._log.debug("otp_timer_initialized")
        else:
            self._log.debug("otp_timer_restored", elapsed_ms=now - issued_at)
        self._session.code_issued_at = issued_at
        self._session.resend_cooldown_until = self._storage.load_cooldown_until(email)

        self._hydrated = True
        self._refresh(now)

    async def mount(self) -> None:
        if self._task is not None or self._verified:
            return
        self.hydrate()
        self._task = asyncio.create_task(self._run_timer())

    async def unmount(self) -> None:
        self._generation += 1
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def __aenter__(self) -> "OtpVerificationController":
        await self.mount()
        return self

    async def __aexit__(self, *args) -> None:
        await self.unmount()

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._otp.tick_interval_seconds)
            self.tick()

    def _cancel_timer(self) -> None:
        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    # ── Timer ────────────────────────────────────────────────────────────────

    def tick(self) -> None:
        """Recompute every countdown from its anchor; clears an elapsed lockout."""
        before = self.state
        self._refresh(self._clock.now_ms())
        after = self.state
        if after is not before:
            self._log.info("otp_state_changed", previous=before.value, current=after.value)

    def _refresh(self, now: int) -> None:
        session = self._session

        self._resend_remaining = seconds_until(session.resend_cooldown_until, now)

        if session.lockout_until is not None:
            self._lockout_remaining = seconds_until(session.lockout_until, now)
            if self._lockout_remaining <= 0:
                session.lockout_until = None
                session.attempt_count = 0
                self._error = None
                self._log.info("otp_lockout_cleared")
        else:
            self._lockout_remaining = 0

        if session.code_issued_at is not None:
            self._expiry_seconds = seconds_remaining(
                session.code_issued_at, self._otp.code_validity_seconds, now
            )

    # ── Operations ───────────────────────────────────────────────────────────

    async def set_input(self, value: str) -> Optional[Result]:
        """Update the typed code; auto-submits when it first reaches full length."""
        length = self._otp.otp_length
        previous = self._session.otp_input
        current = sanitize_code_input(value, length)
        self._session.otp_input = current

        if len(current) != length or len(previous) >= length:
            return None
        self.hydrate()
        self._refresh(self._clock.now_ms())
        if self.state in (OtpState.LOCKED, OtpState.EXPIRED):
            # Drop the digits so the next full entry is a fresh length transition
            self._session.otp_input = ""
            return None
        if self.state is not OtpState.ACTIVE:
            return None
        return await self.submit_code(current)

    async def submit_code(self, code: str) -> Result:
        if self._verifying or self._verified:
            return Result(Outcome.IGNORED)

        length = self._otp.otp_length
        if not is_valid_code(code, length):
            return self._reject(
                InvalidFormatError(MSG_INVALID_FORMAT.format(length=length), field="code")
            )

        self.hydrate()
        self._refresh(self._clock.now_ms())

        if self._session.lockout_until is not None:
            return self._reject(
                LockedError(
                    "Too many attempts. Please wait "
                    f"{format_countdown(self._lockout_remaining)}.",
                    details={"retry_after": self._lockout_remaining},
                )
            )
        if self._expiry_seconds <= 0:
            return self._reject(ExpiredError(MSG_EXPIRED))

        self._verifying = True
        self._error = None
        self._notice = None
        generation = self._generation
        code_serial = self._code_serial
        transport_error: Optional[TransportError] = None
        try:
            response = await self._verifier.verify(self._session.email, code)
        except TransportError as e:
            transport_error = e
        except Exception as e:
            self._log.error(
                "otp_verification_error", error=str(e), error_type=type(e).__name__
            )
            transport_error = TransportError(MSG_TRANSPORT)
        finally:
            self._verifying = False

        if generation != self._generation:
            self._log.info("otp_stale_response_dropped", operation="verify")
            return Result(Outcome.IGNORED)

        # The code was replaced by a resend while this verify was in flight
        if code_serial != self._code_serial:
            self._log.info("otp_superseded_response_dropped")
            return Result(Outcome.IGNORED)

        now = self._clock.now_ms()

        if transport_error is not None:
            self._log.warning(
                "otp_verification_transport_error",
                error=transport_error.message,
                counted=self._otp.count_transport_errors_as_attempts,
            )
            if self._otp.count_transport_errors_as_attempts:
                return self._record_failure(now, None)
            return self._reject(TransportError(MSG_TRANSPORT, details=transport_error.details))

        if not response.accepted:
            return self._record_failure(now, response.message)

        return self._complete(code)

    async def request_resend(self) -> Result:
        if self._verified or self._resending:
            return Result(Outcome.IGNORED)

        self.hydrate()
        self._refresh(self._clock.now_ms())
        if self._resend_remaining > 0:
            return Result(Outcome.COOLDOWN)

        self._resending = True
        generation = self._generation
        try:
            sent = await self._issuer.send_code(self._session.email)
        except Exception as e:
            self._log.error("otp_resend_error", error=str(e), error_type=type(e).__name__)
            sent = False
        finally:
            self._resending = False

        if generation != self._generation:
            self._log.info("otp_stale_response_dropped", operation="resend")
            return Result(Outcome.IGNORED)

        if not sent:
            self._log.warning("otp_resend_failed")
            self._notice = MSG_RESEND_FAILED
            return Result(Outcome.RESEND_FAILED, error=ResendFailedError(MSG_RESEND_FAILED))

        # No await below this point: the reset is atomic with respect to tick()
        now = self._clock.now_ms()
        cooldown_until = now + self._otp.resend_cooldown_seconds * 1000
        email = self._session.email
        self._storage.save_issued_at(email, now)
        self._storage.save_cooldown_until(email, cooldown_until)
        self._session.reset_for_new_code(issued_at=now, cooldown_until=cooldown_until)
        self._code_serial += 1
        self._error = None
        self._notice = MSG_RESENT
        self._refresh(now)

        self._log.info("otp_resend_sent", cooldown_seconds=self._otp.resend_cooldown_seconds)
        return Result(Outcome.RESENT)

    async def back_to_login(self) -> None:
        """Abandon this verification: forget its timers and leave the page."""
        self._storage.clear(self._session.email)
        await self.unmount()
        origin = self._auth.app_url.rstrip("/")
        self._log.info("otp_session_abandoned")
        self._navigator.navigate(origin + self._auth.login_path)

    # ── Internals ────────────────────────────────────────────────────────────

    def _reject(self, error: AppError) -> Result:
        self._error = error
        self._session.otp_input = ""
        return Result(Outcome(error.error_code), error=error)

    def _record_failure(self, now: int, server_message: Optional[str]) -> Result:
        session = self._session
        session.attempt_count += 1

        if session.attempt_count >= self._otp.max_attempts:
            lockout = self._otp.lockout_seconds
            session.lockout_until = now + lockout * 1000
            self._lockout_remaining = lockout
            self._log.warning(
                "otp_lockout_started",
                attempts=session.attempt_count,
                lockout_seconds=lockout,
            )
            return self._reject(
                TooManyAttemptsError(
                    "Too many failed attempts. Please wait "
                    f"{_describe_wait(lockout)} before trying again.",
                    details={"retry_after": lockout},
                )
            )

        self._log.info(
            "otp_verification_rejected",
            attempts=session.attempt_count,
            attempts_left=self._otp.max_attempts - session.attempt_count,
        )
        return self._reject(InvalidCodeError(server_message or MSG_INVALID_CODE))

    def _complete(self, code: str) -> Result:
        email = self._session.email
        self._storage.clear(email)
        self._verified = True
        self._cancel_timer()

        url = build_callback_url(
            self._auth.app_url,
            self._auth.callback_path_template,
            code=code,
            email=email,
            post_login_path=self._auth.post_login_path,
        )
        self._log.info("otp_verified_success")
        self._navigator.navigate(url)
        return Result(Outcome.VERIFIED, redirect_url=url)

    # ── View ─────────────────────────────────────────────────────────────────

    def view(self) -> VerificationView:
        session = self._session
        state = self.state
        length = self._otp.otp_length
        locked = state is OtpState.LOCKED

        if self._hydrated:
            expiry_display = format_countdown(self._expiry_seconds)
        else:
            expiry_display = format_countdown(self._otp.code_validity_seconds)

        if self._resend_remaining > 0:
            resend_label = f"Resend in {self._resend_remaining}s"
        else:
            resend_label = "Click to resend"

        return VerificationView(
            email=session.email,
            state=state,
            hydrated=self._hydrated,
            otp_input=session.otp_input,
            is_loading=self._verifying,
            error=self._error.message if self._error else None,
            error_code=self._error.error_code if self._error else None,
            notice=self._notice,
            attempts_used=session.attempt_count,
            attempts_remaining=(
                self._otp.max_attempts - session.attempt_count
                if session.attempt_count > 0
                else None
            ),
            expiry_seconds=self._expiry_seconds,
            expiry_display=expiry_display,
            lockout_seconds=self._lockout_remaining if locked else 0,
            lockout_display=(
                format_countdown(self._lockout_remaining)
                if locked and self._lockout_remaining > 0
                else None
            ),
            resend_cooldown_seconds=self._resend_remaining,
            resend_label=resend_label,
            can_resend=(
                self._resend_remaining == 0
                and not self._resending
                and state is not OtpState.VERIFIED
            ),
            can_submit=(
                len(session.otp_input) == length
                and not self._verifying
                and state is OtpState.ACTIVE
            ),
            inbox_links=[
                InboxLink(name=p.name, url=p.url)
                for p in inbox_links(self._auth.mail_sender)
            ],
        )
