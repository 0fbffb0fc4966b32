"""
Composition root.

Wires the OTP controller to its concrete collaborators: HTTP auth services
sharing one HttpClient, and Redis-backed timer storage that degrades to
memory when Redis is absent or unreachable.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from config import AppSettings, RedisSettings
from infrastructure.http_client import HttpClient
from infrastructure.navigation.protocol import Navigator
from infrastructure.storage.redis_store import create_redis_store
from infrastructure.storage.safe_store import SafeStore
from infrastructure.verification.http import HttpCodeIssuer, HttpVerificationService
from services.otp.controller import OtpVerificationController
from shared.clock import Clock
from shared.logging import get_logger

log = get_logger(__name__)


def build_store(settings: RedisSettings) -> SafeStore:
    """Return durable storage when Redis is configured, memory-only otherwise."""
    if not settings.redis_uri:
        log.info("storage_memory_only", reason="redis_not_configured")
        return SafeStore(None)
    return SafeStore(
        create_redis_store(settings.redis_uri, ttl_seconds=settings.redis_ttl_seconds)
    )


def build_controller(
    settings: AppSettings,
    email: str,
    navigator: Navigator,
    *,
    http_client: HttpClient,
    store: Optional[SafeStore] = None,
    clock: Optional[Clock] = None,
) -> OtpVerificationController:
    """Build a controller for *email*; raises ValidationError if it is empty."""
    return OtpVerificationController(
        email,
        verifier=HttpVerificationService(http_client, settings.auth.verify_code_path),
        issuer=HttpCodeIssuer(http_client, settings.auth.send_code_path),
        store=store if store is not None else build_store(settings.redis),
        navigator=navigator,
        otp_settings=settings.otp,
        auth_settings=settings.auth,
        clock=clock,
    )


@asynccontextmanager
async def verification_controller(
    settings: AppSettings,
    email: str,
    navigator: Navigator,
    *,
    clock: Optional[Clock] = None,
) -> AsyncIterator[OtpVerificationController]:
    """Mounted controller whose HTTP client and timer are released on exit."""
    async with HttpClient(
        timeout=settings.auth.http_timeout_seconds,
        base_url=settings.auth.app_url,
    ) as http_client:
        controller = build_controller(
            settings, email, navigator, http_client=http_client, clock=clock
        )
        async with controller:
            yield controller
