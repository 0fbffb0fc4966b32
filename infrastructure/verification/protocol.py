"""Auth service protocols — the controller depends on these, not the HTTP implementations."""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class VerificationResponse:
    """Outcome of a verify call that reached the service.

    Transport and server failures never produce one of these; adapters raise
    ``errors.TransportError`` instead.
    """

    accepted: bool
    message: Optional[str] = None


class VerificationService(Protocol):
    async def verify(self, email: str, code: str) -> VerificationResponse: ...


class CodeIssuer(Protocol):
    async def send_code(self, email: str) -> bool: ...
