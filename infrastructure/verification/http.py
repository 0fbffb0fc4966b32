"""HTTP implementations of VerificationService and CodeIssuer.

Both post JSON through the shared HttpClient. The verify endpoint answers
2xx for an accepted code and 4xx with ``{"error": ...}`` for a rejected one;
anything else is a transport failure.
"""

import httpx
from pydantic import ValidationError as PydanticValidationError

from errors import TransportError
from infrastructure.http_client import HttpClient
from infrastructure.verification.protocol import VerificationResponse
from schemas.dto.requests.auth import SendCodeRequest, VerifyCodeRequest
from schemas.dto.responses.auth import VerifyCodeResponse
from shared.logging import get_logger, mask_email

log = get_logger(__name__)


def _parse_body(response: httpx.Response) -> VerifyCodeResponse:
    try:
        return VerifyCodeResponse.model_validate(response.json())
    except (ValueError, PydanticValidationError):
        return VerifyCodeResponse()


class HttpVerificationService:
    def __init__(self, http_client: HttpClient, verify_path: str) -> None:
        self._http = http_client
        self._path = verify_path

    async def verify(self, email: str, code: str) -> VerificationResponse:
        body = VerifyCodeRequest(email=email, code=code).model_dump()
        try:
            response = await self._http.post_json(self._path, body)
        except httpx.HTTPError as e:
            log.error(
                "verify_request_failed",
                email=mask_email(email),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise TransportError("Verification service unreachable") from e

        if response.is_success:
            return VerificationResponse(accepted=True)

        if 400 <= response.status_code < 500:
            data = _parse_body(response)
            log.info(
                "verify_code_rejected",
                email=mask_email(email),
                status_code=response.status_code,
            )
            return VerificationResponse(accepted=False, message=data.error)

        log.error(
            "verify_api_error",
            email=mask_email(email),
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        raise TransportError(
            "Verification service error",
            details={"status_code": response.status_code},
        )


class HttpCodeIssuer:
    def __init__(self, http_client: HttpClient, send_path: str) -> None:
        self._http = http_client
        self._path = send_path

    async def send_code(self, email: str) -> bool:
        body = SendCodeRequest(email=email).model_dump()
        try:
            response = await self._http.post_json(self._path, body)
        except httpx.HTTPError as e:
            log.error(
                "send_code_request_failed",
                email=mask_email(email),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        if response.is_success:
            return True
        log.error(
            "send_code_api_error",
            email=mask_email(email),
            status_code=response.status_code,
            response_text=response.text[:200],
        )
        return False
