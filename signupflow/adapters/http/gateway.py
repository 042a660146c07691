"""
HTTP gateway adapters - Implement OtpGateway and AccountGateway protocols.

This module talks to the auth backend with an httpx.AsyncClient and
translates status codes and transport failures into domain exceptions.
The client is owned by the caller (see signupflow.app), so one
connection pool serves every gateway.
"""

import logging

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from signupflow.adapters.http.models import (
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
    SendOtpRequest,
    VerifyOtpRequest,
)
from signupflow.domain.exceptions import (
    AlreadyRegistered,
    InvalidCode,
    NetworkError,
    RegistrationRejected,
    TransientDispatchError,
)
from signupflow.domain.models import AuthSession, UserIdentity

logger = logging.getLogger(__name__)

SEND_OTP_PATH = "/api/auth/send-otp"
VERIFY_OTP_PATH = "/api/auth/verify-otp"
REGISTER_PATH = "/api/auth/register"

# Message the backend returns from send-otp when the email has an account.
ALREADY_REGISTERED_MESSAGE = "User already exists"


async def _post(client: httpx.AsyncClient, path: str, body: BaseModel) -> httpx.Response:
    try:
        return await client.post(path, json=body.model_dump())
    except httpx.HTTPError as exc:
        logger.warning("POST %s failed: %s", path, type(exc).__name__)
        raise NetworkError(f"{path}: {type(exc).__name__}") from exc


def _error_message(response: httpx.Response) -> str:
    """Extract ``message`` from an error body, tolerating non-JSON replies."""
    try:
        return ErrorResponse.model_validate(response.json()).message
    except (ValueError, PydanticValidationError):
        return ""


class HttpOtpGateway:
    """
    Implements OtpGateway protocol over HTTP.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def request_otp(self, email: str) -> None:
        response = await _post(self._client, SEND_OTP_PATH, SendOtpRequest(email=email))
        if response.is_success:
            logger.info("OTP dispatched to %s", email)
            return

        message = _error_message(response)
        logger.info("OTP dispatch rejected (%d): %s", response.status_code, message)
        if message == ALREADY_REGISTERED_MESSAGE:
            raise AlreadyRegistered(email)
        raise TransientDispatchError(message)

    async def verify_otp(self, email: str, code: str) -> None:
        response = await _post(
            self._client, VERIFY_OTP_PATH, VerifyOtpRequest(email=email, otp=code)
        )
        if response.is_success:
            logger.info("OTP verified for %s", email)
            return

        logger.info("OTP verification rejected (%d) for %s", response.status_code, email)
        raise InvalidCode(_error_message(response) or email)


class HttpAccountGateway:
    """
    Implements AccountGateway protocol over HTTP.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def register(self, name: str, email: str, password: str, otp: str) -> AuthSession:
        body = RegisterRequest(name=name, email=email, password=password, otp=otp)
        response = await _post(self._client, REGISTER_PATH, body)
        if not response.is_success:
            message = _error_message(response)
            logger.info("Registration rejected (%d): %s", response.status_code, message)
            raise RegistrationRejected(message or email)

        try:
            payload = RegisterResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise RegistrationRejected("malformed registration response") from exc

        logger.info("Account created for %s", payload.user.email)
        return AuthSession(
            token=payload.token,
            user=UserIdentity(
                id=str(payload.user.id),
                email=payload.user.email,
                name=payload.user.name,
                role=payload.user.role,
            ),
        )
