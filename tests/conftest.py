"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Mocked gateways, notifier and navigator
- A manually ticked cooldown timer
- A SignupFlow wired to all of the above
- The stand-in auth backend and an httpx client routed into it
"""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from signupflow.config.settings import Settings
from signupflow.domain.auth_context import AuthContext
from signupflow.domain.cooldown import CooldownTimer
from signupflow.domain.models import AuthSession, UserIdentity
from signupflow.domain.signup import SignupFlow

from tests.backend import FakeAuthBackend, create_backend_app


@pytest.fixture
def session() -> AuthSession:
    """AuthSession returned by a successful registration."""
    user = UserIdentity(id="u1", email="a@gmail.com", name="Ada")
    return AuthSession(token="session-token", user=user)


@pytest.fixture
def otp_gateway() -> AsyncMock:
    """OTP gateway that accepts every dispatch and verification."""
    gateway = AsyncMock()
    gateway.request_otp.return_value = None
    gateway.verify_otp.return_value = None
    return gateway


@pytest.fixture
def account_gateway(session: AuthSession) -> AsyncMock:
    """Account gateway that creates every account."""
    gateway = AsyncMock()
    gateway.register.return_value = session
    return gateway


@pytest.fixture
def notifier() -> Mock:
    return Mock()


@pytest.fixture
def navigator() -> Mock:
    return Mock()


@pytest.fixture
def auth_context() -> AuthContext:
    return AuthContext()


@pytest.fixture
def timer() -> CooldownTimer:
    """Cooldown timer without a background task; tests call tick()."""
    return CooldownTimer(interval=None)


@pytest.fixture
def flow(
    otp_gateway: AsyncMock,
    account_gateway: AsyncMock,
    auth_context: AuthContext,
    notifier: Mock,
    navigator: Mock,
    timer: CooldownTimer,
) -> SignupFlow:
    """Signup flow wired to mocked collaborators."""
    return SignupFlow(
        otp_gateway=otp_gateway,
        account_gateway=account_gateway,
        auth_context=auth_context,
        notifier=notifier,
        navigator=navigator,
        timer=timer,
    )


@pytest.fixture
def backend() -> FakeAuthBackend:
    return FakeAuthBackend()


@pytest.fixture
def client(backend: FakeAuthBackend) -> httpx.AsyncClient:
    """AsyncClient routed into the stand-in backend."""
    transport = httpx.ASGITransport(app=create_backend_app(backend))
    return httpx.AsyncClient(transport=transport, base_url="http://backend")


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, server_url="http://backend")
