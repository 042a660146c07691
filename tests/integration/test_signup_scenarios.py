"""
Integration tests for the signup flow.

Runs SignupFlow with the real HTTP gateways against the stand-in
backend, covering the end-to-end scenarios: Gmail signup with a wrong
then correct code, rejected non-Gmail address, email edit after
dispatch, already-registered email and Google sign-in.
"""

import asyncio
import logging

import httpx
import jwt
import pytest

from signupflow.adapters.console import ConsoleNavigator, ConsoleNotifier
from signupflow.app import open_signup_flow
from signupflow.config.settings import Settings
from signupflow.domain.auth_context import AuthContext
from signupflow.domain.exceptions import (
    AlreadyRegistered,
    EmailNotEligible,
    InvalidCode,
    InvalidTransition,
    PasswordMismatch,
)
from signupflow.domain.models import FlowPhase

from tests.backend import FakeAuthBackend


class TestGmailSignup:
    """Full OTP signup for a Gmail address."""

    @pytest.mark.asyncio
    async def test_full_signup(
        self,
        client: httpx.AsyncClient,
        backend: FakeAuthBackend,
        settings: Settings,
        auth_context: AuthContext,
        notifier: ConsoleNotifier,
        navigator: ConsoleNavigator,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Dispatch, wrong code, right code, mismatched then matching passwords."""
        async with client, open_signup_flow(
            settings=settings,
            auth_context=auth_context,
            notifier=notifier,
            navigator=navigator,
            client=client,
        ) as flow:
            flow.set_email("a@gmail.com")
            assert await flow.submit_email()
            assert flow.phase is FlowPhase.OTP_PENDING
            assert flow.cooldown_remaining == 60
            assert backend.dispatches == ["a@gmail.com"]

            flow.set_code("000000")
            assert not await flow.submit_code()
            assert flow.phase is FlowPhase.OTP_PENDING
            assert isinstance(flow.last_error, InvalidCode)

            flow.set_code("123456")
            assert await flow.submit_code()
            assert flow.phase is FlowPhase.PROFILE_ENTRY

            flow.update_profile(name="Ada", password="pw-one", confirm_password="pw-two")
            with caplog.at_level(logging.INFO):
                assert not await flow.submit_profile()
            assert isinstance(flow.last_error, PasswordMismatch)
            assert backend.users == {}

            flow.update_profile(confirm_password="pw-one")
            assert await flow.submit_profile()

            assert flow.phase is FlowPhase.SUBMITTED

        assert auth_context.is_authenticated
        assert auth_context.user.email == "a@gmail.com"
        assert auth_context.user.id == "user-1"
        assert navigator.location == "/student"
        assert notifier.last.title == "Account Created"
        assert "a@gmail.com" in backend.users
        assert "pw-one" not in caplog.text

    @pytest.mark.asyncio
    async def test_cooldown_runs_in_background(
        self, client: httpx.AsyncClient, auth_context: AuthContext
    ) -> None:
        settings = Settings(
            _env_file=None,
            server_url="http://backend",
            otp_cooldown_seconds=3,
            cooldown_tick_seconds=0.001,
        )
        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, client=client
        ) as flow:
            flow.set_email("a@gmail.com")
            await flow.submit_email()
            assert not flow.can_dispatch()

            for _ in range(200):
                if flow.can_dispatch():
                    break
                await asyncio.sleep(0.005)

            assert flow.cooldown_remaining == 0
            assert flow.otp_session.cooldown_remaining == 0
            assert await flow.submit_email()


class TestRejectedPaths:
    """Signups that must not progress."""

    @pytest.mark.asyncio
    async def test_yahoo_address_never_dispatched(
        self,
        client: httpx.AsyncClient,
        backend: FakeAuthBackend,
        settings: Settings,
        auth_context: AuthContext,
    ) -> None:
        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, client=client
        ) as flow:
            flow.set_email("a@yahoo.com")
            assert not await flow.submit_email()
            assert isinstance(flow.last_error, EmailNotEligible)
            assert flow.phase is FlowPhase.EMAIL_ENTRY

        assert backend.dispatches == []

    @pytest.mark.asyncio
    async def test_already_registered_email(
        self,
        client: httpx.AsyncClient,
        backend: FakeAuthBackend,
        settings: Settings,
        auth_context: AuthContext,
        notifier: ConsoleNotifier,
    ) -> None:
        backend.users["a@gmail.com"] = {"_id": "user-0", "email": "a@gmail.com"}

        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, notifier=notifier, client=client
        ) as flow:
            flow.set_email("a@gmail.com")
            assert not await flow.submit_email()
            assert isinstance(flow.last_error, AlreadyRegistered)

        assert notifier.last.action_path == "/login"
        assert not auth_context.is_authenticated

    @pytest.mark.asyncio
    async def test_email_edit_requires_new_dispatch(
        self,
        client: httpx.AsyncClient,
        backend: FakeAuthBackend,
        settings: Settings,
        auth_context: AuthContext,
    ) -> None:
        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, client=client
        ) as flow:
            flow.set_email("a@gmail.com")
            await flow.submit_email()

            flow.set_email("b@gmail.com")
            assert flow.phase is FlowPhase.EMAIL_ENTRY
            assert flow.otp_session is None

            flow.set_code("123456")
            with pytest.raises(InvalidTransition):
                await flow.submit_code()

        assert backend.verify_attempts == 0

    @pytest.mark.asyncio
    async def test_backend_down(
        self, settings: Settings, auth_context: AuthContext, notifier: ConsoleNotifier
    ) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://backend")
        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, notifier=notifier, client=client
        ) as flow:
            flow.set_email("a@gmail.com")
            assert not await flow.submit_email()
            assert flow.phase is FlowPhase.EMAIL_ENTRY
            assert flow.can_dispatch()

        assert notifier.last.title == "Failed to send OTP"


class TestGoogleSignIn:
    """Federated shortcut through the same wiring."""

    @pytest.mark.asyncio
    async def test_redirect_and_return(
        self,
        client: httpx.AsyncClient,
        settings: Settings,
        auth_context: AuthContext,
        navigator: ConsoleNavigator,
    ) -> None:
        token = jwt.encode({"id": "g-1", "email": "a@gmail.com", "name": "Ada"}, "k", algorithm="HS256")

        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, navigator=navigator, client=client
        ) as flow:
            flow.start_federated_login()
            assert navigator.location == "http://backend/api/auth/google"

            assert flow.resume_federated(f"/signup?token={token}")
            assert flow.phase is FlowPhase.SUBMITTED

        assert auth_context.user.id == "g-1"
        assert navigator.location == "/student"

    @pytest.mark.asyncio
    async def test_return_without_token(
        self, client: httpx.AsyncClient, settings: Settings, auth_context: AuthContext
    ) -> None:
        async with client, open_signup_flow(
            settings=settings, auth_context=auth_context, client=client
        ) as flow:
            assert not flow.resume_federated("/signup")
            assert flow.phase is FlowPhase.EMAIL_ENTRY
            assert flow.last_error is None

        assert not auth_context.is_authenticated
