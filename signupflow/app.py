"""
Application wiring - Builds a SignupFlow with its adapters.

This module plays the role of a dependency container: it wires the HTTP
gateways, console adapters, federated handler and cooldown timer into a
SignupFlow, and manages the lifetime of the shared HTTP client.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx

from signupflow.adapters.console import ConsoleNavigator, ConsoleNotifier
from signupflow.adapters.federated import GoogleRedirectHandler
from signupflow.adapters.http import HttpAccountGateway, HttpOtpGateway
from signupflow.adapters.store import MemorySessionStore
from signupflow.config.settings import Settings, get_settings
from signupflow.domain.auth_context import AuthContext
from signupflow.domain.cooldown import CooldownTimer
from signupflow.domain.ports import Navigator, Notifier
from signupflow.domain.signup import SignupFlow

logger = logging.getLogger(__name__)

# Module-level singleton - every flow in the process shares one auth context
_auth_context = AuthContext(store=MemorySessionStore())


def get_auth_context() -> AuthContext:
    """Get the process-wide auth context (singleton)."""
    return _auth_context


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the HTTP client for the auth backend."""
    return httpx.AsyncClient(
        base_url=settings.server_url,
        timeout=settings.request_timeout_seconds,
        headers={"Content-Type": "application/json"},
    )


def build_signup_flow(
    client: httpx.AsyncClient,
    settings: Settings,
    auth_context: AuthContext,
    notifier: Notifier,
    navigator: Navigator,
) -> SignupFlow:
    """
    Create a signup flow with injected dependencies.

    Wires together the gateways, federated handler and cooldown timer.
    """
    federated = GoogleRedirectHandler(
        server_url=settings.server_url,
        auth_context=auth_context,
        navigator=navigator,
        post_login_path=settings.post_signup_path,
        auth_path=settings.federated_auth_path,
    )
    return SignupFlow(
        otp_gateway=HttpOtpGateway(client),
        account_gateway=HttpAccountGateway(client),
        auth_context=auth_context,
        notifier=notifier,
        navigator=navigator,
        timer=CooldownTimer(interval=settings.cooldown_tick_seconds),
        federated=federated,
        email_suffix=settings.allowed_email_suffix,
        otp_length=settings.otp_length,
        cooldown_seconds=settings.otp_cooldown_seconds,
        post_signup_path=settings.post_signup_path,
        login_path=settings.login_path,
    )


@asynccontextmanager
async def open_signup_flow(
    settings: Settings | None = None,
    auth_context: AuthContext | None = None,
    notifier: Notifier | None = None,
    navigator: Navigator | None = None,
    client: httpx.AsyncClient | None = None,
) -> AsyncGenerator[SignupFlow, None]:
    """
    Mount a signup flow for the duration of the ``async with`` block.

    Manages the flow lifetime:
    - Creates the HTTP client unless one is supplied
    - Closes the flow on exit, releasing the cooldown task
    - Closes the HTTP client if it was created here
    """
    settings = settings or get_settings()
    auth_context = auth_context or get_auth_context()
    owns_client = client is None
    http_client = client if client is not None else build_http_client(settings)

    flow = build_signup_flow(
        http_client,
        settings,
        auth_context,
        notifier or ConsoleNotifier(),
        navigator or ConsoleNavigator(),
    )
    logger.info("Signup flow %s mounted against %s", flow.flow_id, settings.server_url)
    try:
        async with flow:
            yield flow
    finally:
        if owns_client:
            await http_client.aclose()
        logger.info("Signup flow %s unmounted", flow.flow_id)
