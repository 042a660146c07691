"""
Google redirect handler - Implements FederatedLogin protocol.

Sign-in with Google is a full-page round trip through the backend:

1. begin() redirects to ``{server_url}/api/auth/google``
2. the provider authenticates the visitor and the backend redirects back
   into the app with ``?token=<jwt>`` (or ``#token=<jwt>``)
3. complete(location) decodes that token and logs the user in

Trust boundary:
    The token is decoded locally WITHOUT signature verification. Trust is
    placed in the redirect transport from the backend. Any code path that
    grants privileges from these claims must verify the token server-side.
"""

import logging
from urllib.parse import parse_qs, urlsplit

import jwt

from signupflow.domain.auth_context import AuthContext
from signupflow.domain.models import AuthSession, UserIdentity
from signupflow.domain.ports import Navigator

logger = logging.getLogger(__name__)

GOOGLE_AUTH_PATH = "/api/auth/google"
TOKEN_PARAM = "token"

_ID_CLAIMS = ("id", "_id", "userId", "sub")


def extract_token(location: str) -> str | None:
    """
    Return the token carried in the URL's query string or fragment.

    Hash-routed returns (``#/callback?token=...``) are read from the part
    of the fragment after ``?``. An unparseable location yields None.
    """
    try:
        parts = urlsplit(location)
        fragment = parts.fragment.partition("?")[2] or parts.fragment
        for component in (parts.query, fragment):
            values = parse_qs(component).get(TOKEN_PARAM)
            if values and values[0]:
                return values[0]
    except ValueError as exc:
        logger.debug("Ignoring unparseable federated return: %s", exc)
    return None


def decode_session(token: str) -> AuthSession | None:
    """
    Decode identity claims from ``token`` without verifying its signature.

    Returns None when the token is malformed or lacks an email claim.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as exc:
        logger.debug("Ignoring undecodable federated token: %s", type(exc).__name__)
        return None

    email = claims.get("email")
    if not isinstance(email, str) or not email:
        logger.debug("Ignoring federated token without email claim")
        return None

    user_id = next((claims[key] for key in _ID_CLAIMS if claims.get(key)), "")
    return AuthSession(
        token=token,
        user=UserIdentity(
            id=str(user_id),
            email=email,
            name=str(claims.get("name") or ""),
            role=str(claims.get("role") or "student"),
        ),
    )


class GoogleRedirectHandler:
    """
    Implements FederatedLogin protocol for the backend's Google endpoint.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        server_url: str,
        auth_context: AuthContext,
        navigator: Navigator,
        post_login_path: str = "/student",
        auth_path: str = GOOGLE_AUTH_PATH,
    ) -> None:
        self.server_url = server_url.rstrip("/")
        self.auth_context = auth_context
        self.navigator = navigator
        self.post_login_path = post_login_path
        self.auth_path = auth_path

    def authorization_url(self) -> str:
        return f"{self.server_url}{self.auth_path}"

    def begin(self) -> None:
        self.navigator.redirect(self.authorization_url())

    def complete(self, location: str) -> AuthSession | None:
        """
        Establish the session from the page the provider returned to.

        A missing or malformed token is not an error: nothing happens and
        None is returned.
        """
        token = extract_token(location)
        if token is None:
            return None
        session = decode_session(token)
        if session is None:
            return None

        self.auth_context.login(session)
        logger.info("Federated sign-in completed for %s", session.user.email)
        self.navigator.navigate(self.post_login_path)
        return session
