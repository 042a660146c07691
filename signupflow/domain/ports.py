"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the signup flow requires
from its collaborators. Adapters implement these protocols.
"""

from typing import Protocol

from .models import AuthSession, Notification


class OtpGateway(Protocol):
    """Port interface for the OTP backend."""

    async def request_otp(self, email: str) -> None:
        """
        Ask the backend to email a signup passcode.

        Args:
            email: Address that passed the domain policy

        Raises:
            AlreadyRegistered: Email already has an account
            TransientDispatchError: Any other rejection
            NetworkError: Transport failure
        """
        ...

    async def verify_otp(self, email: str, code: str) -> None:
        """
        Confirm a passcode for an email.

        Raises:
            InvalidCode: Code rejected by the backend
            NetworkError: Transport failure
        """
        ...


class AccountGateway(Protocol):
    """Port interface for the account registration backend."""

    async def register(self, name: str, email: str, password: str, otp: str) -> AuthSession:
        """
        Create the account. The OTP is re-submitted for a final server check.

        Returns:
            AuthSession for the new account

        Raises:
            RegistrationRejected: Backend refused the account
            NetworkError: Transport failure
        """
        ...


class Notifier(Protocol):
    """Port interface for transient user-facing messages."""

    def notify(self, notification: Notification) -> None: ...


class Navigator(Protocol):
    """Port interface for in-app navigation and full-page redirects."""

    def navigate(self, path: str) -> None:
        """Move to an in-app path such as the post-signup destination."""
        ...

    def redirect(self, url: str) -> None:
        """Leave the app for an external URL (full-page navigation)."""
        ...


class SessionStore(Protocol):
    """Port interface for persisting the authenticated session."""

    def load(self) -> AuthSession | None: ...

    def save(self, session: AuthSession) -> None: ...

    def clear(self) -> None: ...


class FederatedLogin(Protocol):
    """Port interface for the federated sign-in shortcut."""

    def begin(self) -> None:
        """Redirect the visitor to the external authorization endpoint."""
        ...

    def complete(self, location: str) -> AuthSession | None:
        """
        Establish a session from the URL the provider returned to.

        Returns:
            The new AuthSession, or None if no usable token was present
        """
        ...
