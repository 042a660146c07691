"""
Domain models - Plain data carried through the signup flow.

SignupDraft holds the form fields, OtpSession tracks the passcode
dispatched for one email, and AuthSession is the credential handed
to the process-wide AuthContext once an account exists.
"""

from dataclasses import dataclass, field
from enum import Enum


class FlowPhase(str, Enum):
    """
    Phases of the signup state machine.

    Exactly one phase is active at a time. SUBMITTED is terminal.
    OTP_VERIFIED is passed through on the way to PROFILE_ENTRY.
    """

    EMAIL_ENTRY = "email_entry"
    OTP_PENDING = "otp_pending"
    OTP_VERIFIED = "otp_verified"
    PROFILE_ENTRY = "profile_entry"
    SUBMITTED = "submitted"


@dataclass
class SignupDraft:
    """Form fields entered by the visitor."""

    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""

    def clear(self) -> None:
        self.name = ""
        self.email = ""
        self.password = ""
        self.confirm_password = ""


@dataclass
class OtpSession:
    """A passcode dispatched for ``email``; ``verified`` once confirmed."""

    email: str
    verified: bool = False
    cooldown_remaining: int = 0


@dataclass(frozen=True)
class UserIdentity:
    """Minimal identity claims about the signed-in user."""

    id: str
    email: str
    name: str = ""
    role: str = "student"


@dataclass(frozen=True)
class AuthSession:
    """Opaque credential plus the identity it belongs to."""

    token: str = field(repr=False)
    user: UserIdentity


@dataclass(frozen=True)
class Notification:
    """
    Transient user-facing message (toast).

    ``variant`` is "default" for success and "destructive" for failures.
    ``action_path`` optionally points the user somewhere, e.g. the login page.
    """

    title: str
    description: str
    variant: str = "default"
    action_path: str | None = None

    @property
    def is_error(self) -> bool:
        return self.variant == "destructive"
