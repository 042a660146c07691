"""
Domain layer - Pure signup logic with zero framework imports.

This package contains the OTP-gated signup state machine, the cooldown
timer, the email domain policy and the process-wide auth context. It
defines its own port interfaces for infrastructure abstraction; HTTP,
token decoding and configuration live in adapters.
"""

from .auth_context import AuthContext
from .cooldown import CooldownTimer
from .email_policy import is_eligible, normalize_email
from .exceptions import (
    AlreadyRegistered,
    CodeLengthInvalid,
    CooldownActive,
    DispatchError,
    EmailNotEligible,
    InvalidCode,
    InvalidTransition,
    NetworkError,
    OtpNotVerified,
    PasswordMismatch,
    ProfileIncomplete,
    RegistrationError,
    RegistrationRejected,
    SignupError,
    SubmissionInProgress,
    TransientDispatchError,
    ValidationError,
    VerificationError,
)
from .models import AuthSession, FlowPhase, Notification, OtpSession, SignupDraft, UserIdentity
from .ports import AccountGateway, FederatedLogin, Navigator, Notifier, OtpGateway, SessionStore
from .signup import SignupFlow

__all__ = [
    "AccountGateway",
    "AlreadyRegistered",
    "AuthContext",
    "AuthSession",
    "CodeLengthInvalid",
    "CooldownActive",
    "CooldownTimer",
    "DispatchError",
    "EmailNotEligible",
    "FederatedLogin",
    "FlowPhase",
    "InvalidCode",
    "InvalidTransition",
    "Navigator",
    "NetworkError",
    "Notification",
    "Notifier",
    "OtpGateway",
    "OtpNotVerified",
    "OtpSession",
    "PasswordMismatch",
    "ProfileIncomplete",
    "RegistrationError",
    "RegistrationRejected",
    "SessionStore",
    "SignupDraft",
    "SignupError",
    "SignupFlow",
    "SubmissionInProgress",
    "TransientDispatchError",
    "UserIdentity",
    "ValidationError",
    "VerificationError",
    "is_eligible",
    "normalize_email",
]
