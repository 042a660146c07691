"""
Domain exceptions - Semantic error types for the signup flow.

This module defines domain-specific exceptions that communicate
guard failures and collaborator rejections without leaking
transport details (httpx, status codes) into the state machine.
"""


class SignupError(Exception):
    """Base class for signup domain errors."""

    pass


class ValidationError(SignupError):
    """Local input check failed; never reaches the network."""

    pass


class EmailNotEligible(ValidationError):
    """Email does not end with the allowed domain suffix."""

    pass


class PasswordMismatch(ValidationError):
    """Password and confirmation differ."""

    pass


class ProfileIncomplete(ValidationError):
    """A required profile field (name or password) is empty."""

    pass


class OtpNotVerified(ValidationError):
    """Account creation attempted without a verified OTP session."""

    pass


class CodeLengthInvalid(ValidationError):
    """Entered code does not have the expected length."""

    pass


class DispatchError(SignupError):
    """OTP could not be dispatched."""

    pass


class AlreadyRegistered(DispatchError):
    """Email already belongs to an account. Terminal for this flow."""

    pass


class TransientDispatchError(DispatchError):
    """Dispatch failed for a retryable reason."""

    pass


class CooldownActive(DispatchError):
    """Dispatch refused locally while the cooldown is running."""

    def __init__(self, remaining: int) -> None:
        super().__init__(f"OTP dispatch available in {remaining}s")
        self.remaining = remaining


class VerificationError(SignupError):
    """OTP verification failed."""

    pass


class InvalidCode(VerificationError):
    """Server rejected the code for this email."""

    pass


class RegistrationError(SignupError):
    """Account creation failed."""

    pass


class RegistrationRejected(RegistrationError):
    """Server refused to create the account."""

    pass


class NetworkError(SignupError):
    """Transport failure talking to a backend. Always user-retryable."""

    pass


class InvalidTransition(SignupError):
    """Operation is not allowed from the current flow phase."""

    pass


class SubmissionInProgress(SignupError):
    """A submission is already outstanding for this flow."""

    pass
