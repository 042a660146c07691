"""
Signup domain service - OTP-gated account creation state machine.

This module contains the core business logic for creating an account
after the visitor has proven control of their inbox with a one-time
passcode.

Signup State Machine
====================

Phases:
- EMAIL_ENTRY: Visitor types an email (initial phase)
- OTP_PENDING: Passcode dispatched, waiting for the code
- OTP_VERIFIED: Code confirmed (passed through immediately)
- PROFILE_ENTRY: Name and password being completed
- SUBMITTED: Account created or federated login completed (terminal)

Valid Transitions:
    EMAIL_ENTRY   -> OTP_PENDING    (submit_email: eligible email, dispatch ok)
    EMAIL_ENTRY   -> SUBMITTED      (resume_federated: valid token returned)
    OTP_PENDING   -> OTP_PENDING    (submit_email again: resend after cooldown)
    OTP_PENDING   -> EMAIL_ENTRY    (set_email: email edited, OTP invalidated)
    OTP_PENDING   -> OTP_VERIFIED   (submit_code: verification ok)
    OTP_VERIFIED  -> PROFILE_ENTRY  (immediately)
    PROFILE_ENTRY -> SUBMITTED      (submit_profile: account created)

Phase changes only happen in response to user actions. The cooldown timer
only toggles dispatch eligibility. Guard failures keep the current phase,
notify the user and record the error in ``last_error``. Calling an
operation from a phase that does not allow it raises InvalidTransition.

Every network call is followed by a stale-response check: once the flow is
closed, late results are discarded without touching state.
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from types import TracebackType
from typing import TypeVar

from .auth_context import AuthContext
from .cooldown import CooldownTimer
from .email_policy import DEFAULT_EMAIL_SUFFIX, is_eligible, normalize_email
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
    SignupError,
    SubmissionInProgress,
)
from .models import FlowPhase, Notification, OtpSession, SignupDraft
from .ports import AccountGateway, FederatedLogin, Navigator, Notifier, OtpGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")

OTP_COOLDOWN_SECONDS = 60
OTP_LENGTH = 6

_TRANSITIONS: dict[FlowPhase, frozenset[FlowPhase]] = {
    FlowPhase.EMAIL_ENTRY: frozenset({FlowPhase.OTP_PENDING, FlowPhase.SUBMITTED}),
    FlowPhase.OTP_PENDING: frozenset(
        {FlowPhase.OTP_PENDING, FlowPhase.EMAIL_ENTRY, FlowPhase.OTP_VERIFIED}
    ),
    FlowPhase.OTP_VERIFIED: frozenset({FlowPhase.PROFILE_ENTRY}),
    FlowPhase.PROFILE_ENTRY: frozenset({FlowPhase.SUBMITTED}),
    FlowPhase.SUBMITTED: frozenset(),
}


class SignupFlow:
    """
    Orchestrates email entry, OTP dispatch and verification, and account
    creation for a single visitor.

    One instance per mounted signup screen. Use it as an async context
    manager (or call ``close()``) so the cooldown task is released when
    the visitor navigates away.
    """

    def __init__(
        self,
        otp_gateway: OtpGateway,
        account_gateway: AccountGateway,
        auth_context: AuthContext,
        notifier: Notifier,
        navigator: Navigator,
        timer: CooldownTimer | None = None,
        federated: FederatedLogin | None = None,
        email_suffix: str = DEFAULT_EMAIL_SUFFIX,
        otp_length: int = OTP_LENGTH,
        cooldown_seconds: int = OTP_COOLDOWN_SECONDS,
        post_signup_path: str = "/student",
        login_path: str = "/login",
    ) -> None:
        self.otp_gateway = otp_gateway
        self.account_gateway = account_gateway
        self.auth_context = auth_context
        self.notifier = notifier
        self.navigator = navigator
        self.timer = timer if timer is not None else CooldownTimer()
        self.federated = federated
        self.email_suffix = email_suffix
        self.otp_length = otp_length
        self.cooldown_seconds = cooldown_seconds
        self.post_signup_path = post_signup_path
        self.login_path = login_path

        self.flow_id = uuid.uuid4().hex
        self.draft = SignupDraft()
        self.code = ""
        self.otp_session: OtpSession | None = None
        self.last_error: SignupError | None = None
        self.loading = False
        self._phase = FlowPhase.EMAIL_ENTRY
        self._closed = False
        self.timer.add_listener(self._on_cooldown_tick)

    # -- state -----------------------------------------------------------

    @property
    def phase(self) -> FlowPhase:
        return self._phase

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cooldown_remaining(self) -> int:
        return self.timer.remaining

    def can_dispatch(self) -> bool:
        """True when the send button would be enabled."""
        return not self.loading and self.timer.can_dispatch()

    # -- field edits -------------------------------------------------------

    def set_email(self, email: str) -> None:
        """
        Edit the email field.

        A pending OTP belongs to the email it was sent to; changing the
        email before verification drops it and returns to EMAIL_ENTRY.
        """
        self._ensure_open()
        if self._phase in (FlowPhase.PROFILE_ENTRY, FlowPhase.SUBMITTED):
            raise InvalidTransition(f"email is locked in phase {self._phase.value}")
        self.draft.email = email
        if self._phase is FlowPhase.OTP_PENDING and self.otp_session is not None:
            if normalize_email(email) != self.otp_session.email:
                logger.info("Email edited, invalidating pending OTP (flow %s)", self.flow_id)
                self.otp_session = None
                self.code = ""
                self._transition(FlowPhase.EMAIL_ENTRY)

    def set_code(self, code: str) -> None:
        self._ensure_open()
        self.code = code

    def update_profile(
        self,
        name: str | None = None,
        password: str | None = None,
        confirm_password: str | None = None,
    ) -> None:
        self._ensure_open()
        if name is not None:
            self.draft.name = name
        if password is not None:
            self.draft.password = password
        if confirm_password is not None:
            self.draft.confirm_password = confirm_password

    # -- actions -----------------------------------------------------------

    async def submit_email(self) -> bool:
        """
        Dispatch a passcode to the entered email.

        Returns:
            True if the flow is now OTP_PENDING with a fresh OtpSession.
        """
        self._require_phase("submit_email", FlowPhase.EMAIL_ENTRY, FlowPhase.OTP_PENDING)
        email = normalize_email(self.draft.email)

        if not is_eligible(email, self.email_suffix):
            return self._reject(
                EmailNotEligible(email),
                "Invalid Email",
                f"Please use a {self._provider_label()} address to sign up.",
            )
        if not self.timer.can_dispatch():
            return self._reject(
                CooldownActive(self.timer.remaining),
                "Please Wait",
                f"You can request a new code in {self.timer.remaining}s.",
            )

        try:
            await self._call(lambda: self.otp_gateway.request_otp(email))
        except AlreadyRegistered as exc:
            if self._closed:
                return self._discard("request_otp")
            return self._reject(
                exc,
                "User Already Exists",
                "This email is already registered. Please login instead.",
                action_path=self.login_path,
            )
        except (DispatchError, NetworkError) as exc:
            if self._closed:
                return self._discard("request_otp")
            detail = str(exc) if isinstance(exc, DispatchError) else ""
            return self._reject(exc, "Failed to send OTP", detail or "Try again.")

        if self._closed or self._phase is FlowPhase.SUBMITTED:
            return self._discard("request_otp")

        # Cooldown applies even if the email changed while the request was in flight.
        self.timer.start(self.cooldown_seconds)
        if normalize_email(self.draft.email) != email:
            logger.info("Email edited while dispatch was in flight (flow %s)", self.flow_id)
            return False

        self.otp_session = OtpSession(email=email, cooldown_remaining=self.timer.remaining)
        self.code = ""
        self.last_error = None
        self._transition(FlowPhase.OTP_PENDING)
        self.notifier.notify(Notification("OTP Sent", "Check your email for the OTP."))
        return True

    async def submit_code(self) -> bool:
        """
        Verify the entered code for the pending OtpSession.

        Returns:
            True if the flow reached PROFILE_ENTRY. Re-submitting after a
            successful verification is a no-op that returns True.
        """
        self._ensure_open()
        session = self.otp_session
        if self._phase is FlowPhase.PROFILE_ENTRY and session is not None and session.verified:
            logger.debug("OTP already verified (flow %s)", self.flow_id)
            return True
        self._require_phase("submit_code", FlowPhase.OTP_PENDING)
        if session is None:
            raise InvalidTransition("no OTP has been dispatched for this email")

        code = self.code.strip()
        if len(code) != self.otp_length:
            return self._reject(
                CodeLengthInvalid(len(code)),
                "Invalid OTP",
                f"Enter the {self.otp_length}-digit code we sent to {session.email}.",
            )

        try:
            await self._call(lambda: self.otp_gateway.verify_otp(session.email, code))
        except InvalidCode as exc:
            if self._closed:
                return self._discard("verify_otp")
            return self._reject(exc, "Invalid OTP", "Please check your OTP and try again.")
        except NetworkError as exc:
            if self._closed:
                return self._discard("verify_otp")
            return self._reject(exc, "Error", "Failed to verify OTP.")

        if self._closed:
            return self._discard("verify_otp")
        if self.otp_session is not session:
            logger.info("OTP session replaced while verifying (flow %s)", self.flow_id)
            return False

        session.verified = True
        self.code = code
        self.last_error = None
        self._transition(FlowPhase.OTP_VERIFIED)
        self._transition(FlowPhase.PROFILE_ENTRY)
        self.notifier.notify(Notification("OTP Verified", "You can now create your account."))
        return True

    async def submit_profile(self) -> bool:
        """
        Create the account from the completed profile.

        Returns:
            True if the account exists, the AuthSession is established and
            the flow is SUBMITTED. On failure every entered field is kept.
        """
        self._require_phase("submit_profile", FlowPhase.PROFILE_ENTRY)
        draft = self.draft
        email = normalize_email(draft.email)

        if not is_eligible(email, self.email_suffix):
            return self._reject(
                EmailNotEligible(email),
                "Invalid Email",
                f"Please use a {self._provider_label()} address to sign up.",
            )
        if not draft.name.strip() or not draft.password:
            return self._reject(
                ProfileIncomplete("name and password are required"),
                "Missing Details",
                "Please enter your name and a password.",
            )
        if draft.password != draft.confirm_password:
            return self._reject(
                PasswordMismatch("passwords differ"),
                "Password Mismatch",
                "Passwords do not match.",
            )
        if self.otp_session is None or not self.otp_session.verified:
            return self._reject(
                OtpNotVerified(email),
                "OTP Not Verified",
                "Please verify your OTP before creating an account.",
            )

        name, password, otp = draft.name.strip(), draft.password, self.code
        try:
            session = await self._call(
                lambda: self.account_gateway.register(name, email, password, otp)
            )
        except RegistrationError as exc:
            if self._closed:
                return self._discard("register")
            return self._reject(
                exc, "Signup Failed", "Email may already be in use or OTP not verified."
            )
        except NetworkError as exc:
            if self._closed:
                return self._discard("register")
            return self._reject(exc, "Error", "Unexpected error. Try again.")

        if self._closed:
            return self._discard("register")

        self.auth_context.login(session)
        self._finish()
        self.notifier.notify(Notification("Account Created", "Welcome to EduFlow!"))
        self.navigator.navigate(self.post_signup_path)
        return True

    def start_federated_login(self) -> None:
        """Leave the flow for the external identity provider."""
        self._require_phase("start_federated_login", FlowPhase.EMAIL_ENTRY)
        if self.federated is None:
            raise InvalidTransition("federated login is not configured")
        self.federated.begin()

    def resume_federated(self, location: str) -> bool:
        """
        Resume from the provider's redirect back into the app.

        A missing or malformed token is a silent no-op: the flow stays in
        EMAIL_ENTRY and no error is shown.
        """
        self._ensure_open()
        if self.federated is None or self._phase is not FlowPhase.EMAIL_ENTRY:
            return False
        session = self.federated.complete(location)
        if session is None:
            return False
        self._finish()
        return True

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Unmount the flow: stop the cooldown task and drop the draft."""
        if self._closed:
            return
        self._closed = True
        self.timer.cancel()
        self.draft.clear()
        self.code = ""
        logger.debug("Signup flow %s closed in phase %s", self.flow_id, self._phase.value)

    async def __aenter__(self) -> "SignupFlow":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- internals ---------------------------------------------------------

    async def _call(self, request: Callable[[], Awaitable[T]]) -> T:
        if self.loading:
            raise SubmissionInProgress(f"flow {self.flow_id} is already submitting")
        self.loading = True
        try:
            return await request()
        finally:
            self.loading = False

    def _transition(self, target: FlowPhase) -> None:
        if target not in _TRANSITIONS[self._phase]:
            raise InvalidTransition(f"{self._phase.value} -> {target.value}")
        logger.info(
            "Signup flow %s: %s -> %s", self.flow_id, self._phase.value, target.value
        )
        self._phase = target

    def _finish(self) -> None:
        self._transition(FlowPhase.SUBMITTED)
        self.timer.cancel()
        self.draft.clear()
        self.code = ""
        self.otp_session = None
        self.last_error = None

    def _require_phase(self, action: str, *allowed: FlowPhase) -> None:
        self._ensure_open()
        if self.loading:
            raise SubmissionInProgress(f"{action} while a request is outstanding")
        if self._phase not in allowed:
            raise InvalidTransition(f"{action} not allowed in phase {self._phase.value}")

    def _ensure_open(self) -> None:
        if self._closed:
            raise InvalidTransition(f"signup flow {self.flow_id} is closed")

    def _reject(
        self,
        error: SignupError,
        title: str,
        description: str,
        action_path: str | None = None,
    ) -> bool:
        logger.info(
            "Signup flow %s stays in %s: %s",
            self.flow_id,
            self._phase.value,
            type(error).__name__,
        )
        self.last_error = error
        self.notifier.notify(
            Notification(title, description, variant="destructive", action_path=action_path)
        )
        return False

    def _discard(self, operation: str) -> bool:
        logger.info(
            "Ignoring %s response for flow %s in phase %s (closed=%s)",
            operation,
            self.flow_id,
            self._phase.value,
            self._closed,
        )
        return False

    def _on_cooldown_tick(self, remaining: int) -> None:
        if self.otp_session is not None:
            self.otp_session.cooldown_remaining = remaining

    def _provider_label(self) -> str:
        return self.email_suffix.lstrip("@").split(".")[0].capitalize()
