"""
OTP-gated signup flow.

Client-side account creation that proves inbox ownership with a one-time
passcode before registering, with Google sign-in as a shortcut.
"""

from signupflow.app import get_auth_context, open_signup_flow
from signupflow.domain import FlowPhase, SignupFlow

__all__ = ["FlowPhase", "SignupFlow", "get_auth_context", "open_signup_flow"]

__version__ = "0.1.0"
