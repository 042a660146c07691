"""Federated identity adapters."""

from .google import GoogleRedirectHandler, decode_session, extract_token

__all__ = ["GoogleRedirectHandler", "decode_session", "extract_token"]
