"""
Email domain policy.

Verification trust is anchored to a single mail provider, so only
addresses under that provider's domain may enter the signup flow.
"""

DEFAULT_EMAIL_SUFFIX = "@gmail.com"


def normalize_email(email: str) -> str:
    """Strip whitespace and lowercase."""
    return email.strip().lower()


def is_eligible(email: str, suffix: str = DEFAULT_EMAIL_SUFFIX) -> bool:
    """
    Return True if ``email`` ends with the allowed domain suffix.

    The local part must be non-empty: "@gmail.com" alone is rejected.
    """
    normalized = normalize_email(email)
    suffix = suffix.lower()
    if not normalized.endswith(suffix):
        return False
    return len(normalized) > len(suffix)
