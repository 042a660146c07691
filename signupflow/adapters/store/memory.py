"""
In-memory session store - Implements SessionStore protocol.

Keeps the authenticated session for the life of the process,
the way the browser keeps the token in local storage.
"""

from signupflow.domain.models import AuthSession


class MemorySessionStore:
    """
    Implements SessionStore protocol with a single slot.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, session: AuthSession | None = None) -> None:
        self._session = session

    def load(self) -> AuthSession | None:
        return self._session

    def save(self, session: AuthSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None
