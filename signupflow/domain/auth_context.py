"""
Process-wide authentication context.

One AuthContext instance is shared by every reader in the process. It
starts anonymous, is written by login()/logout(), and optionally mirrors
the session into a SessionStore. restore() reloads it from that store;
whether it outlives the process depends on the store.
"""

import logging
from collections.abc import Callable

from .models import AuthSession, UserIdentity
from .ports import SessionStore

logger = logging.getLogger(__name__)

SessionListener = Callable[[AuthSession | None], None]


class AuthContext:
    """Single-writer, multi-reader holder of the current AuthSession."""

    def __init__(self, store: SessionStore | None = None) -> None:
        self._store = store
        self._session: AuthSession | None = None
        self._listeners: list[SessionListener] = []

    @property
    def session(self) -> AuthSession | None:
        return self._session

    @property
    def user(self) -> UserIdentity | None:
        return self._session.user if self._session else None

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for login/logout. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def login(self, session: AuthSession) -> None:
        self._session = session
        if self._store is not None:
            self._store.save(session)
        logger.info("Logged in as %s", session.user.email)
        self._publish()

    def logout(self) -> None:
        if self._session is None:
            return
        email = self._session.user.email
        self._session = None
        if self._store is not None:
            self._store.clear()
        logger.info("Logged out %s", email)
        self._publish()

    def restore(self) -> bool:
        """Load a previously saved session from the store, if any."""
        if self._store is None:
            return False
        session = self._store.load()
        if session is None:
            return False
        self._session = session
        logger.info("Restored session for %s", session.user.email)
        self._publish()
        return True

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)
