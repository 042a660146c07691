"""
Fixtures for integration tests.

Replaces the mocked notifier, navigator and auth context from the root
conftest with the real console adapters and a store-backed context.
"""

import pytest

from signupflow.adapters.console import ConsoleNavigator, ConsoleNotifier
from signupflow.adapters.store import MemorySessionStore
from signupflow.domain.auth_context import AuthContext


@pytest.fixture
def auth_context() -> AuthContext:
    return AuthContext(store=MemorySessionStore())


@pytest.fixture
def notifier() -> ConsoleNotifier:
    return ConsoleNotifier()


@pytest.fixture
def navigator() -> ConsoleNavigator:
    return ConsoleNavigator()
