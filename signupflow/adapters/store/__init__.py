"""Session store adapters."""

from .memory import MemorySessionStore

__all__ = ["MemorySessionStore"]
