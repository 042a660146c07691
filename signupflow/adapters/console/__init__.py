"""Console adapters - Logging stand-ins for the toast and router layers."""

from .navigator import ConsoleNavigator
from .notifier import ConsoleNotifier

__all__ = ["ConsoleNavigator", "ConsoleNotifier"]
