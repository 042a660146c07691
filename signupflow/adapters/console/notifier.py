"""
Console notifier adapter - Implements Notifier protocol.

This module provides a console-based implementation of the flow's
notifier port, logging toast messages instead of rendering them.
"""

import logging

from signupflow.domain.models import Notification

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Successful outcomes are logged at INFO, failures at WARNING.
    The last notification is kept for callers that poll for it.
    """

    def __init__(self) -> None:
        self.last: Notification | None = None

    def notify(self, notification: Notification) -> None:
        self.last = notification
        level = logging.WARNING if notification.is_error else logging.INFO
        logger.log(
            level,
            "[NOTIFY] %s: %s",
            notification.title,
            notification.description,
        )
        if notification.action_path:
            logger.log(level, "[NOTIFY] Suggested page: %s", notification.action_path)
