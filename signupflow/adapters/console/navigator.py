"""
Console navigator adapter - Implements Navigator protocol.

Records where the flow sent the visitor and logs each move.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNavigator:
    """
    Implements Navigator protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, location: str = "/signup") -> None:
        self.location = location
        self.history: list[str] = [location]

    def navigate(self, path: str) -> None:
        logger.info("[NAVIGATE] %s -> %s", self.location, path)
        self._move(path)

    def redirect(self, url: str) -> None:
        logger.info("[REDIRECT] %s", url)
        self._move(url)

    def _move(self, target: str) -> None:
        self.location = target
        self.history.append(target)
