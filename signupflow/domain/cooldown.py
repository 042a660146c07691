"""
Cooldown timer - Gates repeated OTP dispatch requests.

The timer counts down one unit per tick and stops at zero. While it runs,
the signup flow refuses to dispatch another passcode. The countdown only
toggles dispatch eligibility; it never changes the flow phase and never
touches in-flight requests.

Usage:
    async with CooldownTimer(interval=1.0) as timer:
        timer.start(60)
        ...
    # periodic task released here, on every exit path
"""

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType

logger = logging.getLogger(__name__)

TickListener = Callable[[int], None]


class CooldownTimer:
    """
    Decrementing counter with an optional asyncio ticking task.

    Args:
        interval: Seconds between ticks. ``None`` disables the background
            task; callers then drive the countdown with ``tick()``.
    """

    def __init__(self, interval: float | None = 1.0) -> None:
        self._interval = interval
        self._remaining = 0
        self._task: asyncio.Task[None] | None = None
        self._listeners: list[TickListener] = []

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        """True while a background ticking task is alive."""
        return self._task is not None and not self._task.done()

    def can_dispatch(self) -> bool:
        return self._remaining == 0

    def add_listener(self, listener: TickListener) -> None:
        """Call ``listener(remaining)`` whenever the counter changes."""
        self._listeners.append(listener)

    def start(self, seconds: int) -> None:
        """
        Begin a countdown from ``seconds``.

        Restarting while a countdown is active resets the counter and keeps
        the existing ticking task.
        """
        if seconds < 0:
            raise ValueError("cooldown must be >= 0")
        self._set(seconds)
        if seconds == 0 or self._interval is None or self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    def tick(self) -> int:
        """Decrement by one, never below zero. Returns the new remaining value."""
        if self._remaining > 0:
            self._set(self._remaining - 1)
            if self._remaining == 0:
                logger.debug("Cooldown finished")
        return self._remaining

    def cancel(self) -> None:
        """Stop the ticking task. The counter keeps its current value."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.debug("Cooldown task cancelled at %d", self._remaining)

    async def _run(self) -> None:
        try:
            while self._remaining > 0:
                await asyncio.sleep(self._interval)
                self.tick()
        finally:
            if self._task is asyncio.current_task():
                self._task = None

    def _set(self, value: int) -> None:
        self._remaining = value
        for listener in self._listeners:
            listener(value)

    async def __aenter__(self) -> "CooldownTimer":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.cancel()
