"""
Unit tests for CooldownTimer.

Tests verify:
- Countdown arithmetic (exactly one per tick, never negative)
- Background ticking and automatic stop at zero
- Scoped release of the ticking task
"""

import asyncio

import pytest

from signupflow.domain.cooldown import CooldownTimer


class TestManualTicks:
    """Tests with the background task disabled."""

    def test_idle_timer_allows_dispatch(self) -> None:
        timer = CooldownTimer(interval=None)
        assert timer.remaining == 0
        assert timer.can_dispatch()

    def test_start_sets_remaining(self) -> None:
        timer = CooldownTimer(interval=None)
        timer.start(60)
        assert timer.remaining == 60
        assert not timer.can_dispatch()

    def test_tick_decrements_by_exactly_one(self) -> None:
        timer = CooldownTimer(interval=None)
        timer.start(60)
        seen = [timer.tick() for _ in range(60)]
        assert seen == list(range(59, -1, -1))
        assert timer.can_dispatch()

    def test_tick_halts_at_zero(self) -> None:
        timer = CooldownTimer(interval=None)
        timer.start(2)
        for _ in range(5):
            timer.tick()
        assert timer.remaining == 0

    def test_negative_start_rejected(self) -> None:
        timer = CooldownTimer(interval=None)
        with pytest.raises(ValueError):
            timer.start(-1)

    def test_restart_resets_counter(self) -> None:
        timer = CooldownTimer(interval=None)
        timer.start(10)
        timer.tick()
        timer.start(60)
        assert timer.remaining == 60

    def test_listeners_see_every_value(self) -> None:
        timer = CooldownTimer(interval=None)
        values: list[int] = []
        timer.add_listener(values.append)
        timer.start(3)
        timer.tick()
        timer.tick()
        timer.tick()
        timer.tick()
        assert values == [3, 2, 1, 0]

    def test_manual_timer_never_runs(self) -> None:
        timer = CooldownTimer(interval=None)
        timer.start(5)
        assert not timer.running


class TestBackgroundTicks:
    """Tests for the asyncio ticking task."""

    @pytest.mark.asyncio
    async def test_counts_down_to_zero_and_stops(self) -> None:
        timer = CooldownTimer(interval=0.001)
        values: list[int] = []
        timer.add_listener(values.append)

        timer.start(3)
        assert timer.running
        for _ in range(200):
            if not timer.running:
                break
            await asyncio.sleep(0.005)

        assert timer.remaining == 0
        assert not timer.running
        assert values == [3, 2, 1, 0]

    @pytest.mark.asyncio
    async def test_start_zero_does_not_spawn_task(self) -> None:
        timer = CooldownTimer(interval=0.001)
        timer.start(0)
        assert not timer.running

    @pytest.mark.asyncio
    async def test_restart_reuses_running_task(self) -> None:
        timer = CooldownTimer(interval=60.0)
        timer.start(5)
        task = timer._task
        timer.start(10)
        assert timer._task is task
        timer.cancel()

    @pytest.mark.asyncio
    async def test_cancel_keeps_value(self) -> None:
        timer = CooldownTimer(interval=60.0)
        timer.start(30)
        timer.cancel()
        await asyncio.sleep(0)
        assert not timer.running
        assert timer.remaining == 30

    @pytest.mark.asyncio
    async def test_context_manager_cancels_task(self) -> None:
        async with CooldownTimer(interval=60.0) as timer:
            timer.start(60)
            task = timer._task
            assert timer.running

        await asyncio.sleep(0)
        assert task.cancelled()
        assert not timer.running

    @pytest.mark.asyncio
    async def test_context_manager_cancels_on_exception(self) -> None:
        with pytest.raises(KeyError):
            async with CooldownTimer(interval=60.0) as timer:
                timer.start(60)
                task = timer._task
                raise KeyError("navigated away")

        await asyncio.sleep(0)
        assert task.cancelled()

    def test_start_without_loop_requires_manual_mode(self) -> None:
        """Background ticking needs a running event loop."""
        timer = CooldownTimer(interval=1.0)
        with pytest.raises(RuntimeError):
            timer.start(5)
