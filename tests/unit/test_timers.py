"""
Unit tests for TimerRegistry and AsyncioScheduler.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from notifier.timers import AsyncioScheduler, Scheduler, TimerRegistry
from tests.mocks import ManualScheduler


class TestTimerRegistry:
    """Test TimerRegistry with a manual clock."""

    def test_fires_once_after_delay(self, scheduler):
        callback = MagicMock()
        timers = TimerRegistry(scheduler)

        timers.arm("a", 1000, callback)
        scheduler.advance(999)
        callback.assert_not_called()
        assert timers.is_active("a")

        scheduler.advance(1)
        callback.assert_called_once()
        assert not timers.is_active("a")

        scheduler.advance(5000)
        callback.assert_called_once()

    def test_arm_replaces_existing_timer(self, scheduler):
        """Only the most recently armed timer for a key fires."""
        first = MagicMock()
        second = MagicMock()
        timers = TimerRegistry(scheduler)

        timers.arm("a", 100, first)
        timers.arm("a", 500, second)
        scheduler.advance(1000)

        first.assert_not_called()
        second.assert_called_once()
        assert len(timers) == 0

    def test_cancel_reports_pending(self, scheduler):
        callback = MagicMock()
        timers = TimerRegistry(scheduler)
        timers.arm("a", 100, callback)

        assert timers.cancel("a") is True
        assert timers.cancel("a") is False
        scheduler.advance(1000)
        callback.assert_not_called()

    def test_remaining_tracks_deadline(self, scheduler):
        timers = TimerRegistry(scheduler)
        timers.arm("a", 3000, MagicMock())

        scheduler.advance(1200)

        assert timers.remaining("a") == 1800
        assert timers.remaining("missing") is None

    def test_negative_delay_fires_immediately(self, scheduler):
        callback = MagicMock()
        timers = TimerRegistry(scheduler)

        timers.arm("a", -50, callback)
        scheduler.advance(0)

        callback.assert_called_once()

    def test_cancel_all(self, scheduler):
        callback = MagicMock()
        timers = TimerRegistry(scheduler)
        timers.arm("a", 100, callback)
        timers.arm("b", 200, callback)
        assert "a" in timers and "b" in timers

        timers.cancel_all()
        scheduler.advance(1000)

        callback.assert_not_called()
        assert len(timers) == 0

    def test_callback_can_rearm_same_key(self, scheduler):
        """A firing timer is cleared before its callback runs."""
        timers = TimerRegistry(scheduler)
        fired = []

        def tick():
            fired.append(scheduler.now())
            if len(fired) < 3:
                timers.arm("a", 100, tick)

        timers.arm("a", 100, tick)
        scheduler.advance(1000)

        assert fired == [100, 200, 300]


class TestAsyncioScheduler:
    """Test the event-loop backed scheduler."""

    def test_satisfies_protocol(self):
        assert isinstance(AsyncioScheduler(), Scheduler)
        assert isinstance(ManualScheduler(), Scheduler)

    def test_requires_running_loop_without_explicit_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().now()

    @pytest.mark.asyncio
    async def test_fires_on_running_loop(self):
        loop = asyncio.get_running_loop()
        fired = asyncio.Event()
        timers = TimerRegistry(AsyncioScheduler())

        timers.arm("a", 10, fired.set)
        await asyncio.wait_for(fired.wait(), timeout=1.0)

        assert not timers.is_active("a")
        assert AsyncioScheduler(loop).now() == pytest.approx(loop.time() * 1000, abs=50)

    @pytest.mark.asyncio
    async def test_cancelled_timer_does_not_fire(self):
        callback = MagicMock()
        timers = TimerRegistry(AsyncioScheduler())

        timers.arm("a", 10, callback)
        timers.cancel("a")
        await asyncio.sleep(0.05)

        callback.assert_not_called()
