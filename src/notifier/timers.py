"""
Timer Registry for notification auto-dismiss.

Keeps at most one pending timer per notification id. Arming an id replaces
whatever was scheduled for it before, and each timer remembers its own
deadline so a paused timer can report exactly how much time it had left.

Scheduling goes through a small Scheduler protocol. The default
AsyncioScheduler defers callbacks with loop.call_later on the running event
loop; tests substitute a manual clock.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class Scheduler(Protocol):
    """Clock and deferred-callback source, in milliseconds."""

    def now(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop.

    Uses the loop given at construction, or the running loop at call time.
    Times come from loop.time(), which is monotonic.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def now(self) -> float:
        return self._get_loop().time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], Any]) -> TimerHandle:
        return self._get_loop().call_later(max(0.0, delay_ms) / 1000.0, callback)


@dataclass
class _PendingTimer:
    handle: TimerHandle
    deadline: float


class TimerRegistry:
    """
    One pending timer per key.

    Example:
        >>> timers = TimerRegistry(AsyncioScheduler())
        >>> timers.arm("notify_1", 3000, lambda: print("fired"))
        >>> timers.remaining("notify_1")  # ~3000.0
        >>> timers.cancel("notify_1")
    """

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler
        self._timers: dict[str, _PendingTimer] = {}

    def arm(self, key: str, delay_ms: float, callback: Callable[[], Any]) -> None:
        """Schedule callback after delay_ms, replacing any timer already armed for key."""
        self.cancel(key)
        delay_ms = max(0.0, delay_ms)

        def fire() -> None:
            pending = self._timers.get(key)
            # A replaced timer whose cancel raced the loop must not fire
            if pending is None or pending.handle is not handle:
                return
            del self._timers[key]
            callback()

        deadline = self._scheduler.now() + delay_ms
        handle = self._scheduler.call_later(delay_ms, fire)
        self._timers[key] = _PendingTimer(handle=handle, deadline=deadline)
        logger.debug("timer_armed", key=key, delay_ms=delay_ms)

    def cancel(self, key: str) -> bool:
        """Cancel the timer for key. Returns True if one was pending."""
        pending = self._timers.pop(key, None)
        if pending is None:
            return False
        pending.handle.cancel()
        return True

    def is_active(self, key: str) -> bool:
        return key in self._timers

    def remaining(self, key: str) -> Optional[float]:
        """Milliseconds left before the timer for key fires, or None."""
        pending = self._timers.get(key)
        if pending is None:
            return None
        return max(0.0, pending.deadline - self._scheduler.now())

    def cancel_all(self) -> None:
        for key in list(self._timers):
            self.cancel(key)

    def __len__(self) -> int:
        return len(self._timers)

    def __contains__(self, key: object) -> bool:
        return key in self._timers
