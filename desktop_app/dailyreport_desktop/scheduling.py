"""Cancellable scheduled callbacks and a debouncer built on them."""

from __future__ import annotations

import threading
from threading import RLock
from typing import Callable, Optional, Protocol


class ScheduledTask(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask: ...


class ThreadingScheduler:
    """Runs each callback once on a daemon ``threading.Timer``."""

    def schedule(self, delay_seconds: float, callback: Callable[[], None]) -> ScheduledTask:
        timer = threading.Timer(delay_seconds, callback)
        timer.daemon = True
        timer.start()
        return timer


class Debouncer:
    """Coalesces bursts of triggers into one call after a quiet period.

    Every ``trigger`` cancels the pending task and schedules a fresh one, so
    only the last trigger of a burst fires.
    """

    def __init__(self, scheduler: Scheduler, delay_seconds: float, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._delay = delay_seconds
        self._callback = callback
        self._lock = RLock()
        self._pending: Optional[ScheduledTask] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def trigger(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._generation += 1
            generation = self._generation
            self._pending = self._scheduler.schedule(self._delay, lambda: self._fire(generation))

    def cancel(self) -> None:
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            self._pending = None
            self._generation += 1

    def flush(self) -> bool:
        """Run the pending callback now. Returns ``False`` if nothing was pending."""
        with self._lock:
            if self._pending is None:
                return False
            self._pending.cancel()
            self._pending = None
            self._generation += 1
        self._callback()
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a timer that lost the race with cancel() must not fire
            if generation != self._generation:
                return
            self._pending = None
        self._callback()


__all__ = ["Debouncer", "ScheduledTask", "Scheduler", "ThreadingScheduler"]
