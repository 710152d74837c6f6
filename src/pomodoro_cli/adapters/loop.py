"""Polling clock and scheduler pumped by the terminal loop.

Neither class owns a thread. The full-screen timer calls :meth:`pump` a few
times per second, so ticks, deferred callbacks and key presses are all
handled on the same thread.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from pomodoro_cli.models.timer.ports import ClockDriver, ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class PollingClock(ClockDriver):
    """Delivers one tick per elapsed second whenever it is pumped."""

    def __init__(self, time_source: Callable[[], float] = time.monotonic):
        self._time = time_source
        self._on_tick: Callable[[], None] | None = None
        self._next_tick: float | None = None

    @property
    def running(self) -> bool:
        return self._on_tick is not None

    def start(self, on_tick: Callable[[], None]) -> None:
        self._on_tick = on_tick
        self._next_tick = self._time() + TICK_SECONDS

    def stop(self) -> None:
        self._on_tick = None
        self._next_tick = None

    def pump(self) -> int:
        """Fire every tick that has come due. Returns how many fired."""
        fired = 0
        now = self._time()
        while self._on_tick is not None and self._next_tick is not None:
            if now < self._next_tick:
                break
            callback = self._on_tick
            self._next_tick += TICK_SECONDS
            callback()
            fired += 1
        return fired


class _PolledTask(ScheduledTask):
    def __init__(self, due: float, callback: Callable[[], None]):
        self.due = due
        self.callback = callback
        self._cancelled = False
        self._done = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    def cancel(self) -> None:
        if not self._done:
            self._cancelled = True

    def run(self) -> None:
        self._done = True
        self.callback()


class PollingScheduler(Scheduler):
    """One-shot callbacks run from :meth:`pump` once their delay has passed."""

    def __init__(self, time_source: Callable[[], float] = time.monotonic):
        self._time = time_source
        self._tasks: list[_PolledTask] = []

    def call_later(
        self, delay_seconds: float, callback: Callable[[], None]
    ) -> ScheduledTask:
        task = _PolledTask(self._time() + delay_seconds, callback)
        self._tasks.append(task)
        return task

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if task.pending)

    def pump(self) -> int:
        """Run due callbacks in scheduling order. Returns how many ran."""
        now = self._time()
        due = [t for t in self._tasks if t.pending and t.due <= now]
        self._tasks = [t for t in self._tasks if t.pending and t.due > now]
        ran = 0
        for task in sorted(due, key=lambda t: t.due):
            # An earlier callback may have cancelled this one
            if task.cancelled:
                continue
            task.run()
            ran += 1
        return ran
