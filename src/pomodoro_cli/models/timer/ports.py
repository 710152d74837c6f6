"""Ports used by the timer core.

The state machine and ledger only talk to the outside world through these
abstract base classes, following the ports & adapters layout. Concrete
adapters live in :mod:`pomodoro_cli.adapters`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable


class ClockDriver(ABC):
    """Recurring ~1 second tick source."""

    @abstractmethod
    def start(self, on_tick: Callable[[], None]) -> None:
        """Begin invoking *on_tick* roughly once per second.

        Starting again replaces the previous callback; only one tick
        callback is ever active.
        """
        raise NotImplementedError("ClockDriver.start() must be implemented by adapter")

    @abstractmethod
    def stop(self) -> None:
        """Stop ticking. Safe to call when already stopped."""
        raise NotImplementedError("ClockDriver.stop() must be implemented by adapter")

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether ticks are currently being delivered."""
        raise NotImplementedError


class ScheduledTask(ABC):
    """Handle to a one-shot deferred callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. No-op once it has run."""
        raise NotImplementedError

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def done(self) -> bool:
        """True once the callback has run."""
        raise NotImplementedError

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)


class Scheduler(ABC):
    """One-shot deferred callbacks on the same thread as the ticks."""

    @abstractmethod
    def call_later(
        self, delay_seconds: float, callback: Callable[[], None]
    ) -> ScheduledTask:
        """Run *callback* once after *delay_seconds*."""
        raise NotImplementedError(
            "Scheduler.call_later() must be implemented by adapter"
        )


class NotificationSink(ABC):
    """Fire-and-forget user notifications."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Show a short, auto-dismissing message."""
        raise NotImplementedError

    @abstractmethod
    def alert(self, sound_id: str) -> None:
        """Play an alert cue. Best effort."""
        raise NotImplementedError


class KeyValueStore(ABC):
    """Durable string key-value storage (a local-storage analogue)."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*. May raise ``OSError``."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        raise NotImplementedError
