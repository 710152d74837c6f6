"""Shared test fixtures and fakes.

Provides in-memory stand-ins for every port the timer core depends on, so
state-machine and ledger tests never touch the filesystem or real time.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest

from pomodoro_cli.adapters.loop import PollingScheduler
from pomodoro_cli.models.settings import Settings
from pomodoro_cli.models.timer.ledger import StatisticsLedger
from pomodoro_cli.models.timer.machine import SessionStateMachine
from pomodoro_cli.models.timer.ports import ClockDriver, KeyValueStore, NotificationSink

TODAY = date(2026, 10, 17)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeTime:
    """Monotonic time source advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class WallClock:
    """Wall-clock ``now`` that moves forward with the ticks."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class ManualClock(ClockDriver):
    """Clock driver whose ticks are delivered by the test."""

    def __init__(self, wall: WallClock | None = None):
        self.on_tick: Callable[[], None] | None = None
        self.start_calls = 0
        self.wall = wall

    @property
    def running(self) -> bool:
        return self.on_tick is not None

    def start(self, on_tick: Callable[[], None]) -> None:
        self.start_calls += 1
        self.on_tick = on_tick

    def stop(self) -> None:
        self.on_tick = None

    def tick(self, count: int = 1) -> int:
        """Deliver up to *count* ticks, stopping early if the clock stops."""
        delivered = 0
        while delivered < count and self.on_tick is not None:
            if self.wall is not None:
                self.wall.advance(1)
            self.on_tick()
            delivered += 1
        return delivered


class RecordingSink(NotificationSink):
    """Remembers every message and alert; optionally fails."""

    def __init__(self, fail: bool = False):
        self.messages: list[str] = []
        self.alerts: list[str] = []
        self.fail = fail

    def notify(self, message: str) -> None:
        if self.fail:
            raise RuntimeError("toast failed")
        self.messages.append(message)

    def alert(self, sound_id: str) -> None:
        if self.fail:
            raise RuntimeError("audio device busy")
        self.alerts.append(sound_id)


class MemoryStore(KeyValueStore):
    """Dict-backed store; ``fail_writes`` makes ``set`` raise OSError."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data = dict(data or {})
        self.fail_writes = False
        self.writes = 0

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def ledger(store) -> StatisticsLedger:
    ledger = StatisticsLedger(store, today=lambda: TODAY)
    ledger.reload()
    return ledger


@pytest.fixture()
def fake_time() -> FakeTime:
    return FakeTime()


@pytest.fixture()
def wall() -> WallClock:
    return WallClock(datetime(2026, 10, 17, 13, 5))


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def make_machine(ledger, fake_time, wall, sink):
    """Factory building a machine wired to fakes.

    Keyword arguments are Settings overrides, except
    ``cancel_auto_start_on_action`` which goes to the machine.
    """

    def _make(cancel_auto_start_on_action: bool = True, **overrides):
        settings = Settings(**overrides)
        clock = ManualClock(wall)
        scheduler = PollingScheduler(time_source=fake_time)
        machine = SessionStateMachine(
            settings,
            ledger,
            clock,
            scheduler,
            sink,
            now=wall,
            cancel_auto_start_on_action=cancel_auto_start_on_action,
        )
        return machine, clock, scheduler

    return _make


@pytest.fixture()
def cli_env(tmp_path):
    """Isolate CLI commands: store and log files land in *tmp_path*.

    Clears the cached services and the logger singleton before and after.
    """
    import logging

    import pomodoro_cli.utils.logger as logger_mod
    from pomodoro_cli.services.settings_service import get_settings_service, get_store

    def _clear():
        get_store.cache_clear()
        get_settings_service.cache_clear()
        logger_mod._logger = None
        logging.getLogger("pomodoro_cli").handlers.clear()

    _clear()
    with patch("pomodoro_cli.adapters.store.user_data_dir", return_value=str(tmp_path)):
        with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
            yield tmp_path
    _clear()
