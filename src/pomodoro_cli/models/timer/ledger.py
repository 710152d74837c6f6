"""Statistics and session-history ledger.

The ledger keeps cumulative counters plus a capped, newest-first list of
focus session records, and persists both under one key of a
:class:`~pomodoro_cli.models.timer.ports.KeyValueStore`.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Callable, Iterator
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfirmationRequiredError
from .formatting import format_clock_time, to_calendar_date, to_clock_time
from .ports import KeyValueStore

logger = logging.getLogger(__name__)

STATISTICS_KEY = "pomodoro_cli.statistics"
MAX_HISTORY = 50

# (date, start_time, end_time, focus_minutes)
RecordIdentity = tuple[str, str, str, int]


def _new_record_id() -> str:
    return uuid.uuid4().hex


class SessionRecord(BaseModel):
    """One finished focus block."""

    id: str = Field(default_factory=_new_record_id)
    date: str = Field(..., description="Calendar day the focus block started")
    start_time: str = Field(..., description="24-hour HH:MM")
    end_time: str = Field(..., description="24-hour HH:MM")
    focus_minutes: int = Field(..., ge=1)
    remark: str = Field(default="")

    @property
    def identity(self) -> RecordIdentity:
        return (self.date, self.start_time, self.end_time, self.focus_minutes)

    def export_row(self, use_24h: bool = True) -> str:
        """Pipe-delimited export row.

        Pipes in the remark are escaped and line breaks folded into spaces so
        that every record stays on one line.
        """
        start = format_clock_time(self.start_time, use_24h)
        end = format_clock_time(self.end_time, use_24h)
        remark = " ".join(self.remark.splitlines()).replace("|", "\\|")
        return f"| {self.date} | {start}~{end} | {self.focus_minutes} min | {remark} |"


class Statistics(BaseModel):
    """Cumulative counters. Never trimmed along with the history."""

    total_pomodoros: int = Field(default=0, ge=0)
    today_pomodoros: int = Field(default=0, ge=0)
    total_focus_minutes: int = Field(default=0, ge=0)
    last_session_date: str | None = None


class StatisticsLedger:
    """Completed-pomodoro counts, focus minutes and the session history."""

    def __init__(
        self,
        store: KeyValueStore,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self._today = today
        self.statistics = Statistics()
        self.history: list[SessionRecord] = []
        # True while memory holds changes the store failed to accept
        self._unsaved = False

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def reload(self) -> None:
        """Load persisted statistics and roll today's count over if needed.

        Rollover only happens here, at load time.
        """
        self.statistics, self.history = self._load()

        today = self._today().isoformat()
        if self.statistics.last_session_date != today:
            logger.info(
                "New day (%s -> %s): resetting today's pomodoros",
                self.statistics.last_session_date,
                today,
            )
            self.statistics.today_pomodoros = 0
            self.statistics.last_session_date = today
            self.save()

    def _load(self) -> tuple[Statistics, list[SessionRecord]]:
        raw = self.store.get(STATISTICS_KEY)
        if raw is None:
            return Statistics(), []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Saved statistics are not valid JSON; using defaults")
            return Statistics(), []
        if not isinstance(data, dict):
            return Statistics(), []

        accepted: dict[str, Any] = {}
        for name in Statistics.model_fields:
            if name not in data:
                continue
            try:
                Statistics.model_validate({name: data[name]})
            except ValidationError:
                logger.warning("Ignoring invalid saved statistic %s=%r", name, data[name])
                continue
            accepted[name] = data[name]

        history: list[SessionRecord] = []
        entries = data.get("session_history")
        for entry in entries if isinstance(entries, list) else []:
            try:
                history.append(SessionRecord.model_validate(entry))
            except ValidationError:
                logger.warning("Dropping invalid history entry %r", entry)

        return Statistics.model_validate(accepted), history[:MAX_HISTORY]

    def save(self) -> None:
        """Persist counters and history. Best effort: write errors are logged."""
        payload = self.statistics.model_dump()
        payload["session_history"] = [record.model_dump() for record in self.history]
        try:
            self.store.set(STATISTICS_KEY, json.dumps(payload))
        except OSError:
            self._unsaved = True
            logger.warning("Could not persist statistics", exc_info=True)
        else:
            self._unsaved = False

    def _refresh(self) -> None:
        """Pick up what other processes saved since our last load or save.

        Skipped while memory holds changes that never reached the store.
        No day rollover happens here.
        """
        if self._unsaved:
            return
        self.statistics, self.history = self._load()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def record_focus_completion(
        self,
        elapsed_minutes: int,
        started_at: datetime,
        ended_at: datetime,
        focus_minutes: int,
    ) -> SessionRecord:
        """Account for a finished focus block of *elapsed_minutes* (≥ 1).

        Focus minutes always accrue. A pomodoro is credited only when the
        block lasted the full configured *focus_minutes* or longer.
        """
        self._refresh()
        stats = self.statistics
        stats.total_focus_minutes += elapsed_minutes
        if elapsed_minutes >= focus_minutes:
            stats.total_pomodoros += 1
            stats.today_pomodoros += 1
        stats.last_session_date = self._today().isoformat()

        record = SessionRecord(
            date=to_calendar_date(started_at),
            start_time=to_clock_time(started_at),
            end_time=to_clock_time(ended_at),
            focus_minutes=elapsed_minutes,
        )
        self.history.insert(0, record)
        del self.history[MAX_HISTORY:]

        logger.info(
            "Recorded %d focus minutes (pomodoros: total=%d today=%d)",
            elapsed_minutes,
            stats.total_pomodoros,
            stats.today_pomodoros,
        )
        self.save()
        return record

    def reset_all(self, confirmed: bool = False) -> None:
        """Zero every counter and clear the history. Irreversible."""
        if not confirmed:
            raise ConfirmationRequiredError(
                "Resetting statistics deletes all history; confirmation required"
            )
        self.statistics = Statistics(last_session_date=self._today().isoformat())
        self.history = []
        logger.info("Statistics and history reset")
        self.save()

    def set_remark(self, key: str | RecordIdentity, text: str) -> bool:
        """Set the remark of the record matching *key*.

        *key* is a record id or a ``(date, start, end, minutes)`` identity.
        Returns False, changing nothing, when no record matches.
        """
        record = self._match(key)
        if record is None:
            logger.debug("No history record matches %r; remark ignored", key)
            return False
        record.remark = text
        self.save()
        return True

    def _match(self, key: str | RecordIdentity) -> SessionRecord | None:
        for record in self.history:
            if isinstance(key, str):
                if record.id == key:
                    return record
            elif record.identity == tuple(key):
                return record
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_record(self, id_prefix: str) -> SessionRecord | None:
        """Resolve a unique record id prefix, as printed by ``history``."""
        matches = [r for r in self.history if r.id.startswith(id_prefix)]
        if len(matches) == 1:
            return matches[0]
        return None

    def export_rows(self, use_24h: bool = True) -> Iterator[str] | None:
        """Lazily yield export rows newest first, or None if there is no history."""
        if not self.history:
            return None
        return (record.export_row(use_24h) for record in list(self.history))

    def export_text(self, use_24h: bool = True) -> str | None:
        rows = self.export_rows(use_24h)
        if rows is None:
            return None
        return "\n".join(rows)
