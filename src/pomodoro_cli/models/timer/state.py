"""In-memory timer state, phases and the commands that drive them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .formatting import format_countdown


class Phase(str, Enum):
    """Timer mode."""

    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


class Command(str, Enum):
    """Events consumed by :meth:`SessionStateMachine.dispatch`."""

    START = "start"
    PAUSE = "pause"
    RESET = "reset"
    FORCE_ADVANCE = "force_advance"
    TICK = "tick"


@dataclass
class TimerState:
    """Current phase and countdown. Owned by the state machine, never persisted."""

    phase: Phase = Phase.FOCUS
    session_number: int = 1
    remaining_seconds: int = 25 * 60
    # Length of the current phase as configured when it was entered
    phase_seconds: int = 25 * 60
    running: bool = False
    # Set when a focus phase starts running; cleared once flushed to history
    focus_started_at: datetime | None = None


@dataclass(frozen=True)
class TimerSnapshot:
    """Read-only view of the machine for the UI."""

    phase: Phase
    session_number: int
    remaining_seconds: int
    running: bool
    total_seconds: int
    auto_start_pending: bool = False

    @property
    def countdown(self) -> str:
        return format_countdown(self.remaining_seconds)

    @property
    def in_overtime(self) -> bool:
        return self.remaining_seconds < 0

    @property
    def title(self) -> str:
        if self.phase is Phase.FOCUS:
            return f"Focus Time - Session {self.session_number}"
        return self.phase.label

    @property
    def progress_pct(self) -> int:
        if self.total_seconds <= 0:
            return 0
        elapsed = self.total_seconds - self.remaining_seconds
        return max(0, min(100, int(elapsed / self.total_seconds * 100)))
