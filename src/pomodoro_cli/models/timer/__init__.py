"""Pomodoro timer core: state machine, ledger and formatting."""

from .errors import ConfirmationRequiredError, PomodoroError
from .ledger import MAX_HISTORY, SessionRecord, Statistics, StatisticsLedger
from .machine import AUTO_START_DELAY_SECONDS, SessionStateMachine
from .state import Command, Phase, TimerSnapshot, TimerState

__all__ = [
    "AUTO_START_DELAY_SECONDS",
    "MAX_HISTORY",
    "Command",
    "ConfirmationRequiredError",
    "Phase",
    "PomodoroError",
    "SessionRecord",
    "SessionStateMachine",
    "Statistics",
    "StatisticsLedger",
    "TimerSnapshot",
    "TimerState",
]
