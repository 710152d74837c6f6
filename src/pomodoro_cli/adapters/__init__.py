"""Adapters implementing the timer ports for the terminal."""

from .loop import PollingClock, PollingScheduler
from .store import JsonFileStore

__all__ = ["PollingClock", "PollingScheduler", "JsonFileStore"]
