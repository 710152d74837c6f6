"""Pomodoro CLI - a terminal focus timer with session statistics."""

__version__ = "0.1.0"
