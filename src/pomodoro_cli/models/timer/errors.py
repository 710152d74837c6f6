"""Errors raised by the timer domain."""


class PomodoroError(Exception):
    """Base class for timer and ledger errors."""


class ConfirmationRequiredError(PomodoroError):
    """Raised when a destructive ledger operation was not confirmed."""
