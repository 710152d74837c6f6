"""
Process exit codes used by every ``pomodoro`` command.

Scripts wrapping the CLI can tell a bad argument from a missing record
without parsing the output.
"""

SUCCESS = 0
ERROR_GENERAL = 1
# Bad option value or a setting that fails validation
ERROR_INVALID_ARGS = 2
# Unknown setting key or history record
ERROR_NOT_FOUND = 5

_TABLE = {
    SUCCESS: ("SUCCESS", "Command executed successfully"),
    ERROR_GENERAL: ("ERROR_GENERAL", "A general error occurred"),
    ERROR_INVALID_ARGS: ("ERROR_INVALID_ARGS", "Invalid arguments or validation error"),
    ERROR_NOT_FOUND: ("ERROR_NOT_FOUND", "Resource not found"),
}


def get_exit_code_name(code: int) -> str:
    """Symbolic name of *code*, e.g. for the log file."""
    if code in _TABLE:
        return _TABLE[code][0]
    return f"UNKNOWN({code})"


def get_exit_code_description(code: int) -> str:
    if code in _TABLE:
        return _TABLE[code][1]
    return "Unknown error"
