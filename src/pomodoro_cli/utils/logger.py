"""File logging for the pomodoro CLI.

Modules log through ``logging.getLogger(__name__)``. Nothing is written until
:func:`get_logger` hangs a rotating file handler on the ``pomodoro_cli``
logger; ``command_wrapper`` does that at the start of every command. The
level defaults to DEBUG and can be lowered with ``POMODORO_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from platformdirs import user_log_dir

APP_LOGGER = "pomodoro_cli"
LOG_FILENAME = "pomodoro.log"
LOG_LEVEL_ENV = "POMODORO_LOG_LEVEL"

_ROTATE_AT = 5 * 1024 * 1024
_KEEP = 3
_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    """Where the rotating log lives for this user."""
    return Path(user_log_dir(APP_LOGGER)) / LOG_FILENAME


def _level() -> int:
    name = os.environ.get(LOG_LEVEL_ENV, "DEBUG").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.DEBUG


def get_logger() -> logging.Logger:
    """The ``pomodoro_cli`` logger, with its file handler attached on first use."""
    global _logger
    if _logger is None:
        path = log_file_path()
        path.parent.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger(APP_LOGGER)
        logger.setLevel(_level())
        if not logger.handlers:
            handler = RotatingFileHandler(
                path, maxBytes=_ROTATE_AT, backupCount=_KEEP, encoding="utf-8"
            )
            handler.setFormatter(logging.Formatter(_FORMAT, "%Y-%m-%dT%H:%M:%S"))
            logger.addHandler(handler)
        # Records must not reach the terminal under the full-screen timer
        logger.propagate = False
        _logger = logger
    return _logger
