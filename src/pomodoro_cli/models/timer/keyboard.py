"""Single-key input for the full-screen timer.

Readers never block: the display loop polls them between pumps of the clock
and scheduler. When stdin is not an interactive terminal the reader stays
inert and reports no keys.
"""

import sys
from typing import Optional

from .state import Command

QUIT_KEY = "q"

KEY_BINDINGS: dict[str, Command] = {
    "s": Command.START,
    "p": Command.PAUSE,
    "r": Command.RESET,
    "n": Command.FORCE_ADVANCE,
}


def command_for_key(key: Optional[str]) -> Optional[Command]:
    """The machine command bound to *key*, if any."""
    if not key:
        return None
    return KEY_BINDINGS.get(key.lower())


class PosixKeyReader:
    """Puts the terminal in cbreak mode and polls it with ``select``."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.fd: Optional[int] = None
        self._saved_mode = None
        self._enter_cbreak()

    @property
    def active(self) -> bool:
        return self._saved_mode is not None

    def _enter_cbreak(self) -> None:
        try:
            import termios
            import tty
        except ImportError:
            return

        try:
            fd = self.stream.fileno()
            saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError, ValueError):
            return
        self.fd = fd
        self._saved_mode = saved

    def read_key(self) -> Optional[str]:
        if not self.active:
            return None
        import select

        ready, _, _ = select.select([self.stream], [], [], 0)
        if not ready:
            return None
        return self.stream.read(1).lower() or None

    def stop(self) -> None:
        """Restore the terminal mode saved at construction."""
        if not self.active:
            return
        import termios

        termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_mode)
        self._saved_mode = None


class WindowsKeyReader:
    """Polls the console with ``msvcrt.kbhit``."""

    def __init__(self):
        try:
            import msvcrt
        except ImportError:
            msvcrt = None
        self.msvcrt = msvcrt

    def read_key(self) -> Optional[str]:
        if self.msvcrt is None or not self.msvcrt.kbhit():
            return None
        key = self.msvcrt.getch()
        if isinstance(key, bytes):
            key = key.decode("utf-8", errors="ignore")
        return key.lower() or None

    def stop(self) -> None:
        pass


def open_key_reader():
    """Key reader for the current platform."""
    if sys.platform == "win32":
        return WindowsKeyReader()
    return PosixKeyReader()
