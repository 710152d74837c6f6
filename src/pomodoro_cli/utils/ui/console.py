"""Shared Rich console.

Commands, the notification sink and the full-screen timer all print through
the same cached Console, which resolves ``sys.stdout`` at write time.
"""

from functools import lru_cache

from rich.console import Console


@lru_cache(maxsize=2)
def get_console(highlight: bool = True) -> Console:
    return Console(highlight=highlight)
