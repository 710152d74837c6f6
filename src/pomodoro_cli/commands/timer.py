"""Command 'run': the full-screen Pomodoro timer."""

from typing import Optional

import typer

from pomodoro_cli.adapters.loop import PollingClock, PollingScheduler
from pomodoro_cli.models.timer.machine import SessionStateMachine
from pomodoro_cli.models.timer.ui import (
    RichNotificationSink,
    TimerDisplay,
    show_session_summary,
)
from pomodoro_cli.services.settings_service import get_ledger, get_settings_service
from pomodoro_cli.utils.ui.console import get_console

from .decorators import command_wrapper

console = get_console()


@command_wrapper
def run_timer(
    focus: Optional[int] = typer.Option(
        None, "--focus", "-f", min=1, help="Focus minutes for this run only"
    ),
    short_break: Optional[int] = typer.Option(
        None, "--short-break", "-s", min=1, help="Short break minutes for this run only"
    ),
    long_break: Optional[int] = typer.Option(
        None, "--long-break", "-l", min=1, help="Long break minutes for this run only"
    ),
    legacy_auto_start: bool = typer.Option(
        False,
        "--legacy-auto-start",
        help="Let a pending auto-start fire even after a manual pause or reset",
    ),
) -> None:
    """Start the full-screen focus timer."""
    settings = get_settings_service().settings
    overrides = {
        "focus_minutes": focus,
        "short_break_minutes": short_break,
        "long_break_minutes": long_break,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    ledger = get_ledger()
    clock = PollingClock()
    scheduler = PollingScheduler()
    sink = RichNotificationSink(console)

    machine = SessionStateMachine(
        settings,
        ledger,
        clock,
        scheduler,
        sink,
        cancel_auto_start_on_action=not legacy_auto_start,
    )

    def pump() -> None:
        clock.pump()
        scheduler.pump()

    result = TimerDisplay(console).run(machine, pump, sink)
    if result == "interrupted":
        console.print("\n[yellow]Timer interrupted.[/yellow]")
    show_session_summary(ledger.statistics, console)
