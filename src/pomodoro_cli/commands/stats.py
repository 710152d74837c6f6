"""Statistics and history commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.prompt import Confirm

from pomodoro_cli.models.timer.formatting import format_duration
from pomodoro_cli.services.settings_service import get_ledger, get_settings_service
from pomodoro_cli.utils.exit_codes import ERROR_NOT_FOUND
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_success, history_table

from .decorators import AppError, command_wrapper

console = get_console()


@command_wrapper
def show_stats(
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format (json)"
    ),
) -> None:
    """Show pomodoro counts and total focus time."""
    stats = get_ledger().statistics

    if output == "json":
        console.print_json(data=stats.model_dump())
        return

    console.print("\n[bold cyan]🍅 Pomodoro Statistics[/bold cyan]\n")
    console.print(f"Pomodoros today: [bold]{stats.today_pomodoros}[/bold]")
    console.print(f"Pomodoros total: [bold]{stats.total_pomodoros}[/bold]")
    console.print(
        f"Total focus time: [bold]{format_duration(stats.total_focus_minutes)}[/bold]"
    )
    if stats.last_session_date:
        console.print(f"[dim]Last active: {stats.last_session_date}[/dim]")
    console.print()


@command_wrapper
def show_history(
    limit: int = typer.Option(20, "--limit", "-n", min=1, help="Records to show"),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Output format (json)"
    ),
) -> None:
    """Show recent focus sessions, newest first."""
    ledger = get_ledger()
    records = ledger.history[:limit]

    if output == "json":
        console.print_json(data=[r.model_dump() for r in records])
        return

    if not ledger.history:
        console.print("[yellow]No focus sessions recorded yet[/yellow]")
        return

    use_24h = get_settings_service().settings.use_24h_format
    console.print(history_table(records, use_24h))


@command_wrapper
def export_history(
    output_file: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write to a file instead of stdout"
    ),
) -> None:
    """Export the session history as pipe-delimited rows."""
    ledger = get_ledger()
    use_24h = get_settings_service().settings.use_24h_format

    text = ledger.export_text(use_24h)
    if text is None:
        console.print("[yellow]No sessions to export[/yellow]")
        return

    if output_file is not None:
        output_file.write_text(text + "\n", encoding="utf-8")
        format_success(f"Exported {len(ledger.history)} sessions to {output_file}")
        return

    # Plain print so the rows can be piped without Rich markup
    print(text)


@command_wrapper
def set_remark(
    record_id: str = typer.Argument(..., help="Record ID (or unique prefix) from 'history'"),
    text: str = typer.Argument(..., help="Remark text; empty string clears it"),
) -> None:
    """Attach a remark to a recorded focus session."""
    ledger = get_ledger()
    record = ledger.find_record(record_id)
    if record is None:
        raise AppError(
            f"No unique history record matches '{record_id}'", exit_code=ERROR_NOT_FOUND
        )

    ledger.set_remark(record.id, text)
    format_success(f"Remark saved for {record.date} {record.start_time}")


@command_wrapper
def reset_stats(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete all statistics and history."""
    if not yes and not Confirm.ask(
        "Reset all statistics and delete session history? This cannot be undone",
        default=False,
    ):
        console.print("[dim]Nothing changed[/dim]")
        raise typer.Exit(0)

    get_ledger().reset_all(confirmed=True)
    format_success("Statistics and history reset")

