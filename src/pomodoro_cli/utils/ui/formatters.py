"""Output helpers shared by the CLI commands."""

from rich.table import Table

from pomodoro_cli.models.timer.formatting import format_clock_time
from pomodoro_cli.models.timer.ledger import SessionRecord

from .console import get_console


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")


def history_table(records: list[SessionRecord], use_24h: bool = True) -> Table:
    """Build a table of session records, newest first."""
    table = Table(title=f"Focus History ({len(records)})", show_header=True)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Time")
    table.add_column("Minutes", justify="right")
    table.add_column("Remark")

    for record in records:
        start = format_clock_time(record.start_time, use_24h)
        end = format_clock_time(record.end_time, use_24h)
        table.add_row(
            record.id[:8],
            record.date,
            f"{start} ~ {end}",
            f"{record.focus_minutes}m",
            record.remark or "—",
        )
    return table
