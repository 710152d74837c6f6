"""Main entry point for Pomodoro CLI."""

import typer

from pomodoro_cli import __version__
from pomodoro_cli.commands import config, stats, timer
from pomodoro_cli.utils.typer_helpers import SuggestingGroup
from pomodoro_cli.utils.ui.console import get_console

app = typer.Typer(
    name="pomodoro",
    cls=SuggestingGroup,
    help="A terminal Pomodoro timer with focus statistics",
    no_args_is_help=True,
)

console = get_console(highlight=False)

app.add_typer(config.app, name="config", help="Timer settings")

app.command("run")(timer.run_timer)
app.command("stats")(stats.show_stats)
app.command("history")(stats.show_history)
app.command("export")(stats.export_history)
app.command("remark")(stats.set_remark)
app.command("reset-stats")(stats.reset_stats)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"Pomodoro CLI {__version__}")


if __name__ == "__main__":
    app()
