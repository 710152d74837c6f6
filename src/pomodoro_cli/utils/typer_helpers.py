"""Typer group that answers typos with the closest command names."""

from difflib import get_close_matches

import click
import typer
from typer.core import TyperGroup

from pomodoro_cli.utils.exit_codes import ERROR_GENERAL
from pomodoro_cli.utils.ui.console import get_console


def suggest_commands(attempted: str, known: list[str], limit: int = 3) -> list[str]:
    """Command names that look like *attempted*, best match first."""
    return get_close_matches(attempted, known, n=limit, cutoff=0.6)


class SuggestingGroup(TyperGroup):
    """``pomodoro histroy`` prints "Did you mean this? history" instead of a usage error."""

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            attempted = args[0] if args else None
            matches = suggest_commands(attempted, list(self.commands)) if attempted else []
            if not matches:
                raise

            console = get_console()
            console.print(
                f'[red]Error:[/red] unknown command "{attempted}" for "{ctx.info_name}"\n'
            )
            heading = "Did you mean this?" if len(matches) == 1 else "Did you mean one of these?"
            console.print(f"[yellow]{heading}[/yellow]")
            for name in matches:
                console.print(f"        {name}")
            raise typer.Exit(ERROR_GENERAL) from e
