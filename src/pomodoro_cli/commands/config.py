"""Settings management commands."""

import typer
from pydantic import ValidationError
from rich.table import Table

from pomodoro_cli.services.settings_service import get_settings_service
from pomodoro_cli.utils.exit_codes import ERROR_INVALID_ARGS, ERROR_NOT_FOUND
from pomodoro_cli.utils.typer_helpers import SuggestingGroup
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="View and change timer settings")
console = get_console()


def _unknown_key(key: str) -> AppError:
    keys = ", ".join(get_settings_service().keys())
    return AppError(
        f"Unknown setting '{key}'. Available: {keys}", exit_code=ERROR_NOT_FOUND
    )


@app.command("show")
@command_wrapper
def show_config() -> None:
    """Show all settings."""
    settings = get_settings_service().settings

    table = Table(title="Timer Settings", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for key, value in settings.model_dump(mode="json").items():
        table.add_row(key, str(value))
    console.print(table)


@app.command("get")
@command_wrapper
def get_config(key: str = typer.Argument(..., help="Setting name")) -> None:
    """Print one setting."""
    try:
        value = get_settings_service().get(key)
    except KeyError as e:
        raise _unknown_key(key) from e
    console.print(str(value))


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Change one setting."""
    try:
        get_settings_service().set(key, value)
    except KeyError as e:
        raise _unknown_key(key) from e
    except ValidationError as e:
        message = e.errors()[0]["msg"]
        raise AppError(
            f"Invalid value for {key}: {message}", exit_code=ERROR_INVALID_ARGS
        ) from e
    format_success(f"{key} = {value}")


@app.command("reset")
@command_wrapper
def reset_config(
    key: str = typer.Argument(None, help="Setting to reset (default: all)"),
) -> None:
    """Reset settings to their defaults."""
    try:
        get_settings_service().reset(key)
    except KeyError as e:
        raise _unknown_key(key) from e
    format_success(f"{key or 'All settings'} reset to default")
