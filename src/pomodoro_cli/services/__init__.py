"""Services for Pomodoro CLI."""

from .settings_service import (
    SettingsService,
    get_ledger,
    get_settings_service,
    get_store,
)

__all__ = ["SettingsService", "get_ledger", "get_settings_service", "get_store"]
