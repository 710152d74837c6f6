"""Settings service for Pomodoro CLI.

This module provides the SettingsService class, the single owner of the
persisted timer settings. It handles:

- Loading settings with per-field defaults (bad or missing fields fall back)
- Saving settings under a namespaced key of the key-value store
- Dot-free ``get``/``set``/``reset`` access used by ``pomodoro config``
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any

from pomodoro_cli.adapters.store import JsonFileStore
from pomodoro_cli.models.settings import Settings
from pomodoro_cli.models.timer.ledger import StatisticsLedger
from pomodoro_cli.models.timer.ports import KeyValueStore

logger = logging.getLogger(__name__)

SETTINGS_KEY = "pomodoro_cli.settings"


class SettingsService:
    """Loads, validates and persists :class:`Settings`."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._settings: Settings | None = None

    @property
    def settings(self) -> Settings:
        """Get or load the current settings."""
        if self._settings is None:
            self._settings = self.load_settings()
        return self._settings

    def load_settings(self) -> Settings:
        """Load settings from storage, merging saved fields over defaults."""
        raw = self.store.get(SETTINGS_KEY)
        if raw is None:
            return Settings()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Saved settings are not valid JSON; using defaults")
            return Settings()
        return Settings.from_saved(data)

    def save_settings(self) -> None:
        """Persist the current settings. Write errors are logged, not raised."""
        try:
            self.store.set(SETTINGS_KEY, self.settings.model_dump_json())
        except OSError:
            logger.warning("Could not persist settings", exc_info=True)

    def keys(self) -> list[str]:
        return list(Settings.model_fields)

    def get(self, key: str) -> Any:
        """Get a setting by name.

        Raises:
            KeyError: If *key* is not a setting
        """
        if key not in Settings.model_fields:
            raise KeyError(key)
        value = getattr(self.settings, key)
        return getattr(value, "value", value)

    def set(self, key: str, value: Any) -> Settings:
        """Validate and store a single setting.

        Raises:
            KeyError: If *key* is not a setting
            pydantic.ValidationError: If *value* is out of range or mistyped
        """
        if key not in Settings.model_fields:
            raise KeyError(key)
        data = self.settings.model_dump()
        data[key] = value
        self._settings = Settings.model_validate(data)
        self.save_settings()
        return self._settings

    def reset(self, key: str | None = None) -> Settings:
        """Reset one setting, or all of them, to defaults."""
        defaults = Settings()
        if key is None:
            self._settings = defaults
        else:
            if key not in Settings.model_fields:
                raise KeyError(key)
            self._settings = self.settings.model_copy(
                update={key: getattr(defaults, key)}
            )
        self.save_settings()
        return self._settings


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    """Get the cached store backing settings and statistics."""
    return JsonFileStore()


@lru_cache(maxsize=1)
def get_settings_service() -> SettingsService:
    """Get a cached SettingsService instance."""
    return SettingsService(get_store())


def get_ledger() -> StatisticsLedger:
    """Create a ledger on the shared store, with today's rollover applied."""
    ledger = StatisticsLedger(get_store())
    ledger.reload()
    return ledger
