"""JSON file backed key-value store."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_data_dir

from pomodoro_cli.models.timer.ports import KeyValueStore

logger = logging.getLogger(__name__)

STORE_FILE = "store.json"


class JsonFileStore(KeyValueStore):
    """Keeps every key in a single JSON object on disk.

    A missing or corrupt file reads as an empty store.
    """

    def __init__(self, path: Path | None = None):
        if path is None:
            path = Path(user_data_dir("pomodoro_cli")) / STORE_FILE
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.warning("Store %s is unreadable; treating as empty", self.path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        # Set secure permissions
        self.path.chmod(0o600)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)
