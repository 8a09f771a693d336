"""Persisted user settings (the overridden API address)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path.home() / ".fertify" / "settings.json"
API_URL_KEY = "fertify_api_url"


class SettingsStore:
    """Small JSON key/value file. Read and write errors are logged, not raised."""

    def __init__(self, settings_file: Path = DEFAULT_SETTINGS_FILE):
        self.settings_file = Path(settings_file)
        self._data: Dict[str, Any] = {"version": 1, "values": {}}

    def load(self) -> None:
        if not self.settings_file.exists():
            return
        try:
            with open(self.settings_file, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict) or not isinstance(data.get("values"), dict):
                raise ValueError("unexpected settings layout")
            self._data = data
        except Exception as e:
            logger.warning(f"Failed to load settings {self.settings_file}: {e}")
            self._data = {"version": 1, "values": {}}

    def save(self) -> None:
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w") as f:
                json.dump(self._data, f, indent=2)
        except Exception as e:
            logger.warning(f"Failed to save settings {self.settings_file}: {e}")

    def get_api_url(self) -> Optional[str]:
        return self._data["values"].get(API_URL_KEY) or None

    def set_api_url(self, url: str) -> None:
        self._data["values"][API_URL_KEY] = url.strip()
        self.save()

    def clear(self) -> None:
        self._data["values"].pop(API_URL_KEY, None)
        self.save()
