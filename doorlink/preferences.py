"""
Per-user preferences persisted as a small JSON file.

Values are written through immediately; a missing or unreadable file reads
as all-defaults.
"""

import json
from pathlib import Path
from typing import Any

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

VALIDATION_ON_RUN_KEY = "doors.validation_on_play.enabled"


class UserPreferences:
    """Key/value store for operator toggles."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._values: dict[str, Any] | None = None

    def _load(self) -> dict[str, Any]:
        if self._values is None:
            try:
                with open(self.path, encoding="utf-8") as f:
                    data = json.load(f)
                self._values = data if isinstance(data, dict) else {}
            except FileNotFoundError:
                self._values = {}
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Ignoring unreadable preferences file", path=str(self.path), error=str(e))
                self._values = {}
        return self._values

    def get_bool(self, key: str, default: bool) -> bool:
        value = self._load().get(key, default)
        return value if isinstance(value, bool) else default

    def set_bool(self, key: str, value: bool) -> None:
        values = self._load()
        values[key] = bool(value)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2, sort_keys=True)
        logger.debug("Preference saved", key=key, value=value)
