"""
Local key-value settings store.

Favorites and search history are each persisted as one serialized JSON blob
under a fixed key. The blobs live together in a single JSON file (by default
``data/settings.json``); the whole file is rewritten on every ``set``.

An unreadable or malformed file is treated as empty: local state must never
prevent the app from starting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from .config import config

logger = logging.getLogger(__name__)


class SettingsStore:
    """String values under string keys, backed by a JSON file."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else config.SETTINGS_FILE
        self._values: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        try:
            if not self.path.exists():
                return {}
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable settings file %s: %s", self.path, exc)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring settings file %s: not a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(self._values, f, ensure_ascii=False, indent=2)
        tmp.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value
        self._save()

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._save()
