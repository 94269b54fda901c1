"""Local fallback cache so the page can render before the store answers."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SETTINGS_KEY = "surprise-settings"
PHOTOS_KEY = "surprise-photos"
VIDEOS_KEY = "surprise-videos"
CHAPTERS_KEY = "surprise-chapters"


class LocalCache:
    """A small JSON key-value file. Reads never fail; writes are best effort."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable cache %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, fallback: Any = None) -> Any:
        return self._load().get(key, fallback)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not write cache %s: %s", self.path, e)
