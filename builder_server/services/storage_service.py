"""
Services - Storage Service

Key-value JSON persistence: one file per key under the data directory.
"""

import json
import logging
import re
import threading
from pathlib import Path
from typing import Any, Optional

from builder_server.config import get_settings

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


class StorageService:
    """Loads and saves JSON values by string key."""

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self.data_dir = Path(self.settings.storage.data_dir)
        self._lock = threading.Lock()

    def _path(self, key: str) -> Path:
        filename = _UNSAFE_KEY_CHARS.sub("_", key).strip("._") or "default"
        return self.data_dir / f"{filename}.json"

    def load(self, key: str, default: Optional[Any] = None) -> Any:
        """
        Load a stored value.

        Args:
            key: Storage key
            default: Returned when nothing is stored or the file is unreadable

        Returns:
            Decoded JSON value
        """
        path = self._path(key)
        with self._lock:
            if not path.exists():
                return default
            try:
                return json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load {key} from {path}: {e}")
                return default

    def save(self, key: str, value: Any) -> None:
        """Write a JSON-serialisable value under ``key``."""
        path = self._path(key)
        with self._lock:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            tmp.write_text(json.dumps(value, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp.replace(path)

    def delete(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            if path.exists():
                path.unlink()
