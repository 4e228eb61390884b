# =============================================================================
# mobile_core/offline/key_storage.py
# Typed Key-Value Flags (logged-in state, night mode)
# =============================================================================
"""
KeyStorage - small persisted settings with declared types.

Each setting is declared once with its key, codec and default. Reads and
writes go straight to disk, so every instance pointing at the same file sees
the same values.
"""

from __future__ import annotations
import json
import sqlite3
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar

from mobile_core.logging import get_logger
from mobile_core.models.records import BOOL, FieldCodec

logger = get_logger(__name__)

T = TypeVar("T")

SETTINGS_FILENAME = "settings.db"


class Setting(Generic[T]):
    """Descriptor for one persisted, typed setting."""

    def __init__(self, key: str, codec: FieldCodec, default: T):
        self.key = key
        self.codec = codec
        self.default = default

    def __get__(self, instance: Optional[KeyStorage], owner=None) -> Any:
        if instance is None:
            return self
        raw = instance._get_from_disk(self.key)
        if raw is None:
            return self.default
        return self.codec.read(raw)

    def __set__(self, instance: KeyStorage, value: T) -> None:
        instance._save_to_disk(self.key, self.codec.write(value))


class KeyStorage:
    """
    Persisted flags the app reads and writes from outside the core.

    Usage:
        storage = KeyStorage(config.storage_dir)
        if not storage.has_logged_in:
            ...
        storage.has_logged_in = True
    """

    has_logged_in = Setting("hasLoggedIn", BOOL, False)
    night_mode = Setting("nightMode", BOOL, False)

    def __init__(self, storage_dir: Path):
        self.db_path = Path(storage_dir) / SETTINGS_FILENAME
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        with self._conn:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS app_settings (
                    key TEXT PRIMARY KEY,
                    value TEXT,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
                """
            )

    def _get_from_disk(self, key: str) -> Any:
        with self._lock:
            row = self._conn.execute(
                "SELECT value FROM app_settings WHERE key = ?",
                [key],
            ).fetchone()
        value = json.loads(row[0]) if row else None

        logger.debug(f"KeyStorage: (Fetching) key: {key} value: {value}")

        return value

    def _save_to_disk(self, key: str, content: Any) -> None:
        logger.debug(f"KeyStorage: (Saving) key: {key} value: {content}")

        with self._lock, self._conn:
            self._conn.execute(
                """
                INSERT OR REPLACE INTO app_settings (key, value, updated_at)
                VALUES (?, ?, ?)
                """,
                [key, json.dumps(content), datetime.now().isoformat()],
            )

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            self._conn.close()
