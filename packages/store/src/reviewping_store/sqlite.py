"""SQLiteStore - the default local store.

Why SQLite:
- Batteries included: ships with Python, no extra dependencies.
- Atomic multi-key writes: a cycle's seen-set, unreviewed list and error are
  committed in one transaction, so a crash never leaves them out of step.
- Survives restarts of `reviewping watch` without any setup.

Schema:
  kv - one row per key, value stored as JSON text.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable

from reviewping_store.base import BaseStore, StorageError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""


class SQLiteStore(BaseStore):
    """Stores poller state in a local SQLite database file.

    The path defaults to `~/.reviewping.db`. Configure via .reviewping.yml:
    `store_path: /path/to/reviewping.db`.
    """

    def __init__(self, db_path: str = "~/.reviewping.db"):
        path = Path(db_path).expanduser()
        self._conn = sqlite3.connect(str(path))
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def get(self, keys: Iterable[str]) -> dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        placeholders = ", ".join("?" for _ in keys)
        rows = self._conn.execute(f"SELECT key, value FROM kv WHERE key IN ({placeholders})", keys).fetchall()
        result = {}
        for key, value in rows:
            try:
                result[key] = json.loads(value)
            except json.JSONDecodeError:
                logger.warning("Ignoring corrupt value for key %r", key)
        return result

    def set(self, entries: dict[str, Any]) -> None:
        rows = [(key, json.dumps(value)) for key, value in entries.items()]
        try:
            with self._conn:
                self._conn.executemany(
                    "INSERT INTO kv (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    rows,
                )
        except sqlite3.Error as e:
            raise StorageError(f"Could not write to SQLite store: {e}") from e

    def close(self) -> None:
        self._conn.close()
