"""Recent-files store owned by the archive backend (SQLite-backed)."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any

from ziphopp.models import DEFAULT_HISTORY_LIMIT

logger = logging.getLogger(__name__)


def display_name(path: str) -> str:
    """Return the file name part of ``path``, or ``path`` itself if there is none."""
    name = PurePath(path).name
    return name or path


def _init_history_db(db_path: Path) -> None:
    """Create the history table if it doesn't exist."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(str(db_path))) as conn, conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS history ("
            "  path TEXT PRIMARY KEY,"
            "  seq INTEGER NOT NULL,"
            "  opened_at TEXT NOT NULL"
            ")"
        )


class HistoryStore:
    """Most-recent-first list of opened archive paths.

    Re-inserting a known path moves it to the front; inserting beyond
    ``max_entries`` evicts the oldest entry. The list is mirrored in memory
    so a broken database only costs persistence, never the session.
    """

    def __init__(self, db_path: Path, max_entries: int = DEFAULT_HISTORY_LIMIT) -> None:
        self._db_path = db_path
        self._max_entries = max(1, max_entries)
        self._paths: list[str] = self._load()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def _load(self) -> list[str]:
        if not self._db_path.exists():
            return []
        try:
            _init_history_db(self._db_path)
            with closing(sqlite3.connect(str(self._db_path))) as conn:
                rows = conn.execute(
                    "SELECT path FROM history ORDER BY seq DESC LIMIT ?",
                    (self._max_entries,),
                ).fetchall()
        except sqlite3.Error:
            logger.warning("Failed to load history from %s", self._db_path, exc_info=True)
            return []
        return [row[0] for row in rows]

    def _persist(self, path: str) -> None:
        try:
            _init_history_db(self._db_path)
            with closing(sqlite3.connect(str(self._db_path))) as conn, conn:
                (next_seq,) = conn.execute(
                    "SELECT COALESCE(MAX(seq), 0) + 1 FROM history"
                ).fetchone()
                conn.execute(
                    "INSERT OR REPLACE INTO history (path, seq, opened_at) VALUES (?, ?, ?)",
                    (path, next_seq, datetime.now().isoformat()),
                )
                conn.execute(
                    "DELETE FROM history WHERE path NOT IN "
                    "(SELECT path FROM history ORDER BY seq DESC LIMIT ?)",
                    (self._max_entries,),
                )
        except (sqlite3.Error, OSError):
            logger.warning("Failed to save history entry for %s", path, exc_info=True)

    def insert(self, path: str) -> None:
        """Record ``path`` as the most recently opened archive."""
        if path in self._paths:
            self._paths.remove(path)
        self._paths.insert(0, path)
        del self._paths[self._max_entries :]
        self._persist(path)

    def paths(self) -> list[str]:
        return list(self._paths)

    def refresh(self) -> dict[str, Any]:
        """Return the history payload of the backend contract."""
        return {"history": [{"name": display_name(p), "path": p} for p in self._paths]}


__all__ = [
    "HistoryStore",
    "display_name",
]
