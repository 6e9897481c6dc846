"""Disk cache storage backed by SQLite."""

from __future__ import annotations

import json
import logging
import sqlite3
import time
from pathlib import Path

from swcache.cache.base import CacheStorage
from swcache.errors.exceptions import StorageError
from swcache.types import CachedResponse

logger = logging.getLogger(__name__)

_DEFAULT_DB_PATH = Path.home() / ".swcache" / "cache.db"


class DiskCacheStorage(CacheStorage):
    """SQLite-backed persistent partitions.

    Each statement commits on its own, so concurrent writers to the same key
    resolve as last-write-wins.
    """

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path or _DEFAULT_DB_PATH
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(str(self._db_path))
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open cache database {self._db_path}: {e}") from e
        self._conn.row_factory = sqlite3.Row
        self._create_tables()

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def keys(self) -> list[str]:
        try:
            rows = self._conn.execute("SELECT name FROM partitions ORDER BY seq").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list partitions: {e}") from e
        return [row["name"] for row in rows]

    async def delete(self, name: str) -> bool:
        try:
            self._conn.execute("DELETE FROM entries WHERE partition = ?", (name,))
            cursor = self._conn.execute("DELETE FROM partitions WHERE name = ?", (name,))
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete partition: {e}", partition=name) from e
        return cursor.rowcount > 0

    async def entry_count(self, name: str | None = None) -> int:
        try:
            if name is None:
                row = self._conn.execute("SELECT COUNT(*) FROM entries").fetchone()
            else:
                row = self._conn.execute(
                    "SELECT COUNT(*) FROM entries WHERE partition = ?", (name,)
                ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to count entries: {e}", partition=name) from e
        return row[0]

    async def size_bytes(self) -> int:
        try:
            row = self._conn.execute(
                "SELECT COALESCE(SUM(LENGTH(body)), 0) FROM entries"
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to measure cache size: {e}") from e
        return row[0]

    async def close(self) -> None:
        self._conn.close()

    async def _get(self, partition: str, key: str) -> CachedResponse | None:
        try:
            row = self._conn.execute(
                "SELECT * FROM entries WHERE partition = ? AND key = ?", (partition, key)
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key}: {e}", partition=partition) from e
        if row is None:
            return None
        return self._row_to_entry(row)

    async def _set(self, partition: str, key: str, entry: CachedResponse) -> None:
        try:
            self._conn.execute(
                "INSERT OR IGNORE INTO partitions (name, created_at) VALUES (?, ?)",
                (partition, time.time()),
            )
            self._conn.execute(
                """INSERT OR REPLACE INTO entries
                   (partition, key, url, status, headers, body, stored_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)""",
                (
                    partition, key, entry.url, entry.status,
                    json.dumps(entry.headers), entry.body, entry.stored_at,
                ),
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to store {key}: {e}", partition=partition) from e

    async def _remove(self, partition: str, key: str) -> bool:
        try:
            cursor = self._conn.execute(
                "DELETE FROM entries WHERE partition = ? AND key = ?", (partition, key)
            )
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to remove {key}: {e}", partition=partition) from e
        return cursor.rowcount > 0

    async def _list(self, partition: str) -> list[str]:
        try:
            rows = self._conn.execute(
                "SELECT key FROM entries WHERE partition = ? ORDER BY rowid", (partition,)
            ).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list entries: {e}", partition=partition) from e
        return [row["key"] for row in rows]

    def _create_tables(self) -> None:
        try:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS partitions (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT UNIQUE NOT NULL,
                    created_at REAL
                )
            """)
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS entries (
                    partition TEXT NOT NULL,
                    key TEXT NOT NULL,
                    url TEXT,
                    status INTEGER,
                    headers TEXT,
                    body BLOB,
                    stored_at REAL,
                    PRIMARY KEY (partition, key)
                )
            """)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialise cache database {self._db_path}: {e}") from e

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> CachedResponse:
        headers: list[tuple[str, str]] = []
        try:
            headers = [tuple(pair) for pair in json.loads(row["headers"] or "[]")]
        except (json.JSONDecodeError, TypeError):
            logger.warning("Discarding unreadable headers for %s", row["key"])

        return CachedResponse(
            url=row["url"] or "",
            status=row["status"],
            headers=headers,
            body=row["body"] or b"",
            stored_at=row["stored_at"] or 0.0,
        )
