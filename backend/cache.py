"""Two-tier metadata cache: bounded in-memory LRU in front of an optional SQLite store."""

import json
import logging
import sqlite3
import time
from collections import OrderedDict
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

log = logging.getLogger(__name__)

CACHE_NAMESPACE = "CACHE"
ONE_YEAR = 60 * 60 * 24 * 365

_SCHEMA = """CREATE TABLE IF NOT EXISTS cache_entries (
    namespace TEXT NOT NULL,
    url TEXT NOT NULL,
    metadata TEXT NOT NULL,
    expires_at REAL NOT NULL,
    PRIMARY KEY (namespace, url)
)"""


class SqliteStore:
    """Durable tier. Rows are keyed by (namespace, url) and expire after ttl_seconds."""

    def __init__(self, db_path: str, ttl_seconds: float = ONE_YEAR):
        self.db_path = db_path
        self.ttl_seconds = ttl_seconds
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as db:
            db.execute(_SCHEMA)

    @contextmanager
    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def get(self, url: str) -> dict[str, str] | None:
        with self._connect() as db:
            row = db.execute(
                "SELECT metadata, expires_at FROM cache_entries WHERE namespace = ? AND url = ?",
                (CACHE_NAMESPACE, url),
            ).fetchone()
            if not row:
                return None
            if row["expires_at"] <= time.time():
                db.execute(
                    "DELETE FROM cache_entries WHERE namespace = ? AND url = ?",
                    (CACHE_NAMESPACE, url),
                )
                return None
        try:
            return json.loads(row["metadata"])
        except json.JSONDecodeError:
            log.warning("Dropping unreadable cache row for %s", url)
            return None

    def set(self, url: str, metadata: dict[str, str]) -> None:
        with self._connect() as db:
            db.execute(
                """INSERT OR REPLACE INTO cache_entries (namespace, url, metadata, expires_at)
                   VALUES (?, ?, ?, ?)""",
                (CACHE_NAMESPACE, url, json.dumps(metadata, ensure_ascii=False), time.time() + self.ttl_seconds),
            )


class MetadataCache:
    """LRU of fixed capacity, backed by an optional SqliteStore.

    Entries are replaced as whole dicts and never mutated, so concurrent
    handlers can share one instance without locking.
    """

    def __init__(self, capacity: int = 100, durable: Optional[SqliteStore] = None):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self.durable = durable
        self._memory: OrderedDict[str, dict[str, str]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._memory)

    def __contains__(self, url: str) -> bool:
        return url in self._memory

    def lookup(self, url: str) -> tuple[dict[str, str], str] | None:
        """Return (metadata, tier) where tier is "memory" or "store", or None on miss."""
        metadata = self._memory.get(url)
        if metadata is not None:
            self._memory.move_to_end(url)
            return metadata, "memory"
        if self.durable is None:
            return None
        try:
            metadata = self.durable.get(url)
        except sqlite3.Error as e:
            log.error("Cache store lookup failed for %s: %s", url, e)
            return None
        if metadata is None:
            return None
        self._remember(url, metadata)
        return metadata, "store"

    def store(self, url: str, metadata: dict[str, str], persist: bool = True) -> None:
        self._remember(url, metadata)
        if persist and self.durable is not None:
            try:
                self.durable.set(url, metadata)
            except sqlite3.Error as e:
                log.error("Could not persist cache entry for %s: %s", url, e)

    def _remember(self, url: str, metadata: dict[str, str]) -> None:
        self._memory[url] = metadata
        self._memory.move_to_end(url)
        while len(self._memory) > self.capacity:
            evicted, _ = self._memory.popitem(last=False)
            log.debug("Evicted %s from memory cache", evicted)
