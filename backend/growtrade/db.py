"""SQLite storage shared by the user and order stores."""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Lock

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    username      TEXT    NOT NULL UNIQUE,
    password_hash TEXT    NOT NULL
);

CREATE TABLE IF NOT EXISTS orders (
    id        INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id   INTEGER NOT NULL REFERENCES users(id),
    symbol    TEXT    NOT NULL,
    side      TEXT    NOT NULL CHECK (side IN ('buy', 'sell')),
    quantity  INTEGER NOT NULL CHECK (quantity > 0),
    price     REAL    NOT NULL CHECK (price > 0),
    timestamp TEXT    NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_orders_user_time ON orders (user_id, timestamp);
"""


class Database:
    """A single SQLite connection shared across threads behind a lock.

    Sync route handlers run in the server's thread pool, so every statement
    goes through transaction() which serializes access.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._lock = Lock()
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        self._conn.commit()
        logger.info("Database ready: %s", path)

    @property
    def path(self) -> str:
        return self._path

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield the connection; commit on success, roll back on error."""
        with self._lock:
            try:
                yield self._conn
            except BaseException:
                self._conn.rollback()
                raise
            else:
                self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.info("Database closed: %s", self._path)
