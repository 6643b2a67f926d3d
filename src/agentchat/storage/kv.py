"""Flat key-value stores backing the record store."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Protocol

from agentchat.errors.exceptions import FilesystemFailure


class KeyValueStore(Protocol):
    """Bytes-valued store where each key's value is replaced atomically."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...

    def delete(self, *keys: str) -> None: ...

    def contains(self, key: str) -> bool: ...

    def close(self) -> None: ...


class MemoryKeyValueStore:
    """Process-local store, used for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)

    def delete(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._data.pop(key, None)

    def contains(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def close(self) -> None:
        pass


class SqliteKeyValueStore:
    """SQLite-backed persistent key-value store.

    One table, one row per key. Every mutation is its own transaction, so a
    value is either fully replaced or left untouched.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._lock = threading.Lock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
            self._create_table()
        except (OSError, sqlite3.Error) as e:
            raise FilesystemFailure(
                f"Cannot open store {self._db_path}: {e}", path=str(self._db_path), original=e
            ) from e

    def get(self, key: str) -> bytes | None:
        with self._lock:
            row = self._execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if row is None:
            return None
        return bytes(row[0])

    def set(self, key: str, value: bytes) -> None:
        self._write(
            [("INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)", (key, sqlite3.Binary(value)))]
        )

    def delete(self, *keys: str) -> None:
        self._write([("DELETE FROM kv WHERE key = ?", (key,)) for key in keys])

    def contains(self, key: str) -> bool:
        with self._lock:
            row = self._execute("SELECT 1 FROM kv WHERE key = ?", (key,)).fetchone()
        return row is not None

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _create_table(self) -> None:
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value BLOB NOT NULL
            )
        """)
        self._conn.commit()

    def _write(self, statements: list[tuple[str, tuple]]) -> None:
        with self._lock:
            try:
                # Connection context manager: commit on success, rollback on error
                with self._conn:
                    for sql, params in statements:
                        self._conn.execute(sql, params)
            except sqlite3.Error as e:
                raise FilesystemFailure(
                    f"Store write failed on {self._db_path}: {e}",
                    path=str(self._db_path),
                    original=e,
                ) from e

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise FilesystemFailure(
                f"Store operation failed on {self._db_path}: {e}",
                path=str(self._db_path),
                original=e,
            ) from e
