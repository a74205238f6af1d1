"""SQLite connection managers used by the SQL backend."""

import asyncio
import sqlite3
import threading
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

import aiosqlite

MEMORY = ":memory:"


class SyncConnectionManager:
    """Owns one sqlite3 connection for the lifetime of an open backend.

    The connection is shared across threads, so every use goes through
    connection(), which holds a lock for the duration of the block.
    """

    def __init__(self, db_path: str, schema: str) -> None:
        self._db_path = db_path
        self._schema = schema
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the connection and create the schema. No-op when connected."""
        with self._lock:
            if self._conn is not None:
                return
            conn = sqlite3.connect(self._db_path, check_same_thread=False)
            try:
                if self._db_path != MEMORY:
                    conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(self._schema)
            except sqlite3.Error:
                conn.close()
                raise
            self._conn = conn

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager yielding the shared connection under the lock."""
        with self._lock:
            if self._conn is None:
                raise sqlite3.ProgrammingError("database connection is closed")
            yield self._conn

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None


class AsyncConnectionManager:
    """Hands out aiosqlite connections for a file database.

    Each connection() block opens and closes its own connection; the
    schema is expected to exist already (the sync manager creates it).
    In-memory databases are connection-scoped, so they are not supported
    here.
    """

    def __init__(self, db_path: str) -> None:
        if db_path == MEMORY:
            raise ValueError("async connections need a file database")
        self._db_path = db_path
        self._write_lock: asyncio.Lock | None = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the write lock (lazy to avoid event loop issues)."""
        if self._write_lock is None:
            self._write_lock = asyncio.Lock()
        return self._write_lock

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Context manager for async database connections."""
        async with aiosqlite.connect(self._db_path) as db:
            yield db

    @asynccontextmanager
    async def write_connection(self) -> AsyncIterator[aiosqlite.Connection]:
        """Like connection(), but serializes writers within one event loop."""
        async with self._get_lock():
            async with self.connection() as db:
                yield db
