"""SQL backend storing messages as rows in a SQLite table."""

import re
import sqlite3
from collections.abc import Mapping

from logdispatch.adapters.backends.base import BackendBase
from logdispatch.adapters.backends.sqlite_base import (
    MEMORY,
    AsyncConnectionManager,
    SyncConnectionManager,
)
from logdispatch.core.config import get_str
from logdispatch.core.errors import ConfigError, ConnectError, WriteError
from logdispatch.core.models import LogMessage
from logdispatch.core.priority import Priority

DEFAULT_TABLE = "log_table"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS {table} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    logtime REAL NOT NULL,
    ident TEXT NOT NULL,
    priority INTEGER NOT NULL,
    message TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_{table}_logtime ON {table}(logtime);
"""

_INSERT = "INSERT INTO {table} (logtime, ident, priority, message) VALUES (?, ?, ?, ?)"

_SELECT = """
SELECT logtime, ident, priority, message
FROM {table}
WHERE logtime > ? AND priority <= ?
ORDER BY logtime ASC, id ASC
"""


def _to_row(message: LogMessage) -> tuple[float, str, int, str]:
    return (
        message.timestamp,
        message.identity,
        int(message.priority),
        message.text,
    )


def _from_row(row: sqlite3.Row | tuple) -> LogMessage:
    return LogMessage(
        text=row[3],
        priority=Priority(row[2]),
        identity=row[1],
        timestamp=row[0],
    )


class SQLBackend(BackendBase):
    """Stores messages in a SQLite table.

    ``target`` is the database path (":memory:" for a private in-memory
    database). Rows hold ``(logtime, ident, priority, message)``.

    Blocking access goes through the standard sqlite3 module. For file
    databases, awrite()/afetch() use aiosqlite so async callers do not
    block their event loop; for ":memory:" they fall back to the shared
    sync connection, since in-memory databases are connection-scoped.

    Config:
        table: Table name (default "log_table").
    """

    def __init__(
        self,
        target: str = "",
        identity: str = "",
        config: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(target or MEMORY, identity, config)
        table = get_str(self.config, "table", DEFAULT_TABLE)
        if not _IDENTIFIER.match(table):
            raise ConfigError(f"invalid table name: {table!r}")
        self.table = table
        self._insert = _INSERT.format(table=table)
        self._select = _SELECT.format(table=table)
        self._sync_manager = SyncConnectionManager(
            self.target, _SCHEMA.format(table=table)
        )
        self._async_manager = (
            None if self.target == MEMORY else AsyncConnectionManager(self.target)
        )

    def _open(self) -> None:
        try:
            self._sync_manager.connect()
        except sqlite3.Error as exc:
            raise ConnectError(f"cannot open database {self.target!r}: {exc}") from exc

    def _close(self) -> None:
        self._sync_manager.close()

    def write(self, message: LogMessage) -> None:
        if not self._opened:
            raise WriteError("sql backend is not open")
        try:
            with self._sync_manager.connection() as conn:
                conn.execute(self._insert, _to_row(message))
                conn.commit()
        except (sqlite3.Error, ValueError) as exc:
            raise WriteError(f"cannot insert into {self.table!r}: {exc}") from exc

    async def awrite(self, message: LogMessage) -> None:
        """Async write for event-loop callers."""
        if self._async_manager is None:
            self.write(message)
            return
        if not self._opened:
            raise WriteError("sql backend is not open")
        try:
            async with self._async_manager.write_connection() as db:
                await db.execute(self._insert, _to_row(message))
                await db.commit()
        except (sqlite3.Error, ValueError) as exc:
            raise WriteError(f"cannot insert into {self.table!r}: {exc}") from exc

    def fetch(
        self, since: float = 0, min_priority: Priority = Priority.DEBUG
    ) -> list[LogMessage]:
        """Read stored messages newer than since, oldest first.

        Args:
            since: Unix timestamp. Returns rows with logtime > since.
            min_priority: Least severe priority to include.
        """
        with self._sync_manager.connection() as conn:
            cursor = conn.execute(self._select, (since, int(min_priority)))
            return [_from_row(row) for row in cursor]

    async def afetch(
        self, since: float = 0, min_priority: Priority = Priority.DEBUG
    ) -> list[LogMessage]:
        """Async variant of fetch()."""
        if self._async_manager is None:
            return self.fetch(since, min_priority)
        async with self._async_manager.connection() as db:
            async with db.execute(self._select, (since, int(min_priority))) as cursor:
                return [_from_row(row) async for row in cursor]
