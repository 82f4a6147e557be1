"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3

from row_mapper.core.connection import ConnectionConfig


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3.

    Note that every connection to ``:memory:`` is a separate, empty database.
    Use a file path when statements run on self-acquired connections.
    """

    @property
    def paramstyle(self) -> str:
        return "qmark"

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        return sqlite3.connect(config.database, **config.extra)
