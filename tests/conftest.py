"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from row_mapper.core.connection import ConnectionConfig


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """SQLite database file with a seeded employees table.

    A file is used because every connection to ``:memory:`` is a new database.
    """
    path = tmp_path / "test.db"
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE employees ("
        "emp_id INTEGER PRIMARY KEY, name TEXT NOT NULL, salary REAL, "
        "hired TEXT, active INTEGER, dept TEXT)"
    )
    conn.execute(
        "INSERT INTO employees VALUES (1, 'Alice', 5200.5, '2019-03-01', 1, 'R&D')"
    )
    conn.execute("INSERT INTO employees VALUES (2, 'Bob', 4100, NULL, 0, 'Sales')")
    conn.execute(
        "INSERT INTO employees VALUES (3, 'Carol', NULL, '2021-11-15', 1, 'R&D')"
    )
    conn.commit()
    conn.close()
    return str(path)


@pytest.fixture
def sqlite_config(db_path: str) -> ConnectionConfig:
    """SQLite file-backed connection config."""
    return ConnectionConfig(driver="sqlite", database=db_path)


@pytest.fixture
def make_connection() -> Callable[..., MagicMock]:
    """Build a mock DB-API connection whose cursor returns canned rows.

    Usage:
        conn = make_connection(["ID", "NAME"], [(1, "Alice")])
        cursor = conn.cursor.return_value
    """

    def _make(
        columns: Sequence[str] | None = None,
        rows: Sequence[Any] = (),
        rowcount: int = -1,
    ) -> MagicMock:
        connection = MagicMock(name="connection")
        cursor = connection.cursor.return_value
        if columns is None:
            cursor.description = None
        else:
            cursor.description = [(name, None, None, None, None, None, None) for name in columns]
        cursor.fetchall.return_value = list(rows)
        cursor.rowcount = rowcount
        return connection

    return _make
