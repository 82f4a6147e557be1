"""Unit tests for ConnectionConfig and ConnectionManager."""

from __future__ import annotations

import sqlite3
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from row_mapper.adapters.sqlite import SqliteAdapter
from row_mapper.core.connection import ConnectionConfig, ConnectionManager
from row_mapper.core.enums import DatabaseBackend, ErrorKind
from row_mapper.core.exceptions import AcquisitionError, AdapterError, ConfigurationError
from row_mapper.core.executor import Executor


class TestConnectionConfig:
    def test_defaults(self) -> None:
        config = ConnectionConfig(driver="sqlite", database=":memory:")
        assert config.host is None
        assert config.port is None
        assert config.extra == {}

    def test_database_is_required(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="sqlite")

    def test_port_is_validated(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="postgresql", database="app", port="not-a-port")


class TestConnectionManager:
    def test_loads_adapter_by_driver(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="SQLite", database=":memory:"))
        assert isinstance(manager.adapter, SqliteAdapter)
        assert manager.paramstyle == "qmark"
        assert manager.backend is DatabaseBackend.SQLITE

    def test_unsupported_driver(self) -> None:
        with pytest.raises(AdapterError, match="Unsupported") as exc_info:
            ConnectionManager(ConnectionConfig(driver="db2", database="x"))
        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.kind is ErrorKind.CONFIGURATION

    def test_connect_returns_new_connection(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=":memory:"))
        first = manager.connect()
        second = manager.connect()
        try:
            assert isinstance(first, sqlite3.Connection)
            assert first is not second
        finally:
            first.close()
            second.close()

    def test_connect_failure_is_acquisition_error(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=":memory:"))
        manager._adapter = MagicMock(paramstyle="qmark")
        manager._adapter.connect.side_effect = OSError("refused")
        with pytest.raises(AcquisitionError, match="refused"):
            manager.connect()

    def test_get_connection_closes_on_exit(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=":memory:"))
        with manager.get_connection() as conn:
            assert conn.execute("SELECT 1").fetchone() == (1,)
        with pytest.raises(sqlite3.ProgrammingError):
            conn.execute("SELECT 1")


class TestExecutorFromConfig:
    def test_paramstyle_follows_adapter(self) -> None:
        executor = Executor.from_config(ConnectionConfig(driver="sqlite", database=":memory:"))
        assert executor.paramstyle == "qmark"

    def test_explicit_paramstyle_wins(self) -> None:
        assert Executor(paramstyle="format").paramstyle == "format"

    def test_default_paramstyle_without_manager(self) -> None:
        assert Executor().paramstyle == "qmark"
