"""Statement executor.

The Executor runs one SQL operation end to end: it acquires a connection
(unless one is supplied), prepares the statement, delegates binding and
result consumption to a StatementHandler, and releases every resource it
opened on all exit paths. Self-acquired connections are committed after a
successful update or call and always closed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar, cast

from row_mapper.core.connection import ConnectionConfig, ConnectionManager
from row_mapper.core.enums import StatementKind
from row_mapper.core.exceptions import (
    AcquisitionError,
    CleanupError,
    HandlerError,
    ParameterBindingError,
    RowMapperError,
    StatementError,
)
from row_mapper.core.handler import StatementHandler
from row_mapper.core.params import normalize_placeholders
from row_mapper.core.statement import CallableStatement, PreparedStatement

logger = logging.getLogger(__name__)

R = TypeVar("R")


def _driver_step(phase: str, sql: str, step: Callable[[], R]) -> R:
    """Run a driver call, reporting failures as StatementError."""
    try:
        return step()
    except RowMapperError:
        raise
    except Exception as e:
        raise StatementError(phase, sql, str(e)) from e


def _invoke(hook: Callable[[Any], None] | None, name: str, argument: Any) -> None:
    """Run an optional handler hook, reporting failures as HandlerError."""
    if hook is None:
        return
    try:
        hook(argument)
    except RowMapperError:
        raise
    except Exception as e:
        raise HandlerError(name, str(e)) from e


def _release_all(resources: list[tuple[str, Any]], primary: BaseException | None) -> None:
    """Close every resource, then surface the first failure if nothing else failed.

    When *primary* is set the original failure is already propagating, so
    release errors are logged and dropped.
    """
    failure: tuple[str, Exception] | None = None
    for name, resource in resources:
        if resource is None:
            continue
        try:
            resource.close()
        except Exception as e:
            if primary is not None:
                logger.debug(
                    f"Suppressed error releasing {name} after {type(primary).__name__}: {e}"
                )
            elif failure is None:
                failure = (name, e)

    if failure is not None:
        name, error = failure
        raise CleanupError(name, str(error)) from error


class Executor:
    """Runs queries, updates and procedure calls through a StatementHandler.

    Every operation accepts an optional ``connection``. When given, the
    caller keeps ownership: the executor never commits or closes it. When
    omitted, the connection comes from ``handler.connect`` or, failing that,
    from the executor's ConnectionManager, and is owned by the executor for
    the duration of the call.

    Args:
        connection_manager: Source of self-acquired connections.
        paramstyle: Placeholder style of the driver. Defaults to the
            manager's adapter paramstyle, or 'qmark' without a manager.
    """

    def __init__(
        self,
        connection_manager: ConnectionManager | None = None,
        *,
        paramstyle: str | None = None,
    ) -> None:
        self._connection_manager = connection_manager
        if paramstyle is None:
            paramstyle = "qmark" if connection_manager is None else connection_manager.paramstyle
        self._paramstyle = paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Executor:
        """Create an Executor from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance

        Returns:
            Executor instance
        """
        return cls(ConnectionManager(config))

    @property
    def paramstyle(self) -> str:
        return self._paramstyle

    def query(
        self,
        sql: str,
        handler: StatementHandler,
        *,
        connection: Any | None = None,
    ) -> None:
        """Run a query and hand its rows to ``handler.result``. Never commits."""
        if connection is not None:
            self._run(connection, sql, handler, StatementKind.QUERY)
            return
        with self._owned_connection(sql, handler, commit=False) as conn:
            self._run(conn, sql, handler, StatementKind.QUERY)

    def execute(
        self,
        sql: str,
        handler: StatementHandler,
        *,
        connection: Any | None = None,
    ) -> int:
        """Run an insert/update/delete. Returns affected row count.

        Commits only on a self-acquired connection, after ``handler.after``.
        """
        if connection is not None:
            return self._run(connection, sql, handler, StatementKind.UPDATE)
        with self._owned_connection(sql, handler, commit=True) as conn:
            return self._run(conn, sql, handler, StatementKind.UPDATE)

    def call(
        self,
        sql: str,
        handler: StatementHandler,
        *,
        connection: Any | None = None,
    ) -> None:
        """Run a stored procedure and hand the completed statement to ``handler.call_result``.

        Commits only on a self-acquired connection, after ``handler.after``.
        """
        if connection is not None:
            self._run(connection, sql, handler, StatementKind.CALL)
            return
        with self._owned_connection(sql, handler, commit=True) as conn:
            self._run(conn, sql, handler, StatementKind.CALL)

    def _acquire(self, handler: StatementHandler) -> Any:
        if handler.connect is None:
            if self._connection_manager is None:
                raise AcquisitionError(
                    "No connection source: handler has no connect hook "
                    "and the executor has no ConnectionManager"
                )
            return self._connection_manager.connect()

        try:
            connection = handler.connect()
        except RowMapperError:
            raise
        except Exception as e:
            raise AcquisitionError(f"Handler connect hook failed: {e}") from e
        if connection is None:
            raise AcquisitionError("Handler connect hook returned no connection")
        return connection

    @contextmanager
    def _owned_connection(
        self,
        sql: str,
        handler: StatementHandler,
        *,
        commit: bool,
    ) -> Iterator[Any]:
        """Acquire a connection, commit after a clean body if asked, always close."""
        connection = self._acquire(handler)
        primary: BaseException | None = None
        try:
            yield connection
            if commit:
                _driver_step("commit", sql, connection.commit)
                logger.debug(f"Committed connection {id(connection)}")
        except BaseException as exc:
            primary = exc
            raise
        finally:
            _release_all([("connection", connection)], primary)

    def _run(
        self,
        connection: Any,
        sql: str,
        handler: StatementHandler,
        kind: StatementKind,
    ) -> int:
        """Run the handler sequence on *connection*.

        Returns the affected row count for updates, -1 otherwise.
        """
        sql = normalize_placeholders(sql, self._paramstyle)
        logger.debug(f"Running {kind.value} statement: {sql}")

        statement: PreparedStatement | None = None
        rows = None
        rowcount = -1
        primary: BaseException | None = None
        try:
            _invoke(handler.before, "before", connection)
            statement = self._prepare(connection, sql, kind)
            self._bind(statement, handler)

            if kind is StatementKind.QUERY:
                rows = _driver_step("execute", sql, statement.execute_query)
                _invoke(handler.result, "result", rows)
            elif kind is StatementKind.UPDATE:
                rowcount = _driver_step("execute", sql, statement.execute_update)
            else:
                call_statement = cast(CallableStatement, statement)
                _driver_step("execute", sql, call_statement.execute_call)
                _invoke(handler.call_result, "call_result", call_statement)

            _invoke(handler.after, "after", connection)
            return rowcount
        except BaseException as exc:
            primary = exc
            raise
        finally:
            _release_all([("result rows", rows), ("statement", statement)], primary)

    def _prepare(self, connection: Any, sql: str, kind: StatementKind) -> PreparedStatement:
        try:
            if kind is StatementKind.CALL:
                return CallableStatement(connection, sql)
            return PreparedStatement(connection, sql)
        except Exception as e:
            raise StatementError("prepare", sql, str(e)) from e

    def _bind(self, statement: PreparedStatement, handler: StatementHandler) -> None:
        if handler.bind is None:
            return
        try:
            handler.bind(statement)
        except RowMapperError:
            raise
        except Exception as e:
            raise ParameterBindingError(statement.sql, str(e)) from e
