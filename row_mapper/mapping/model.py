"""Result-set mapper.

Runs a query through the Executor and turns every row into one instance of
a declared entity, guided by the entity's BindingTable.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from row_mapper.core.exceptions import (
    CoercionError,
    EncodingError,
    MappingError,
    RowMapperError,
)
from row_mapper.core.executor import Executor
from row_mapper.core.handler import StatementHandler
from row_mapper.core.statement import Binder, ResultRows, Row
from row_mapper.mapping.binding import BindingTable, bindings_for
from row_mapper.mapping.codec import JsonCodec, TextEncoder
from row_mapper.mapping.coercion import coerce

T = TypeVar("T")

EMPTY_OBJECT = "{}"
EMPTY_ARRAY = "[]"


class ResultSetMapper(Generic[T]):
    """Maps query results onto a declared entity.

    Column names are compared with bound column names case-insensitively.
    For each column the first bound field (in declaration order) wins;
    columns without a binding are ignored, and ``NULL`` values leave the
    field at its default.

    Args:
        target_class: Entity class declared with ``@entity`` or ``register()``.
        executor: Executor used to run queries.
        codec: Text encoder for ``serialize``/``fetch_as_text``.
        connect: Connection factory handed to the executor for
            self-acquired connections.
    """

    def __init__(
        self,
        target_class: type[T],
        executor: Executor,
        *,
        codec: TextEncoder | None = None,
        connect: Callable[[], Any] | None = None,
    ) -> None:
        self._target_class = target_class
        self._executor = executor
        self._codec: TextEncoder = codec or JsonCodec()
        self._connect = connect

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    def fetch(
        self,
        sql: str,
        binder: Binder | None = None,
        *,
        connection: Any | None = None,
    ) -> list[T]:
        """Run *sql* and return one record per row, in row order.

        Raises:
            ConfigurationError: If the target class is not an entity. Raised
                before any connection is acquired.
            CoercionError: If any value cannot be converted; no records are
                returned in that case.
        """
        table = bindings_for(self._target_class)
        records: list[T] = []

        def _consume(rows: ResultRows) -> None:
            records.extend(self._map_all(table, rows))

        handler = StatementHandler(connect=self._connect, bind=binder, result=_consume)
        self._executor.query(sql, handler, connection=connection)
        return records

    def serialize(self, value: Any) -> str:
        """Encode *value* with the configured codec."""
        try:
            return self._codec.encode(value)
        except RowMapperError:
            raise
        except Exception as e:
            raise EncodingError(f"Cannot encode {type(value).__name__}: {e}") from e

    def fetch_as_text(
        self,
        sql: str,
        binder: Binder | None = None,
        single_result: bool = False,
        *,
        connection: Any | None = None,
    ) -> str:
        """Run *sql* and return the records encoded as text.

        With *single_result* only the first record is encoded, or ``"{}"``
        when there is none. Otherwise the whole list is encoded, or ``"[]"``
        when it is empty.
        """
        records = self.fetch(sql, binder, connection=connection)
        if single_result:
            return self.serialize(records[0]) if records else EMPTY_OBJECT
        return self.serialize(records) if records else EMPTY_ARRAY

    def map_row(self, row: Row) -> T:
        """Map a single row to a new target instance."""
        return self._map(bindings_for(self._target_class), row, 0)

    def map_rows(self, rows: Iterable[Row]) -> list[T]:
        """Map rows in order. Fails as a whole on the first bad value."""
        return self._map_all(bindings_for(self._target_class), rows)

    def _map_all(self, table: BindingTable, rows: Iterable[Row]) -> list[T]:
        return [self._map(table, row, index) for index, row in enumerate(rows)]

    def _map(self, table: BindingTable, row: Row, index: int) -> T:
        try:
            instance = table.factory()
        except Exception as e:
            raise MappingError(
                f"Cannot construct {self._target_class.__name__} for row {index}: {e}"
            ) from e

        for cell in row:
            binding = table.match(cell.name)
            if binding is None or cell.value is None:
                continue
            try:
                value = coerce(cell.value, binding.field_type)
            except CoercionError as e:
                raise CoercionError(
                    cell.value,
                    binding.field_type,
                    field=binding.name,
                    column=cell.name,
                    row_index=index,
                ) from e
            # object.__setattr__ so frozen dataclasses can be populated too
            object.__setattr__(instance, binding.name, value)
            if isinstance(instance, BaseModel):
                instance.__pydantic_fields_set__.add(binding.name)

        return instance
