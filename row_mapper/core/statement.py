"""Statement and result wrappers over a DB-API 2.0 cursor.

PreparedStatement binds parameters by 1-based ordinal position, matching the
order of ``?`` placeholders in the SQL text. ResultRows turns the cursor's
result into Row objects of (name, ordinal, value) cells.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, NamedTuple

from row_mapper.core.exceptions import ParameterBindingError, StatementError
from row_mapper.core.params import is_procedure_name


class Cell(NamedTuple):
    """One column value of a result row."""

    name: str
    ordinal: int
    value: Any


class Row:
    """A single result tuple, iterated in the driver's column order."""

    __slots__ = ("_columns", "_values")

    def __init__(self, columns: Sequence[str], values: Sequence[Any]) -> None:
        self._columns = tuple(columns)
        self._values = tuple(values)

    def __iter__(self) -> Iterator[Cell]:
        for ordinal, (name, value) in enumerate(
            zip(self._columns, self._values, strict=True), start=1
        ):
            yield Cell(name, ordinal, value)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"Row({self.as_dict()!r})"

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    def get(self, column: str, default: Any = None) -> Any:
        """Return the first value whose column name matches case-insensitively."""
        wanted = column.casefold()
        for name, value in zip(self._columns, self._values, strict=True):
            if name.casefold() == wanted:
                return value
        return default

    def as_dict(self) -> dict[str, Any]:
        return dict(zip(self._columns, self._values, strict=True))


def _row_values(raw: Any, columns: Sequence[str]) -> Sequence[Any]:
    """Extract values in column order.

    Handles both tuple-like rows and dict-like rows from different drivers.
    A dict row keyed in column order is read positionally. One that lost
    entries to duplicate column names comes back short and fails the
    caller's length check.
    """
    if isinstance(raw, Mapping):
        if len(raw) != len(columns) or list(raw) == list(columns):
            return list(raw.values())
        return [raw[name] for name in columns]
    return tuple(raw)


class ResultRows:
    """Rows produced by an executed statement.

    The first pass fetches the rows from the cursor and keeps them, so
    later passes see the same rows. Once closed, the object refuses further
    iteration; the cursor itself is released by the owning statement.
    """

    def __init__(self, cursor: Any, sql: str) -> None:
        self._cursor = cursor
        self._sql = sql
        description = cursor.description
        self.columns: list[str] = [desc[0] for desc in description] if description else []
        self._closed = False
        self._rows: list[Row] | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[Row]:
        if self._closed:
            raise StatementError("fetch", self._sql, "result rows are closed")
        if self._rows is None:
            self._rows = self._fetch()
        return iter(self._rows)

    def _fetch(self) -> list[Row]:
        # No description means the statement produced no result set
        if not self.columns:
            return []
        try:
            raw_rows = self._cursor.fetchall()
        except Exception as e:
            raise StatementError("fetch", self._sql, str(e)) from e

        rows: list[Row] = []
        for raw in raw_rows:
            values = _row_values(raw, self.columns)
            if len(values) != len(self.columns):
                raise StatementError(
                    "fetch",
                    self._sql,
                    f"row has {len(values)} values for {len(self.columns)} columns",
                )
            rows.append(Row(self.columns, values))
        return rows

    def close(self) -> None:
        self._closed = True


class PreparedStatement:
    """A SQL statement bound to one cursor, with ordinal parameters."""

    def __init__(self, connection: Any, sql: str) -> None:
        self.sql = sql
        self._cursor = connection.cursor()
        self._params: dict[int, Any] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def cursor(self) -> Any:
        return self._cursor

    def set(self, position: int, value: Any) -> None:
        """Bind *value* to the 1-based placeholder *position*."""
        if position < 1:
            raise ParameterBindingError(self.sql, f"invalid parameter position {position}")
        self._params[position] = value

    def set_all(self, *values: Any) -> None:
        """Bind *values* to positions 1..n, replacing any earlier bindings."""
        self._params.clear()
        for position, value in enumerate(values, start=1):
            self._params[position] = value

    def clear_parameters(self) -> None:
        self._params.clear()

    @property
    def parameters(self) -> tuple[Any, ...]:
        """Bound values in placeholder order.

        Raises:
            ParameterBindingError: If a position between 1 and the highest
                bound position was never set.
        """
        if not self._params:
            return ()
        count = max(self._params)
        missing = [p for p in range(1, count + 1) if p not in self._params]
        if missing:
            raise ParameterBindingError(self.sql, f"no value bound for positions {missing}")
        return tuple(self._params[p] for p in range(1, count + 1))

    def execute_query(self) -> ResultRows:
        self._check_open()
        self._cursor.execute(self.sql, self.parameters)
        return ResultRows(self._cursor, self.sql)

    def execute_update(self) -> int:
        """Execute DML and return the driver-reported affected row count."""
        self._check_open()
        self._cursor.execute(self.sql, self.parameters)
        return int(self._cursor.rowcount)

    def close(self) -> None:
        """Release the cursor. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._cursor.close()

    def _check_open(self) -> None:
        if self._closed:
            raise StatementError("execute", self.sql, "statement is closed")


class CallableStatement(PreparedStatement):
    """A stored-procedure call or callable block.

    A bare procedure name goes through DB-API ``callproc`` when the driver
    provides it; anything else is executed as SQL text.
    """

    def __init__(self, connection: Any, sql: str) -> None:
        super().__init__(connection, sql)
        self._outputs: tuple[Any, ...] = ()

    def execute_call(self) -> None:
        self._check_open()
        params = self.parameters
        callproc = getattr(self._cursor, "callproc", None)
        if callproc is not None and is_procedure_name(self.sql):
            result = callproc(self.sql.strip(), params)
            self._outputs = tuple(result) if result is not None else params
        else:
            self._cursor.execute(self.sql, params)
            self._outputs = params

    @property
    def outputs(self) -> tuple[Any, ...]:
        """Parameter values after the call (OUT/INOUT values where the driver reports them)."""
        return self._outputs

    def get_output(self, position: int) -> Any:
        """Return the 1-based output parameter at *position*."""
        if position < 1 or position > len(self._outputs):
            raise IndexError(f"Output parameter {position} out of range (1..{len(self._outputs)})")
        return self._outputs[position - 1]

    def result_rows(self) -> ResultRows:
        """Rows produced by the call, if any."""
        return ResultRows(self._cursor, self.sql)


Binder = Callable[[PreparedStatement], None]


def positional(*values: Any) -> Binder:
    """Return a binder that binds *values* to positions 1..n."""

    def _bind(statement: PreparedStatement) -> None:
        statement.set_all(*values)

    return _bind
