"""Statement handler - the hooks a caller plugs into the executor.

Every hook is optional. A missing hook is a no-op, except ``connect``, whose
absence makes the executor fall back to its own ConnectionManager.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from row_mapper.core.statement import CallableStatement, PreparedStatement, ResultRows


@dataclass(frozen=True)
class StatementHandler:
    """Lifecycle hooks for one executor operation.

    Attributes:
        connect: Returns a new DB-API connection for the self-acquired form.
        before: Called with the connection before the statement is prepared.
        bind: Binds parameters on the prepared statement.
        result: Consumes the rows of a query.
        call_result: Receives the completed statement of a procedure call.
        after: Called with the connection once the result has been consumed.
    """

    connect: Callable[[], Any] | None = None
    before: Callable[[Any], None] | None = None
    bind: Callable[[PreparedStatement], None] | None = None
    result: Callable[[ResultRows], None] | None = None
    call_result: Callable[[CallableStatement], None] | None = None
    after: Callable[[Any], None] | None = None
