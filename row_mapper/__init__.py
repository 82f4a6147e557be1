"""RowMapper - parameterized SQL execution and annotation-driven row mapping."""

from __future__ import annotations

from row_mapper.core.connection import ConnectionConfig, ConnectionManager
from row_mapper.core.enums import DatabaseBackend, ErrorKind, StatementKind
from row_mapper.core.exceptions import (
    AcquisitionError,
    AdapterError,
    CleanupError,
    CoercionError,
    ConfigurationError,
    EncodingError,
    HandlerError,
    MappingError,
    ParameterBindingError,
    RowMapperError,
    StatementError,
)
from row_mapper.core.executor import Executor
from row_mapper.core.handler import StatementHandler
from row_mapper.core.statement import (
    CallableStatement,
    Cell,
    PreparedStatement,
    ResultRows,
    Row,
    positional,
)
from row_mapper.mapping.binding import column, entity, register
from row_mapper.mapping.codec import JsonCodec
from row_mapper.mapping.model import ResultSetMapper

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Executor
    "Executor",
    "StatementHandler",
    # Statements
    "PreparedStatement",
    "CallableStatement",
    "ResultRows",
    "Row",
    "Cell",
    "positional",
    # Mapping
    "ResultSetMapper",
    "JsonCodec",
    "column",
    "entity",
    "register",
    # Enums
    "DatabaseBackend",
    "ErrorKind",
    "StatementKind",
    # Exceptions
    "RowMapperError",
    "ConfigurationError",
    "AdapterError",
    "AcquisitionError",
    "StatementError",
    "ParameterBindingError",
    "HandlerError",
    "MappingError",
    "CoercionError",
    "CleanupError",
    "EncodingError",
]
