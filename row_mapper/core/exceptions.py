"""RowMapper exception hierarchy.

Every exception carries a ``kind`` tag so callers can tell "the query never
ran" from "the query ran but post-processing failed" without matching on
concrete classes. Driver exceptions are chained, never exposed bare.
"""

from __future__ import annotations

from typing import Any, ClassVar

from row_mapper.core.enums import ErrorKind


class RowMapperError(Exception):
    """Base exception for all RowMapper errors."""

    kind: ClassVar[ErrorKind]


# --- Configuration ---


class ConfigurationError(RowMapperError):
    """Raised when a type or driver is not set up for use.

    Always raised before any connection is acquired.
    """

    kind = ErrorKind.CONFIGURATION


class AdapterError(ConfigurationError):
    """Raised when a database adapter cannot be loaded."""


# --- Execution ---


class AcquisitionError(RowMapperError):
    """Raised when no connection could be obtained."""

    kind = ErrorKind.ACQUISITION


class StatementError(RowMapperError):
    """Raised when the driver fails to prepare, execute or commit a statement."""

    kind = ErrorKind.STATEMENT

    def __init__(self, phase: str, sql: str, detail: str) -> None:
        self.phase = phase
        self.sql = sql
        super().__init__(f"Statement {phase} failed for {sql!r}: {detail}")


class ParameterBindingError(StatementError):
    """Raised on parameter binding failures."""

    def __init__(self, sql: str, detail: str) -> None:
        super().__init__("bind", sql, detail)


class HandlerError(RowMapperError):
    """Raised when a caller-supplied hook or result consumer fails."""

    kind = ErrorKind.HANDLER

    def __init__(self, hook: str, detail: str) -> None:
        self.hook = hook
        super().__init__(f"Handler hook '{hook}' failed: {detail}")


class CleanupError(RowMapperError):
    """Raised when releasing a resource fails and nothing else went wrong."""

    kind = ErrorKind.CLEANUP

    def __init__(self, resource: str, detail: str) -> None:
        self.resource = resource
        super().__init__(f"Failed to release {resource}: {detail}")


# --- Mapping ---


class MappingError(RowMapperError):
    """Base for row-to-record mapping errors."""

    kind = ErrorKind.MAPPING


class CoercionError(MappingError):
    """Raised when a raw column value cannot be represented by the field type."""

    def __init__(
        self,
        value: Any,
        target: Any,
        *,
        field: str | None = None,
        column: str | None = None,
        row_index: int | None = None,
    ) -> None:
        self.value = value
        self.target = target
        self.field = field
        self.column = column
        self.row_index = row_index
        target_name = getattr(target, "__name__", repr(target))
        location = ""
        if field is not None:
            location = f" for field '{field}'"
        if column is not None:
            location += f" (column '{column}'"
            if row_index is not None:
                location += f", row {row_index}"
            location += ")"
        super().__init__(
            f"Cannot coerce {type(value).__name__} value {value!r} to {target_name}{location}"
        )


# --- Encoding ---


class EncodingError(RowMapperError):
    """Raised when a value cannot be rendered as text."""

    kind = ErrorKind.ENCODING
