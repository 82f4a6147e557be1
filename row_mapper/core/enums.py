"""Enumerations shared across the executor and mapper."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class StatementKind(Enum):
    """The three statement flavors the executor can run."""

    QUERY = "query"
    UPDATE = "update"
    CALL = "call"


class ErrorKind(Enum):
    """Failure category carried by every RowMapper exception."""

    CONFIGURATION = "configuration"
    ACQUISITION = "acquisition"
    STATEMENT = "statement"
    HANDLER = "handler"
    MAPPING = "mapping"
    CLEANUP = "cleanup"
    ENCODING = "encoding"
