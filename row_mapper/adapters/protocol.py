"""Database adapter protocol.

Every adapter module MUST implement this protocol so ConnectionManager can
load any of them by driver name.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_mapper.core.connection import ConnectionConfig


@runtime_checkable
class Adapter(Protocol):
    """Database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Placeholder style: 'qmark' (?) or 'format' (%s)."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open and return a new DB-API connection."""
        ...
