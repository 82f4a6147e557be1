"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config.
ConnectionManager opens one fresh connection per request through the adapter
for the configured driver; there is no pooling.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import BaseModel

from row_mapper.core.enums import DatabaseBackend
from row_mapper.core.exceptions import AcquisitionError, AdapterError

logger = logging.getLogger(__name__)


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    extra: dict[str, Any] = {}


# Adapter module mapping: driver name → (module_path, class_name)
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "sqlite": ("row_mapper.adapters.sqlite", "SqliteAdapter"),
    "postgresql": ("row_mapper.adapters.postgresql", "PostgresqlAdapter"),
}


def _load_adapter(driver: str) -> Any:
    """Load an adapter by driver name."""
    driver_lower = driver.lower()
    if driver_lower not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver}")

    module_path, cls_name = _ADAPTER_MAP[driver_lower]

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Opens connections through the adapter for ``config.driver``."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver)

    @property
    def adapter(self) -> Any:
        return self._adapter

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend(self.config.driver.lower())

    @property
    def paramstyle(self) -> str:
        return str(self._adapter.paramstyle)

    def connect(self) -> Any:
        """Open a new connection. The caller owns it and must close it.

        Raises:
            AcquisitionError: If the driver refuses the connection.
        """
        try:
            connection = self._adapter.connect(self.config)
        except Exception as e:
            raise AcquisitionError(
                f"Could not connect to {self.config.driver} database "
                f"'{self.config.database}': {e}"
            ) from e
        logger.debug(f"Opened {self.config.driver} connection {id(connection)}")
        return connection

    @contextmanager
    def get_connection(self) -> Iterator[Any]:
        """Open a connection as a context manager, closing it on exit."""
        connection = self.connect()
        try:
            yield connection
        finally:
            connection.close()
