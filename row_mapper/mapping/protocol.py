"""Mapper protocol.

Mappers turn result rows into records. The executor-facing
ResultSetMapper implements it; so can any hand-written mapper passed
around in its place.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, TypeVar

from row_mapper.core.statement import Row

T_co = TypeVar("T_co", covariant=True)


class Mapper(Protocol[T_co]):
    """Base mapper protocol."""

    def map_row(self, row: Row) -> T_co:
        """Map a single row to a target object."""
        ...

    def map_rows(self, rows: Iterable[Row]) -> list[T_co]:
        """Map rows to a list of target objects, in order."""
        ...
