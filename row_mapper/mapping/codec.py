"""Text encoding of mapped records.

JsonCodec renders records with pydantic-core's serializer, which already
understands dataclasses, Pydantic models, temporals, Decimal and UUID.
Plain objects fall back to their public attributes.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic_core import PydanticSerializationError, to_json

from row_mapper.core.exceptions import EncodingError


class TextEncoder(Protocol):
    """Anything that turns a value into text."""

    def encode(self, value: Any) -> str: ...


def _public_attributes(value: Any) -> Any:
    try:
        attributes = vars(value)
    except TypeError:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable") from None
    return {name: attr for name, attr in attributes.items() if not name.startswith("_")}


class JsonCodec:
    """JSON encoder backed by ``pydantic_core.to_json``.

    Args:
        indent: Pretty-print indentation; ``None`` renders compact JSON.
    """

    def __init__(self, indent: int | None = None) -> None:
        self._indent = indent

    def encode(self, value: Any) -> str:
        """Encode *value* as JSON text.

        Raises:
            EncodingError: If *value* contains something that cannot be encoded.
        """
        try:
            return to_json(value, indent=self._indent, fallback=_public_attributes).decode("utf-8")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise EncodingError(f"Cannot encode {type(value).__name__} as JSON: {e}") from e
