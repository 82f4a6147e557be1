"""Mapping layer - turn result rows into declared entities."""

from __future__ import annotations

from row_mapper.mapping.binding import (
    BindingTable,
    FieldBinding,
    bindings_for,
    column,
    entity,
    is_entity,
    register,
)
from row_mapper.mapping.codec import JsonCodec, TextEncoder
from row_mapper.mapping.coercion import coerce
from row_mapper.mapping.model import ResultSetMapper
from row_mapper.mapping.protocol import Mapper

__all__ = [
    "ResultSetMapper",
    "Mapper",
    "BindingTable",
    "FieldBinding",
    "bindings_for",
    "column",
    "entity",
    "is_entity",
    "register",
    "coerce",
    "JsonCodec",
    "TextEncoder",
]
