"""Raw column value → field type coercion.

Conversions are looked up in a table keyed by ``(raw type, target type)``.
An exact key wins first, then an ``isinstance`` pass-through, then keys for
the raw type's bases. Anything not covered is a CoercionError.
"""

from __future__ import annotations

import types
import typing
import uuid
from collections.abc import Callable
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from row_mapper.core.exceptions import CoercionError

_Converter = Callable[[Any], Any]


def _float_to_int(value: float) -> int:
    if not value.is_integer():
        raise ValueError("value has a fractional part")
    return int(value)


def _decimal_to_int(value: Decimal) -> int:
    if value != value.to_integral_value():
        raise ValueError("value has a fractional part")
    return int(value)


def _int_to_bool(value: int) -> bool:
    if value not in (0, 1):
        raise ValueError("only 0 and 1 convert to bool")
    return bool(value)


_CONVERTERS: dict[tuple[type, type], _Converter] = {
    # numeric widening / narrowing
    (int, float): float,
    (int, Decimal): Decimal,
    (float, int): _float_to_int,
    (float, Decimal): lambda v: Decimal(str(v)),
    (Decimal, int): _decimal_to_int,
    (Decimal, float): float,
    (bool, int): int,
    (int, bool): _int_to_bool,
    # numbers render as text; numeric text parses back
    (int, str): str,
    (float, str): str,
    (Decimal, str): str,
    (str, int): int,
    (str, float): float,
    (str, Decimal): Decimal,
    # temporal
    (str, date): date.fromisoformat,
    (str, datetime): datetime.fromisoformat,
    (str, time): time.fromisoformat,
    (datetime, date): lambda v: v.date(),
    (date, datetime): lambda v: datetime.combine(v, time()),
    # binary / identifiers
    (memoryview, bytes): bytes,
    (bytearray, bytes): bytes,
    (str, uuid.UUID): uuid.UUID,
}

_CONVERSION_ERRORS = (ValueError, TypeError, ArithmeticError, InvalidOperation)


def _is_union(target: Any) -> bool:
    return typing.get_origin(target) in (typing.Union, types.UnionType)


def coerce(value: Any, target: Any) -> Any:
    """Convert *value* to *target*.

    ``None`` is returned unchanged; callers skip null columns before coercing.

    Raises:
        CoercionError: If *target* cannot represent *value*.
    """
    if value is None or target is Any or target is object:
        return value

    if _is_union(target):
        return _coerce_union(value, target)

    origin = typing.get_origin(target)
    if origin is not None:
        # Parameterized generics (list[int], dict[str, Any]) check the origin only
        if isinstance(origin, type) and isinstance(value, origin):
            return value
        raise CoercionError(value, target)

    if not isinstance(target, type):
        return value

    raw_type = type(value)
    converter = _CONVERTERS.get((raw_type, target))
    if converter is None:
        if isinstance(value, target):
            return value
        converter = _lookup_mro(raw_type, target)

    if converter is None and issubclass(target, Enum):
        converter = target

    if converter is None:
        raise CoercionError(value, target)

    try:
        return converter(value)
    except _CONVERSION_ERRORS as e:
        raise CoercionError(value, target) from e


def _lookup_mro(raw_type: type, target: type) -> _Converter | None:
    for base in raw_type.__mro__[1:]:
        converter = _CONVERTERS.get((base, target))
        if converter is not None:
            return converter
    return None


def _coerce_union(value: Any, target: Any) -> Any:
    """Optional[X] unwraps to X; other unions take the first member that fits."""
    members = [arg for arg in typing.get_args(target) if arg is not type(None)]
    if len(members) == 1:
        return coerce(value, members[0])

    for member in members:
        if isinstance(member, type) and isinstance(value, member):
            return value

    last_error: CoercionError | None = None
    for member in members:
        try:
            return coerce(value, member)
        except CoercionError as e:
            last_error = e
    raise CoercionError(value, target) from last_error
