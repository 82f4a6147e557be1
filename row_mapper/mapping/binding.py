"""Field-to-column binding declarations.

A record type becomes mappable in one of three ways:

* a dataclass decorated with ``@entity`` whose fields use ``column()``;
* a Pydantic model decorated with ``@entity`` whose fields carry
  ``json_schema_extra={"column": ...}``;
* any class passed to ``register()`` with an explicit field → column mapping.

Each produces a BindingTable stored on the class at declaration time.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from row_mapper.core.exceptions import ConfigurationError

T = TypeVar("T")

COLUMN_KEY = "column"
_TABLE_ATTR = "__row_bindings__"


@dataclass(frozen=True)
class FieldBinding:
    """One field bound to one column name."""

    name: str
    column: str
    field_type: Any = Any

    def matches(self, column_name: str) -> bool:
        return self.column.casefold() == column_name.casefold()


@dataclass(frozen=True)
class BindingTable:
    """Static binding table for one record type.

    ``bindings`` keeps field declaration order; ``factory`` builds a
    zero-value instance.
    """

    target_class: type
    factory: Callable[[], Any]
    bindings: tuple[FieldBinding, ...]

    def match(self, column_name: str) -> FieldBinding | None:
        """Return the first binding for *column_name*, compared case-insensitively.

        First declared wins: later fields bound to the same column never
        receive its value.
        """
        for binding in self.bindings:
            if binding.matches(column_name):
                return binding
        return None


def column(
    name: str,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare a dataclass field bound to column *name*.

    Fields without an explicit default default to ``None`` so the record
    can always be built without arguments.
    """
    if default is dataclasses.MISSING and default_factory is dataclasses.MISSING:
        default = None
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={COLUMN_KEY: name},
    )


def _is_pydantic_model(cls: type) -> bool:
    """Check if a class is a Pydantic BaseModel."""
    from pydantic import BaseModel

    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except Exception as e:
        raise ConfigurationError(
            f"Cannot resolve field annotations of {cls.__name__}: {e}"
        ) from e


def _dataclass_bindings(cls: type) -> list[FieldBinding]:
    hints = _type_hints(cls)
    bindings: list[FieldBinding] = []
    for f in dataclasses.fields(cls):
        if (
            f.init
            and f.default is dataclasses.MISSING
            and f.default_factory is dataclasses.MISSING
        ):
            raise ConfigurationError(
                f"Field '{f.name}' of {cls.__name__} has no default; "
                "mapped records must be constructible without arguments"
            )
        column_name = f.metadata.get(COLUMN_KEY)
        if column_name is not None:
            bindings.append(FieldBinding(f.name, column_name, hints.get(f.name, Any)))
    return bindings


def _pydantic_bindings(cls: Any) -> list[FieldBinding]:
    bindings: list[FieldBinding] = []
    for name, info in cls.model_fields.items():
        if info.is_required():
            raise ConfigurationError(
                f"Field '{name}' of {cls.__name__} is required; "
                "mapped records must be constructible without arguments"
            )
        extra = info.json_schema_extra
        column_name = extra.get(COLUMN_KEY) if isinstance(extra, dict) else None
        if column_name is not None:
            bindings.append(FieldBinding(name, str(column_name), info.annotation))
    return bindings


def _check_factory(cls: type, factory: Callable[[], Any]) -> None:
    """Reject factories that need arguments."""
    try:
        sig = inspect.signature(factory)
    except (ValueError, TypeError):
        return
    required = [
        name
        for name, param in sig.parameters.items()
        if param.default is inspect.Parameter.empty
        and param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD, param.KEYWORD_ONLY)
    ]
    if required:
        raise ConfigurationError(
            f"Factory for {cls.__name__} requires arguments {required}; "
            "mapped records must be constructible without arguments"
        )


def _attach(cls: type, factory: Callable[[], Any], bindings: list[FieldBinding]) -> BindingTable:
    if not bindings:
        raise ConfigurationError(f"{cls.__name__} declares no column bindings")
    table = BindingTable(target_class=cls, factory=factory, bindings=tuple(bindings))
    setattr(cls, _TABLE_ATTR, table)
    return table


def entity(cls: type[T]) -> type[T]:
    """Class decorator marking a dataclass or Pydantic model as mappable.

    Apply above ``@dataclass``. Raises ConfigurationError if the class has
    no bound fields or cannot be built without arguments.
    """
    if dataclasses.is_dataclass(cls):
        bindings = _dataclass_bindings(cls)
    elif _is_pydantic_model(cls):
        bindings = _pydantic_bindings(cls)
    else:
        raise ConfigurationError(
            f"@entity supports dataclasses and Pydantic models; use register() for {cls.__name__}"
        )
    _attach(cls, cls, bindings)
    return cls


def register(
    cls: type[T],
    columns: Mapping[str, str],
    *,
    factory: Callable[[], T] | None = None,
) -> BindingTable:
    """Bind fields of an arbitrary class explicitly.

    Args:
        cls: The record class.
        columns: Field name → column name, in field order.
        factory: Zero-argument constructor. Defaults to ``cls``.

    Returns:
        The BindingTable now attached to *cls*.
    """
    factory = factory or cls
    _check_factory(cls, factory)
    hints = _type_hints(cls)
    bindings = [FieldBinding(name, col, hints.get(name, Any)) for name, col in columns.items()]
    return _attach(cls, factory, bindings)


def bindings_for(cls: type) -> BindingTable:
    """Return the binding table declared on *cls* itself.

    Tables are not inherited: a subclass of an entity must be declared on
    its own.

    Raises:
        ConfigurationError: If *cls* was never declared as an entity.
    """
    table = vars(cls).get(_TABLE_ATTR) if isinstance(cls, type) else None
    if not isinstance(table, BindingTable):
        name = getattr(cls, "__name__", repr(cls))
        raise ConfigurationError(
            f"{name} is not a mapped entity; declare it with @entity or register()"
        )
    return table


def is_entity(cls: type) -> bool:
    return isinstance(cls, type) and isinstance(vars(cls).get(_TABLE_ATTR), BindingTable)
