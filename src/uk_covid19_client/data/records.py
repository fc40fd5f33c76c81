"""Record factories turning wire items into caller-declared record types."""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

T = TypeVar("T")

JsonObject = dict[str, object]
RecordFactory = Callable[[Mapping[str, Any]], T]

_SCALARS = (bool, int, float, str)


def _identity(item: Mapping[str, Any]) -> JsonObject:
    return dict(item)


def _scalar_options(hint: object) -> tuple[type, ...] | None:
    """Scalar types a field accepts, or ``None`` when the hint is not checked."""

    if hint is type(None):
        return (type(None),)
    if hint in _SCALARS:
        return (hint,)
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        options: list[type] = []
        for arg in typing.get_args(hint):
            accepted = _scalar_options(arg)
            if accepted is None:
                return None
            options.extend(accepted)
        return tuple(options)
    return None


def _matches(value: object, options: tuple[type, ...]) -> bool:
    # bool is an int subclass; JSON ints are valid floats.
    if isinstance(value, bool):
        return bool in options
    if isinstance(value, int) and float in options:
        return True
    return isinstance(value, options)


def _dataclass_factory(record_type: type[T]) -> RecordFactory[T]:
    init_fields = tuple(f for f in dataclasses.fields(record_type) if f.init)
    required = tuple(
        f.name
        for f in init_fields
        if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING
    )
    names = frozenset(f.name for f in init_fields)
    try:
        hints = typing.get_type_hints(record_type)
    except NameError:
        hints = {}
    checks = {
        f.name: options
        for f in init_fields
        if (options := _scalar_options(hints.get(f.name))) is not None
    }

    def _build(item: Mapping[str, Any]) -> T:
        missing = [name for name in required if name not in item]
        if missing:
            raise ValueError(f"record is missing field(s): {', '.join(missing)}")
        for name, options in checks.items():
            if name in item and not _matches(item[name], options):
                expected = " | ".join(option.__name__ for option in options)
                raise ValueError(
                    f"field {name!r} expects {expected}, got {type(item[name]).__name__}"
                )
        return record_type(**{key: value for key, value in item.items() if key in names})

    return _build


def record_factory(record_type: type[T] | Callable[..., T] | None = None) -> RecordFactory[Any]:
    """Resolve how each ``data`` item is constructed.

    Resolution order:

    * ``record_type.from_payload(item)`` when the type provides it;
    * dataclass types are built from matching keys (unknown keys are dropped);
    * any other callable receives the item mapping;
    * ``None`` keeps plain dicts.
    """

    if record_type is None:
        return _identity
    from_payload = getattr(record_type, "from_payload", None)
    if callable(from_payload):
        return from_payload
    if isinstance(record_type, type) and dataclasses.is_dataclass(record_type):
        return _dataclass_factory(record_type)
    if callable(record_type):
        return record_type
    raise TypeError("record_type must be a type or callable")


__all__ = [
    "JsonObject",
    "RecordFactory",
    "record_factory",
]
