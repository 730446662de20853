"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Consulkit, a product of Garudex Labs

Wire codec for control-plane entities.

Entities are plain dataclasses mixing in :class:`WireModel`. Every field
declares the exact (case-sensitive, PascalCase) key the server uses through
:func:`wire_field`, while the Python attribute keeps a snake_case name::

    @dataclass
    class ServiceWeights(WireModel):
        passing: int = wire_field("Passing", default=0)
        warning: int = wire_field("Warning", default=0)

Decoding is additive-field tolerant: unknown keys are ignored, and absent or
``null`` keys take the field's default (or the zero value of its type).
A value of the wrong JSON type is a :class:`DecodeError`.
"""

from __future__ import annotations

import dataclasses
import enum
import types
from typing import (
    Any,
    Dict,
    List,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from consulkit.exceptions import DecodeError

WIRE_KEY = "wire"

_NoneType = type(None)

M = TypeVar("M", bound="WireModel")

_FIELD_CACHE: Dict[type, List[Tuple[dataclasses.Field, str, Any]]] = {}


def wire_field(
    name: str,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
) -> Any:
    """Declare a dataclass field serialized under the wire key ``name``."""
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={WIRE_KEY: name},
    )


def _is_union(tp: Any) -> bool:
    origin = get_origin(tp)
    return origin is Union or origin is getattr(types, "UnionType", None)


def zero_value(tp: Any) -> Any:
    """Return the zero value used when a field is absent from the payload."""
    if tp is Any or tp is None or tp is _NoneType:
        return None
    if _is_union(tp):
        args = get_args(tp)
        if _NoneType in args:
            return None
        return zero_value(args[0])

    origin = get_origin(tp)
    if origin is list:
        return []
    if origin is dict:
        return {}
    if isinstance(tp, type):
        if issubclass(tp, WireModel):
            return tp()
        if issubclass(tp, bool):
            return False
        if issubclass(tp, int):
            return 0
        if issubclass(tp, float):
            return 0.0
        if issubclass(tp, str):
            return ""
        if tp is list:
            return []
        if tp is dict:
            return {}
    return None


def decode(tp: Any, data: Any) -> Any:
    """
    Decode a JSON value into ``tp``.

    Supports ``WireModel`` subclasses, ``List[...]``, ``Dict[str, ...]``,
    ``Optional[...]``, enums, and the JSON scalar types.

    Raises:
        DecodeError: If ``data`` does not have the shape ``tp`` requires
    """
    if tp is Any:
        return data
    if tp is None or tp is _NoneType:
        return None

    if _is_union(tp):
        if data is None:
            return zero_value(tp)
        args = [a for a in get_args(tp) if a is not _NoneType]
        return decode(args[0], data)

    if data is None:
        return zero_value(tp)

    origin = get_origin(tp)
    if origin is list:
        if not isinstance(data, list):
            raise DecodeError(f"expected a JSON array, got {type(data).__name__}")
        (item_type,) = get_args(tp) or (Any,)
        return [decode(item_type, item) for item in data]

    if origin is dict:
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")
        args = get_args(tp)
        value_type = args[1] if len(args) == 2 else Any
        return {key: decode(value_type, value) for key, value in data.items()}

    if isinstance(tp, type):
        if issubclass(tp, WireModel):
            return tp.from_wire(data)
        if issubclass(tp, enum.Enum):
            try:
                return tp(data)
            except ValueError as e:
                raise DecodeError(f"invalid {tp.__name__} value {data!r}") from e
        if tp is bool:
            if isinstance(data, bool):
                return data
        elif tp is int:
            if isinstance(data, int) and not isinstance(data, bool):
                return data
        elif tp is float:
            if isinstance(data, (int, float)) and not isinstance(data, bool):
                return float(data)
        elif tp is str:
            if isinstance(data, str):
                return data
        elif tp in (list, dict):
            if isinstance(data, tp):
                return data
        else:
            raise DecodeError(f"unsupported wire type {tp!r}")
        raise DecodeError(
            f"expected {tp.__name__}, got {type(data).__name__} ({data!r})"
        )

    raise DecodeError(f"unsupported wire type {tp!r}")


def encode(value: Any) -> Any:
    """Encode a Python value into its JSON-compatible wire form."""
    if isinstance(value, WireModel):
        return value.to_wire()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, dict):
        return {key: encode(item) for key, item in value.items()}
    return value


class WireModel:
    """Mixin for dataclasses that travel over the wire."""

    @classmethod
    def _wire_fields(cls) -> List[Tuple[dataclasses.Field, str, Any]]:
        cached = _FIELD_CACHE.get(cls)
        if cached is None:
            hints = get_type_hints(cls)
            cached = [
                (f, f.metadata.get(WIRE_KEY, f.name), hints.get(f.name, Any))
                for f in dataclasses.fields(cls)
            ]
            _FIELD_CACHE[cls] = cached
        return cached

    def to_wire(self) -> Dict[str, Any]:
        """Convert to a dictionary keyed by wire names, omitting ``None`` values."""
        data: Dict[str, Any] = {}
        for f, key, _ in self._wire_fields():
            value = getattr(self, f.name)
            if value is None:
                continue
            data[key] = encode(value)
        return data

    @classmethod
    def from_wire(cls: Type[M], data: Any) -> M:
        """Create an instance from a decoded JSON object."""
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise DecodeError(
                f"expected a JSON object for {cls.__name__}, got {type(data).__name__}"
            )

        kwargs: Dict[str, Any] = {}
        for f, key, tp in cls._wire_fields():
            value = data.get(key)
            if value is not None:
                kwargs[f.name] = decode(tp, value)
            elif f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                kwargs[f.name] = zero_value(tp)
        return cls(**kwargs)
