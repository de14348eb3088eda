"""
Result values produced by query execution.

Value is similar to InputValue but can never contain variables or enum
literals, and carries no source positions: it is built by resolving fields,
not by parsing a document.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterable, Optional

from ..core.errors import ScalarConversionError
from .object import Object
from .scalar import DefaultScalarValue, ScalarValue


class ValueKind(str, Enum):
    NULL = "null"
    SCALAR = "scalar"
    LIST = "list"
    OBJECT = "object"


class Value:
    """
    Tagged result value: Null, Scalar(S), List[Value] or Object.

    Examples:
        Value.null()
        Value.scalar(1234)
        Value.list([Value.scalar(1), Value.scalar("two")])
        Value.from_python({"key": "value", "foo": 1234})
    """

    __slots__ = ("kind", "_payload")

    def __init__(self, kind: ValueKind, payload: Any = None):
        self.kind = kind
        self._payload = payload

    # =========================================================================
    # Constructors
    # =========================================================================

    @classmethod
    def null(cls) -> "Value":
        return cls(ValueKind.NULL)

    @classmethod
    def scalar(cls, value: Any, scalar_type: type[ScalarValue] = DefaultScalarValue) -> "Value":
        """Construct a scalar value from a ScalarValue or a Python host value."""
        if isinstance(value, ScalarValue):
            return cls(ValueKind.SCALAR, value)
        return cls(ValueKind.SCALAR, scalar_type.from_host(value))

    @classmethod
    def list(cls, items: Iterable["Value"]) -> "Value":
        return cls(ValueKind.LIST, list(items))

    @classmethod
    def object(cls, obj: Object) -> "Value":
        return cls(ValueKind.OBJECT, obj)

    @classmethod
    def from_python(cls, data: Any, scalar_type: type[ScalarValue] = DefaultScalarValue) -> "Value":
        """
        Build a value tree from plain Python data.

        dict -> Object (key order kept), list/tuple -> List, None -> Null,
        anything else -> Scalar.
        """
        if data is None:
            return cls.null()
        if isinstance(data, Value):
            return data
        if isinstance(data, dict):
            return cls.object(Object(
                (str(key), cls.from_python(item, scalar_type)) for key, item in data.items()
            ))
        if isinstance(data, (list, tuple)):
            return cls.list(cls.from_python(item, scalar_type) for item in data)
        return cls.scalar(data, scalar_type)

    # =========================================================================
    # Discriminators and views
    # =========================================================================

    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def as_scalar(self) -> Optional[ScalarValue]:
        return self._payload if self.kind is ValueKind.SCALAR else None

    def as_int_value(self) -> Optional[int]:
        scalar = self.as_scalar()
        return scalar.as_int() if scalar is not None else None

    def as_float_value(self) -> Optional[float]:
        scalar = self.as_scalar()
        return scalar.as_float() if scalar is not None else None

    def as_string_value(self) -> Optional[str]:
        scalar = self.as_scalar()
        return scalar.as_string() if scalar is not None else None

    def as_boolean_value(self) -> Optional[bool]:
        scalar = self.as_scalar()
        return scalar.as_boolean() if scalar is not None else None

    def as_object_value(self) -> Optional[Object]:
        return self._payload if self.kind is ValueKind.OBJECT else None

    def as_list_value(self) -> Optional[list["Value"]]:
        return self._payload if self.kind is ValueKind.LIST else None

    def into_object(self) -> Optional[Object]:
        """Return the Object payload, or None if this value is not an object."""
        return self.as_object_value()

    # =========================================================================
    # Conversion
    # =========================================================================

    def map_scalar_value(self, target: type[ScalarValue]) -> "Value":
        """
        Re-express this value tree in another scalar representation.

        When every leaf already uses the target representation the tree is
        returned unchanged.
        """
        if self._uses_only(target):
            return self
        if self.kind is ValueKind.SCALAR:
            return Value(ValueKind.SCALAR, target.convert(self._payload))
        if self.kind is ValueKind.LIST:
            return Value.list(item.map_scalar_value(target) for item in self._payload)
        if self.kind is ValueKind.OBJECT:
            return Value.object(Object(
                (key, item.map_scalar_value(target)) for key, item in self._payload.items()
            ))
        return self

    def _uses_only(self, target: type[ScalarValue]) -> bool:
        if self.kind is ValueKind.SCALAR:
            return type(self._payload) is target
        if self.kind is ValueKind.LIST:
            return all(item._uses_only(target) for item in self._payload)
        if self.kind is ValueKind.OBJECT:
            return all(item._uses_only(target) for _, item in self._payload.items())
        return True

    def to_python(self) -> Any:
        """Convert to plain data (dict/list/str/int/float/bool/None)."""
        if self.kind is ValueKind.NULL:
            return None
        if self.kind is ValueKind.SCALAR:
            return self._payload.to_python()
        if self.kind is ValueKind.LIST:
            return [item.to_python() for item in self._payload]
        return {key: item.to_python() for key, item in self._payload.items()}

    def to_json(self) -> str:
        try:
            return json.dumps(self.to_python(), ensure_ascii=False)
        except TypeError as e:
            raise ScalarConversionError(f"Value is not JSON serializable: {e}") from e

    # =========================================================================
    # Protocol
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind is other.kind and self._payload == other._payload

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Value.null()"
        return f"Value.{self.kind.value}({self._payload!r})"

    def __str__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "null"
        if self.kind is ValueKind.SCALAR:
            return str(self._payload)
        if self.kind is ValueKind.LIST:
            return "[" + ", ".join(str(item) for item in self._payload) + "]"
        return "{" + ", ".join(
            f"{json.dumps(key, ensure_ascii=False)}: {item}" for key, item in self._payload.items()
        ) + "}"
