"""
Scalar representations.

A scalar representation is the closed set of leaf kinds a schema works with.
DefaultScalarValue covers the four kinds every schema needs; schemas that
need more (64-bit integers, decimals, ...) subclass it and add kinds.

Usage:
    class MyScalarValue(DefaultScalarValue):
        KINDS = {**DefaultScalarValue.KINDS, "long": (int,)}

        @classmethod
        def from_host(cls, value):
            if isinstance(value, int) and not isinstance(value, bool) and not fits_int32(value):
                return cls("long", value)
            return super().from_host(value)
"""

from __future__ import annotations

import json
from typing import Any, ClassVar, Mapping, Optional

from ..core.errors import ScalarConversionError


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
MAX_SAFE_FLOAT_INT = 2 ** 53


def fits_int32(value: int) -> bool:
    """Check whether an integer fits the 32-bit Int range."""
    return INT32_MIN <= value <= INT32_MAX


class ScalarValue:
    """
    Base class for scalar representations.

    Instances are immutable (kind, value) pairs. KINDS maps every kind name
    the representation supports to the host types its payload may have.
    """

    KINDS: ClassVar[Mapping[str, tuple[type, ...]]] = {}

    __slots__ = ("kind", "value")

    def __init__(self, kind: str, value: Any):
        host_types = self.KINDS.get(kind)
        if host_types is None:
            raise ScalarConversionError(
                f"{type(self).__name__} has no scalar kind '{kind}'"
            )
        if not isinstance(value, host_types) or (isinstance(value, bool) and bool not in host_types):
            raise ScalarConversionError(
                f"Scalar kind '{kind}' does not accept {type(value).__name__} value {value!r}"
            )
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # --- construction ---

    @classmethod
    def from_host(cls, value: Any) -> "ScalarValue":
        """Build a scalar from a plain Python value."""
        if type(value) is cls:
            return value
        if isinstance(value, ScalarValue):
            return cls.convert(value)
        for kind, host_types in cls.KINDS.items():
            if isinstance(value, bool) and bool not in host_types:
                continue
            if isinstance(value, host_types):
                return cls(kind, value)
        raise ScalarConversionError(
            f"Cannot represent {type(value).__name__} value {value!r} as {cls.__name__}"
        )

    @classmethod
    def convert(cls, other: "ScalarValue") -> "ScalarValue":
        """
        Convert a scalar of any representation into this one.

        Kinds shared by both representations are copied as-is; other kinds go
        through from_host with the payload, so a representation is complete
        as long as its from_host accepts every host type it may receive.
        """
        if type(other) is cls:
            return other
        if other.kind in cls.KINDS:
            return cls(other.kind, other.value)
        return cls.from_host(other.value)

    def into_another(self, target: type["ScalarValue"]) -> "ScalarValue":
        return target.convert(self)

    # --- views ---

    def as_kind(self, kind: str) -> Any:
        """Return the payload if this scalar is of the given kind, else None."""
        return self.value if self.kind == kind else None

    def as_int(self) -> Optional[int]:
        if isinstance(self.value, int) and not isinstance(self.value, bool):
            return self.value
        return None

    def as_float(self) -> Optional[float]:
        if isinstance(self.value, bool):
            return None
        if isinstance(self.value, (int, float)):
            return float(self.value)
        return None

    def as_string(self) -> Optional[str]:
        return self.value if isinstance(self.value, str) else None

    def as_boolean(self) -> Optional[bool]:
        return self.value if isinstance(self.value, bool) else None

    def to_python(self) -> Any:
        return self.value

    # --- protocol ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScalarValue):
            return NotImplemented
        return self.kind == other.kind and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.kind, self.value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind}={self.value!r})"

    def __str__(self) -> str:
        value = self.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, str):
            return json.dumps(value, ensure_ascii=False)
        if isinstance(value, float):
            return repr(value)
        return str(value)


class DefaultScalarValue(ScalarValue):
    """Int (32-bit), Float, String and Boolean."""

    KINDS: ClassVar[Mapping[str, tuple[type, ...]]] = {
        "int": (int,),
        "float": (float,),
        "string": (str,),
        "boolean": (bool,),
    }

    __slots__ = ()

    @classmethod
    def from_host(cls, value: Any) -> "ScalarValue":
        if isinstance(value, bool):
            return cls("boolean", value)
        if isinstance(value, int):
            # Integers outside the Int range are carried as floats, like
            # JSON numbers without a fractional part, while that is exact.
            if fits_int32(value):
                return cls("int", value)
            if abs(value) > MAX_SAFE_FLOAT_INT:
                raise ScalarConversionError(
                    f"Integer {value} does not fit {cls.__name__} without losing precision"
                )
            return cls("float", float(value))
        return super().from_host(value)
