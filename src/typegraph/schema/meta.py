"""
Static per-type schema metadata.

These descriptors are built once by the Registry and never change
afterwards; a Schema shares them read-only between concurrent queries.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from ..core.ast import InputValue, TypeRef
from ..core.errors import FieldError, ScalarConversionError

if TYPE_CHECKING:
    from ..types.scalars import ScalarDefinition


class TypeKind(str, Enum):
    SCALAR = "SCALAR"
    ENUM = "ENUM"
    OBJECT = "OBJECT"
    INTERFACE = "INTERFACE"
    UNION = "UNION"
    INPUT_OBJECT = "INPUT_OBJECT"

    @property
    def is_abstract(self) -> bool:
        return self in (TypeKind.INTERFACE, TypeKind.UNION)

    @property
    def is_composite(self) -> bool:
        return self in (TypeKind.OBJECT, TypeKind.INTERFACE, TypeKind.UNION)


# =============================================================================
# Type specs
# =============================================================================


@dataclass(frozen=True)
class ListOf:
    """Type spec wrapper: list of the inner spec."""
    of_type: Any


@dataclass(frozen=True)
class NonNull:
    """Type spec wrapper: non-null version of the inner spec."""
    of_type: Any


# =============================================================================
# Field and argument descriptors
# =============================================================================


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class ArgumentMeta:
    """Argument (or input object field) descriptor."""
    name: str
    arg_type: TypeRef
    default_value: Optional[InputValue] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class FieldMeta:
    """Output field descriptor."""
    name: str
    field_type: TypeRef
    arguments: tuple[ArgumentMeta, ...] = ()
    description: Optional[str] = None
    deprecation_reason: Optional[str] = None

    @property
    def is_deprecated(self) -> bool:
        return self.deprecation_reason is not None

    def argument(self, argument: ArgumentMeta) -> "FieldMeta":
        return replace(self, arguments=self.arguments + (argument,))

    def describe(self, text: str) -> "FieldMeta":
        return replace(self, description=text)

    def deprecated(self, reason: str = "No longer supported") -> "FieldMeta":
        return replace(self, deprecation_reason=reason)

    def argument_by_name(self, name: str) -> Optional[ArgumentMeta]:
        return next((a for a in self.arguments if a.name == name), None)


@dataclass(frozen=True)
class EnumValueMeta:
    name: str
    value: Any
    description: Optional[str] = None
    deprecation_reason: Optional[str] = None


# =============================================================================
# Type descriptors
# =============================================================================


@dataclass(frozen=True)
class MetaType:
    """Base type descriptor."""
    name: str
    description: Optional[str] = None

    kind: TypeKind = field(init=False, default=TypeKind.SCALAR)

    def field_by_name(self, name: str) -> Optional[FieldMeta]:
        return None


@dataclass(frozen=True)
class ScalarMeta(MetaType):
    definition: Optional["ScalarDefinition"] = None

    kind: TypeKind = field(init=False, default=TypeKind.SCALAR)


@dataclass(frozen=True)
class EnumMeta(MetaType):
    values: tuple[EnumValueMeta, ...] = ()

    kind: TypeKind = field(init=False, default=TypeKind.ENUM)

    def value_by_name(self, name: str) -> Optional[EnumValueMeta]:
        return next((v for v in self.values if v.name == name), None)

    def serialize(self, host_value: Any) -> str:
        """Map a resolver's host value onto the enum value name."""
        for value in self.values:
            if value.value == host_value or value.value is host_value:
                return value.name
        if isinstance(host_value, str) and self.value_by_name(host_value) is not None:
            return host_value
        raise FieldError(f"Enum {self.name} cannot represent value: {host_value!r}")

    def parse(self, name: str) -> Any:
        """Map an enum literal onto its host value."""
        value = self.value_by_name(name)
        if value is None:
            raise ScalarConversionError(f"Value '{name}' does not exist in enum {self.name}")
        return value.value


@dataclass(frozen=True)
class ObjectMeta(MetaType):
    fields: tuple[FieldMeta, ...] = ()
    interface_names: tuple[str, ...] = ()

    kind: TypeKind = field(init=False, default=TypeKind.OBJECT)

    def field_by_name(self, name: str) -> Optional[FieldMeta]:
        return next((f for f in self.fields if f.name == name), None)


@dataclass(frozen=True)
class InterfaceMeta(MetaType):
    fields: tuple[FieldMeta, ...] = ()
    possible_types: tuple[str, ...] = ()

    kind: TypeKind = field(init=False, default=TypeKind.INTERFACE)

    def field_by_name(self, name: str) -> Optional[FieldMeta]:
        return next((f for f in self.fields if f.name == name), None)


@dataclass(frozen=True)
class UnionMeta(MetaType):
    of_type_names: tuple[str, ...] = ()

    kind: TypeKind = field(init=False, default=TypeKind.UNION)

    @property
    def possible_types(self) -> tuple[str, ...]:
        return self.of_type_names


@dataclass(frozen=True)
class InputObjectMeta(MetaType):
    input_fields: tuple[ArgumentMeta, ...] = ()
    construct: Optional[Callable[[dict[str, Any]], Any]] = None

    kind: TypeKind = field(init=False, default=TypeKind.INPUT_OBJECT)

    def input_field_by_name(self, name: str) -> Optional[ArgumentMeta]:
        return next((f for f in self.input_fields if f.name == name), None)


@dataclass(frozen=True)
class PlaceholderMeta(MetaType):
    """Inserted while a type's meta is being built, to break recursion."""
    pass
