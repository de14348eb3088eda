"""
Query document AST consumed by the executor.

The document is produced by an external parser (see core.document for the
graphql-core adapter) and is trusted to be valid against the schema.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Literal, Mapping, Optional, Union

from .errors import DocumentError


@dataclass(frozen=True)
class SourcePosition:
    """Position of a node in the query source (line and column are 1-based)."""
    index: int = 0
    line: int = 1
    column: int = 1

    @classmethod
    def unlocated(cls) -> "SourcePosition":
        return cls(0, 0, 0)


# =============================================================================
# Type references
# =============================================================================

_TYPE_TOKEN = re.compile(r"\s*(\[|\]|!|[_A-Za-z][_0-9A-Za-z]*)")


@dataclass(frozen=True)
class TypeRef:
    """
    Reference to a declared type: named, list-of or non-null.

    TypeRef.parse("[Int!]!") == TypeRef.named("Int").non_null().list_of().non_null()
    """
    kind: Literal["named", "list", "non_null"]
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = None

    @classmethod
    def named(cls, name: str) -> "TypeRef":
        return cls("named", name=name)

    def list_of(self) -> "TypeRef":
        return TypeRef("list", of_type=self)

    def non_null(self) -> "TypeRef":
        if self.kind == "non_null":
            return self
        return TypeRef("non_null", of_type=self)

    def nullable(self) -> "TypeRef":
        """Strip one non-null wrapper, if present."""
        return self.of_type if self.kind == "non_null" else self

    @property
    def is_non_null(self) -> bool:
        return self.kind == "non_null"

    @property
    def is_list(self) -> bool:
        return self.nullable().kind == "list"

    @property
    def innermost_name(self) -> str:
        ref = self
        while ref.kind != "named":
            ref = ref.of_type
        return ref.name

    @classmethod
    def parse(cls, text: str) -> "TypeRef":
        tokens = [m.group(1) for m in _TYPE_TOKEN.finditer(text)]
        if "".join(tokens) != re.sub(r"\s+", "", text) or not tokens:
            raise DocumentError(f"Invalid type reference '{text}'")
        ref, rest = cls._parse_tokens(tokens, text)
        if rest:
            raise DocumentError(f"Invalid type reference '{text}'")
        return ref

    @classmethod
    def _parse_tokens(cls, tokens: list[str], text: str) -> tuple["TypeRef", list[str]]:
        if not tokens:
            raise DocumentError(f"Invalid type reference '{text}'")
        head, rest = tokens[0], tokens[1:]
        if head == "[":
            inner, rest = cls._parse_tokens(rest, text)
            if not rest or rest[0] != "]":
                raise DocumentError(f"Invalid type reference '{text}'")
            ref, rest = inner.list_of(), rest[1:]
        elif head in ("]", "!"):
            raise DocumentError(f"Invalid type reference '{text}'")
        else:
            ref = cls.named(head)
        if rest and rest[0] == "!":
            ref, rest = ref.non_null(), rest[1:]
        return ref, rest

    def __str__(self) -> str:
        if self.kind == "named":
            return self.name
        if self.kind == "list":
            return f"[{self.of_type}]"
        return f"{self.of_type}!"


# =============================================================================
# Input values
# =============================================================================


@dataclass(frozen=True)
class ScalarToken:
    """Raw scalar literal from the query text, interpreted by the scalar's parse_token."""
    kind: Literal["int", "float", "string", "boolean"]
    text: str


class InputValueKind(str, Enum):
    NULL = "null"
    SCALAR = "scalar"
    TOKEN = "token"
    ENUM = "enum"
    VARIABLE = "variable"
    LIST = "list"
    OBJECT = "object"


class InputValue:
    """
    Literal or variable reference from the query text (or a variable value).

    Unlike Value, an InputValue may contain unresolved variables, enum
    literals and uninterpreted scalar tokens. into_const() substitutes
    variables; scalar tokens are interpreted during argument coercion.
    """

    __slots__ = ("kind", "payload", "position")

    def __init__(self, kind: InputValueKind, payload: Any = None, position: Optional[SourcePosition] = None):
        self.kind = kind
        self.payload = payload
        self.position = position

    # --- constructors ---

    @classmethod
    def null(cls, position: Optional[SourcePosition] = None) -> "InputValue":
        return cls(InputValueKind.NULL, None, position)

    @classmethod
    def scalar(cls, value: Any, position: Optional[SourcePosition] = None) -> "InputValue":
        """Wrap an already interpreted ScalarValue."""
        return cls(InputValueKind.SCALAR, value, position)

    @classmethod
    def token(cls, kind: str, text: str, position: Optional[SourcePosition] = None) -> "InputValue":
        return cls(InputValueKind.TOKEN, ScalarToken(kind, text), position)

    @classmethod
    def enum(cls, name: str, position: Optional[SourcePosition] = None) -> "InputValue":
        return cls(InputValueKind.ENUM, name, position)

    @classmethod
    def variable(cls, name: str, position: Optional[SourcePosition] = None) -> "InputValue":
        return cls(InputValueKind.VARIABLE, name, position)

    @classmethod
    def list(cls, items: list["InputValue"], position: Optional[SourcePosition] = None) -> "InputValue":
        return cls(InputValueKind.LIST, tuple(items), position)

    @classmethod
    def object(cls, fields: list[tuple[str, "InputValue"]], position: Optional[SourcePosition] = None) -> "InputValue":
        return cls(InputValueKind.OBJECT, tuple(fields), position)

    @classmethod
    def from_host(cls, value: Any, scalar_type: Any) -> "InputValue":
        """
        Build an input value from plain data (typically a variable value).

        Scalars go through scalar_type.from_host so that e.g. large integers
        land on the representation's wide integer kind.
        """
        if value is None:
            return cls.null()
        if isinstance(value, InputValue):
            return value
        if isinstance(value, Enum):
            return cls.enum(value.name)
        if isinstance(value, Mapping):
            return cls.object([(str(k), cls.from_host(v, scalar_type)) for k, v in value.items()])
        if isinstance(value, (list, tuple)):
            return cls.list([cls.from_host(v, scalar_type) for v in value])
        return cls.scalar(scalar_type.from_host(value))

    # --- views ---

    def is_null(self) -> bool:
        return self.kind is InputValueKind.NULL

    def is_variable(self) -> bool:
        return self.kind is InputValueKind.VARIABLE

    def as_scalar(self) -> Any:
        return self.payload if self.kind is InputValueKind.SCALAR else None

    def as_token(self) -> Optional[ScalarToken]:
        return self.payload if self.kind is InputValueKind.TOKEN else None

    def as_enum_value(self) -> Optional[str]:
        return self.payload if self.kind is InputValueKind.ENUM else None

    def as_string_value(self) -> Optional[str]:
        scalar = self.as_scalar()
        if scalar is not None:
            return scalar.as_string()
        token = self.as_token()
        if token is not None and token.kind == "string":
            return token.text
        return None

    def as_boolean_value(self) -> Optional[bool]:
        scalar = self.as_scalar()
        if scalar is not None:
            return scalar.as_boolean()
        token = self.as_token()
        if token is not None and token.kind == "boolean":
            return token.text == "true"
        return None

    def as_list_value(self) -> Optional[tuple["InputValue", ...]]:
        return self.payload if self.kind is InputValueKind.LIST else None

    def as_object_value(self) -> Optional[tuple[tuple[str, "InputValue"], ...]]:
        return self.payload if self.kind is InputValueKind.OBJECT else None

    def to_object_value(self) -> Optional[dict[str, "InputValue"]]:
        fields = self.as_object_value()
        return dict(fields) if fields is not None else None

    # --- variables ---

    def into_const(self, variables: Mapping[str, "InputValue"]) -> "InputValue":
        """Substitute every variable reference; unbound variables become null."""
        if self.kind is InputValueKind.VARIABLE:
            return variables.get(self.payload, InputValue.null(self.position))
        if self.kind is InputValueKind.LIST:
            return InputValue(
                InputValueKind.LIST,
                tuple(item.into_const(variables) for item in self.payload),
                self.position,
            )
        if self.kind is InputValueKind.OBJECT:
            return InputValue(
                InputValueKind.OBJECT,
                tuple((key, item.into_const(variables)) for key, item in self.payload),
                self.position,
            )
        return self

    def referenced_variables(self) -> list[str]:
        if self.kind is InputValueKind.VARIABLE:
            return [self.payload]
        if self.kind is InputValueKind.LIST:
            return [name for item in self.payload for name in item.referenced_variables()]
        if self.kind is InputValueKind.OBJECT:
            return [name for _, item in self.payload for name in item.referenced_variables()]
        return []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InputValue):
            return NotImplemented
        return self.kind is other.kind and self.payload == other.payload

    def __hash__(self) -> int:
        return hash((self.kind, self.payload))

    def __repr__(self) -> str:
        return f"InputValue.{self.kind.value}({self.payload!r})"


# =============================================================================
# Selections and definitions
# =============================================================================


@dataclass(frozen=True)
class Directive:
    name: str
    arguments: tuple[tuple[str, InputValue], ...] = ()
    position: SourcePosition = field(default_factory=SourcePosition)

    def argument(self, name: str) -> Optional[InputValue]:
        for arg_name, value in self.arguments:
            if arg_name == name:
                return value
        return None


@dataclass(frozen=True)
class Field:
    """A field selection: `alias: name(arguments) @directives { selection_set }`."""
    name: str
    alias: Optional[str] = None
    arguments: tuple[tuple[str, InputValue], ...] = ()
    directives: tuple[Directive, ...] = ()
    selection_set: Optional[tuple["Selection", ...]] = None
    position: SourcePosition = field(default_factory=SourcePosition)

    @property
    def response_key(self) -> str:
        return self.alias or self.name


@dataclass(frozen=True)
class FragmentSpread:
    name: str
    directives: tuple[Directive, ...] = ()
    position: SourcePosition = field(default_factory=SourcePosition)


@dataclass(frozen=True)
class InlineFragment:
    selection_set: tuple["Selection", ...]
    type_condition: Optional[str] = None
    directives: tuple[Directive, ...] = ()
    position: SourcePosition = field(default_factory=SourcePosition)


Selection = Union[Field, FragmentSpread, InlineFragment]


@dataclass(frozen=True)
class FragmentDefinition:
    name: str
    type_condition: str
    selection_set: tuple[Selection, ...]
    directives: tuple[Directive, ...] = ()
    position: SourcePosition = field(default_factory=SourcePosition)


@dataclass(frozen=True)
class VariableDefinition:
    name: str
    var_type: TypeRef
    default_value: Optional[InputValue] = None
    position: SourcePosition = field(default_factory=SourcePosition)


class OperationType(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"
    SUBSCRIPTION = "subscription"


@dataclass(frozen=True)
class OperationDefinition:
    operation_type: OperationType
    selection_set: tuple[Selection, ...]
    name: Optional[str] = None
    variable_definitions: tuple[VariableDefinition, ...] = ()
    directives: tuple[Directive, ...] = ()
    position: SourcePosition = field(default_factory=SourcePosition)


@dataclass(frozen=True)
class Document:
    """A parsed query document: operations plus the fragment table."""
    operations: tuple[OperationDefinition, ...]
    fragments: Mapping[str, FragmentDefinition] = field(default_factory=dict)

    def fragment_by_name(self, name: str) -> Optional[FragmentDefinition]:
        return self.fragments.get(name)

    def operation(self, name: Optional[str] = None) -> Optional[OperationDefinition]:
        """Find an operation by name; without a name, the only operation (if exactly one)."""
        if name is None:
            return self.operations[0] if len(self.operations) == 1 else None
        return next((op for op in self.operations if op.name == name), None)

    def __iter__(self) -> Iterator[OperationDefinition]:
        return iter(self.operations)
