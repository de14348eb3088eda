"""
Type registry - collects static metadata from type definitions.

Every type exposes its name and builds its own MetaType; the registry calls
each type's builder once and follows the types it references.

Usage:
    from typegraph.schema.registry import Registry

    registry = Registry()
    registry.get_type(Query)
    registry.get_type(Human)   # types only reachable by name
    schema = registry.build_schema("Query")
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional

from ..core.ast import InputValue, TypeRef
from ..core.errors import DocumentError, SchemaError
from ..types.scalars import BUILTIN_SCALARS, ScalarDefinition
from ..value import DefaultScalarValue, ScalarValue
from .meta import (
    UNSET,
    ArgumentMeta,
    EnumMeta,
    EnumValueMeta,
    FieldMeta,
    InputObjectMeta,
    InterfaceMeta,
    ListOf,
    MetaType,
    NonNull,
    ObjectMeta,
    PlaceholderMeta,
    ScalarMeta,
    UnionMeta,
)
from .model import Schema

logger = logging.getLogger(__name__)


def _info_key(info: Any) -> Any:
    try:
        hash(info)
    except TypeError:
        return ("id", id(info))
    return info


class Registry:
    """
    Collects MetaTypes by name.

    Two distinct types claiming the same name is a fatal SchemaError.
    Ownership adapters (Owned[T], Shared[T], ...) count as the type they wrap.
    """

    def __init__(self, scalar_type: type[ScalarValue] = DefaultScalarValue):
        self.scalar_type = scalar_type
        self.types: dict[str, MetaType] = {}
        self._origins: dict[str, Any] = {}
        self._seen: set[tuple[Any, Any]] = set()
        self._referenced: set[str] = set()

    # =========================================================================
    # Registration
    # =========================================================================

    def get_type(self, graphql_type: Any, info: Any = None) -> TypeRef:
        """
        Register a type (and everything it references) and return a reference to it.

        The type's graphql_meta() runs once per distinct (type, info) pair.
        """
        if isinstance(graphql_type, ScalarDefinition):
            return self.get_scalar(graphql_type)

        origin = graphql_type.origin_type()
        name = graphql_type.graphql_type_name(info)
        if not name:
            raise SchemaError(f"Type {origin!r} does not expose a name")

        self._claim(name, origin)
        key = (origin, _info_key(info))
        if key in self._seen or name in self.types:
            return TypeRef.named(name)

        self._seen.add(key)
        self.types[name] = PlaceholderMeta(name)
        logger.debug(f"Registering type {name}")

        meta = graphql_type.graphql_meta(info, self)
        if meta.name != name:
            raise SchemaError(f"Type {origin!r} registered as '{name}' but built meta for '{meta.name}'")
        self.types[name] = meta
        return TypeRef.named(name)

    def get_scalar(self, definition: ScalarDefinition) -> TypeRef:
        self._claim(definition.name, definition)
        if definition.name not in self.types:
            logger.debug(f"Registering scalar {definition.name}")
            self.types[definition.name] = ScalarMeta(
                name=definition.name,
                description=definition.description,
                definition=definition,
            )
        return TypeRef.named(definition.name)

    def _claim(self, name: str, origin: Any) -> None:
        existing = self._origins.get(name)
        if existing is None:
            self._origins[name] = origin
        elif existing is not origin:
            raise SchemaError(
                f"Type name '{name}' is claimed by two distinct types: {existing!r} and {origin!r}"
            )

    def type_ref(self, spec: Any, info: Any = None) -> TypeRef:
        """
        Resolve a type spec into a TypeRef, registering what it names.

        Accepted specs: "[Human!]!"-style strings, TypeRef, type classes,
        ScalarDefinition, ListOf(spec), NonNull(spec) and [spec].
        """
        if isinstance(spec, NonNull):
            return self.type_ref(spec.of_type, info).non_null()
        if isinstance(spec, ListOf):
            return self.type_ref(spec.of_type, info).list_of()
        if isinstance(spec, list):
            if len(spec) != 1:
                raise SchemaError(f"List type spec must hold exactly one item: {spec!r}")
            return self.type_ref(spec[0], info).list_of()
        if isinstance(spec, str):
            try:
                spec = TypeRef.parse(spec)
            except DocumentError as e:
                raise SchemaError(str(e)) from e
        if isinstance(spec, TypeRef):
            self._reference(spec.innermost_name)
            return spec
        if isinstance(spec, ScalarDefinition):
            return self.get_scalar(spec)
        if hasattr(spec, "graphql_meta") and hasattr(spec, "graphql_type_name"):
            return self.get_type(spec, info)
        raise SchemaError(f"Unsupported type spec: {spec!r}")

    def _reference(self, name: str) -> None:
        if name in BUILTIN_SCALARS and name not in self.types:
            self.get_scalar(BUILTIN_SCALARS[name])
        else:
            self._referenced.add(name)

    # =========================================================================
    # Builders
    # =========================================================================

    def field(
        self,
        name: str,
        spec: Any,
        info: Any = None,
        *,
        arguments: Iterable[ArgumentMeta] = (),
        description: Optional[str] = None,
        deprecation_reason: Optional[str] = None,
    ) -> FieldMeta:
        return FieldMeta(
            name=name,
            field_type=self.type_ref(spec, info),
            arguments=tuple(arguments),
            description=description,
            deprecation_reason=deprecation_reason,
        )

    def arg(
        self,
        name: str,
        spec: Any,
        info: Any = None,
        *,
        default: Any = UNSET,
        description: Optional[str] = None,
    ) -> ArgumentMeta:
        default_value = None
        if default is not UNSET:
            default_value = InputValue.from_host(default, self.scalar_type)
        return ArgumentMeta(
            name=name,
            arg_type=self.type_ref(spec, info),
            default_value=default_value,
            description=description,
        )

    def build_object_type(
        self,
        graphql_type: Any,
        info: Any,
        fields: Iterable[FieldMeta],
        *,
        interfaces: Iterable[Any] = (),
        description: Optional[str] = None,
    ) -> ObjectMeta:
        return ObjectMeta(
            name=graphql_type.graphql_type_name(info),
            description=description,
            fields=tuple(fields),
            interface_names=tuple(self.type_ref(i, info).innermost_name for i in interfaces),
        )

    def build_interface_type(
        self,
        graphql_type: Any,
        info: Any,
        fields: Iterable[FieldMeta],
        *,
        possible_types: Iterable[Any] = (),
        description: Optional[str] = None,
    ) -> InterfaceMeta:
        return InterfaceMeta(
            name=graphql_type.graphql_type_name(info),
            description=description,
            fields=tuple(fields),
            possible_types=tuple(self.type_ref(t, info).innermost_name for t in possible_types),
        )

    def build_union_type(
        self,
        graphql_type: Any,
        info: Any,
        members: Iterable[Any],
        *,
        description: Optional[str] = None,
    ) -> UnionMeta:
        return UnionMeta(
            name=graphql_type.graphql_type_name(info),
            description=description,
            of_type_names=tuple(self.type_ref(m, info).innermost_name for m in members),
        )

    def build_enum_type(
        self,
        graphql_type: Any,
        info: Any,
        values: Iterable[EnumValueMeta],
        *,
        description: Optional[str] = None,
    ) -> EnumMeta:
        return EnumMeta(
            name=graphql_type.graphql_type_name(info),
            description=description,
            values=tuple(values),
        )

    def build_input_object_type(
        self,
        graphql_type: Any,
        info: Any,
        input_fields: Iterable[ArgumentMeta],
        *,
        construct: Optional[Callable[[dict[str, Any]], Any]] = None,
        description: Optional[str] = None,
    ) -> InputObjectMeta:
        return InputObjectMeta(
            name=graphql_type.graphql_type_name(info),
            description=description,
            input_fields=tuple(input_fields),
            construct=construct,
        )

    # =========================================================================
    # Schema
    # =========================================================================

    def build_schema(self, query_type_name: str, mutation_type_name: Optional[str] = None) -> Schema:
        """
        Freeze the collected types into a Schema.

        Checks that every referenced name exists and computes the possible
        types of each interface from the objects implementing it.
        """
        placeholders = [name for name, meta in self.types.items() if isinstance(meta, PlaceholderMeta)]
        if placeholders:
            raise SchemaError(f"Types never finished building: {placeholders}")

        missing = sorted(name for name in self._referenced if name not in self.types)
        if missing:
            raise SchemaError(f"Unknown types referenced: {missing}")

        for root in (query_type_name, mutation_type_name):
            if root is not None and not isinstance(self.types.get(root), ObjectMeta):
                raise SchemaError(f"Root type '{root}' must be a registered object type")

        types = dict(self.types)
        implementers: dict[str, list[str]] = {}
        for name, meta in types.items():
            if isinstance(meta, ObjectMeta):
                for interface_name in meta.interface_names:
                    if not isinstance(types.get(interface_name), InterfaceMeta):
                        raise SchemaError(
                            f"Type '{name}' implements '{interface_name}', which is not an interface"
                        )
                    implementers.setdefault(interface_name, []).append(name)

        for name, meta in types.items():
            if isinstance(meta, InterfaceMeta):
                possible = list(meta.possible_types)
                possible.extend(n for n in implementers.get(name, ()) if n not in possible)
                types[name] = replace(meta, possible_types=tuple(possible))
            elif isinstance(meta, UnionMeta):
                for member in meta.of_type_names:
                    if not isinstance(types.get(member), ObjectMeta):
                        raise SchemaError(f"Union '{name}' member '{member}' is not an object type")

        logger.info(f"Built schema with {len(types)} types (query root: {query_type_name})")
        return Schema(types, query_type_name, mutation_type_name, self.scalar_type)
