"""
Declarative schema types.

Subclasses of these bases implement the capability contracts from their
declarations, so a schema can be written as plain classes:

    class Character(InterfaceType):
        id = field("ID!")
        name = field("String")

        @instance_resolver(Human)
        def as_human(self, context):
            return self.value if isinstance(self.value, Human) else None

    class Human(ObjectType):
        interfaces = (Character,)

        id = field("ID!")
        name = field("String")

        def __init__(self, id, name):
            self.id = id
            self.name = name

        @field(ListOf(Character), args={"first": Arg("Int", default=10)})
        async def friends(self, executor, first):
            return await load_friends(self.id, limit=first)

Field names default to the camelCase form of the attribute name; resolver
keyword arguments are the snake_case form of the argument names. Resolvers
receive the executor (for the context) and may be plain or async functions.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Optional

from ..core.ast import Selection, TypeRef
from ..core.errors import (
    FieldError,
    FieldNotFoundError,
    InstanceResolutionError,
    SchemaConsistencyError,
    SchemaError,
    UnimplementedCapabilityError,
)
from ..core.utils import to_camel_case, to_snake_case
from ..runtime.context import WithContext
from ..schema.meta import UNSET, EnumMeta, EnumValueMeta, FieldMeta, MetaType, ScalarMeta
from ..value import Value
from .async_await import GraphQLValueAsync
from .base import Arguments, GraphQLType, call_resolver

if TYPE_CHECKING:
    from ..runtime.executor import Executor
    from ..schema.registry import Registry

logger = logging.getLogger(__name__)


def _declared_name(cls: type) -> str:
    return cls.__dict__.get("graphql_name") or cls.__name__


def _declared_description(cls: type) -> Optional[str]:
    description = cls.__dict__.get("graphql_description")
    if description is None and cls.__doc__:
        description = inspect.cleandoc(cls.__doc__)
    return description


# =============================================================================
# Fields and arguments
# =============================================================================


@dataclass(frozen=True)
class Arg:
    """Argument or input field declaration."""
    type_spec: Any
    default: Any = UNSET
    description: Optional[str] = None
    name: Optional[str] = None


class FieldDefinition:
    """
    Output field declaration.

    Without a resolver the field reads the instance attribute of the same
    name; with one (decorator form) the resolver is called as
    resolver(self, executor, **arguments).
    """

    def __init__(
        self,
        type_spec: Any,
        *,
        name: Optional[str] = None,
        args: Optional[Mapping[str, Arg]] = None,
        description: Optional[str] = None,
        deprecated: Any = None,
    ):
        self.type_spec = type_spec
        self.name = name
        self.args: dict[str, Arg] = dict(args or {})
        self.description = description
        self.deprecated = deprecated
        self.resolver: Optional[Callable[..., Any]] = None
        self.attr_name: Optional[str] = None

    def __call__(self, resolver: Callable[..., Any]) -> "FieldDefinition":
        if self.resolver is not None:
            raise TypeError(f"Field '{self.name or self.attr_name}' already has a resolver")
        self.resolver = resolver
        if self.description is None:
            self.description = inspect.getdoc(resolver)
        return self

    def __set_name__(self, owner: type, attr_name: str) -> None:
        self.attr_name = attr_name
        if self.name is None:
            self.name = to_camel_case(attr_name)

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        if self.resolver is not None:
            return self.resolver.__get__(instance, owner)
        raise AttributeError(self.attr_name)

    @property
    def deprecation_reason(self) -> Optional[str]:
        if isinstance(self.deprecated, str):
            return self.deprecated
        return "No longer supported" if self.deprecated else None

    def field_meta(self, registry: "Registry", info: Any) -> FieldMeta:
        arguments = [
            registry.arg(name, arg.type_spec, info, default=arg.default, description=arg.description)
            for name, arg in self.args.items()
        ]
        return registry.field(
            self.name,
            self.type_spec,
            info,
            arguments=arguments,
            description=self.description,
            deprecation_reason=self.deprecation_reason,
        )

    def _invoke(self, instance: Any, arguments: Arguments, executor: "Executor") -> Any:
        if self.resolver is None:
            return getattr(instance, self.attr_name, None)
        kwargs = {to_snake_case(name): value for name, value in arguments.items()}
        return self.resolver(instance, executor, **kwargs)

    def resolve(
        self,
        instance: Any,
        field_meta: FieldMeta,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        result = self._invoke(instance, arguments, executor)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise UnimplementedCapabilityError(
                f"Field {type(instance).__name__}.{self.name} is asynchronous and cannot be resolved synchronously"
            )
        _check_not_null(instance, field_meta, result)
        return complete_value(executor, field_meta.field_type, result)

    async def resolve_async(
        self,
        instance: Any,
        field_meta: FieldMeta,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        result = self._invoke(instance, arguments, executor)
        if inspect.isawaitable(result):
            result = await result
        _check_not_null(instance, field_meta, result)
        return await complete_value_async(executor, field_meta.field_type, result)

    def __repr__(self) -> str:
        return f"FieldDefinition({self.name!r}, {self.type_spec!r})"


def field(
    type_spec: Any,
    *,
    name: Optional[str] = None,
    args: Optional[Mapping[str, Arg]] = None,
    description: Optional[str] = None,
    deprecated: Any = None,
) -> FieldDefinition:
    """
    Declare an output field, either as an attribute or as a resolver decorator.

        name = field("String")

        @field("Int!", args={"by": Arg("Int", default=1)})
        def next_value(self, executor, by): ...
    """
    return FieldDefinition(type_spec, name=name, args=args, description=description, deprecated=deprecated)


def _collect_fields(cls: type) -> dict[str, FieldDefinition]:
    fields: dict[str, FieldDefinition] = {}
    for klass in reversed(cls.__mro__):
        for value in vars(klass).values():
            if isinstance(value, FieldDefinition):
                fields[value.name] = value
    return fields


def _field_metas(cls: Any, registry: "Registry", info: Any) -> list[FieldMeta]:
    return [definition.field_meta(registry, info) for definition in cls._graphql_fields.values()]


# =============================================================================
# Completion
# =============================================================================


def _check_not_null(instance: Any, field_meta: FieldMeta, result: Any) -> None:
    if result is None and field_meta.field_type.is_non_null:
        raise FieldError(
            f"Cannot return null for non-nullable field {instance.type_name(None)}.{field_meta.name}"
        )


def _leaf_or_composite(executor: "Executor", type_ref: TypeRef) -> MetaType:
    meta = executor.schema.type_by_name(type_ref.name)
    if meta is None:
        raise SchemaConsistencyError(f"Unknown type '{type_ref.name}'")
    return meta


def _complete_leaf(executor: "Executor", meta: MetaType, value: Any) -> Value:
    if isinstance(meta, ScalarMeta):
        return meta.definition.resolve(value, executor.schema.scalar_type)
    return Value.scalar(executor.schema.scalar_type("string", meta.serialize(value)))


def _list_items(value: Any) -> list[Any]:
    if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise FieldError(f"Expected a list value, got {type(value).__name__}")
    return list(value)


def _finish_list(item_type: TypeRef, completed: list[Optional[Value]]) -> Value:
    items = []
    for item in completed:
        if item is None or item.is_null():
            if item_type.is_non_null:
                return Value.null()
            item = Value.null()
        items.append(item)
    return Value.list(items)


def complete_value(executor: "Executor", type_ref: TypeRef, value: Any) -> Value:
    """
    Turn a resolver's host value into a response value of the declared type.

    Lists complete item by item under an index-extended path; a failed item
    of a non-null item type nulls the whole list.
    """
    if isinstance(value, WithContext):
        return complete_value(executor.replaced_context(value.context), type_ref, value.value)
    if value is None:
        if type_ref.is_non_null:
            raise FieldError(f"Cannot return null for non-nullable type {type_ref}")
        return Value.null()

    type_ref = type_ref.nullable()
    if type_ref.kind == "list":
        item_type = type_ref.of_type
        completed = []
        for index, item in enumerate(_list_items(value)):
            sub_executor = executor.index_sub_executor(index)
            completed.append(call_resolver(
                sub_executor,
                lambda: complete_value(sub_executor, item_type, item),
            ))
        return _finish_list(item_type, completed)

    meta = _leaf_or_composite(executor, type_ref)
    if isinstance(meta, (ScalarMeta, EnumMeta)):
        return _complete_leaf(executor, meta, value)
    return executor.resolve(None, value)


async def complete_value_async(executor: "Executor", type_ref: TypeRef, value: Any) -> Value:
    """Suspendable counterpart of complete_value; list items complete concurrently."""
    if isinstance(value, WithContext):
        return await complete_value_async(executor.replaced_context(value.context), type_ref, value.value)
    if value is None:
        if type_ref.is_non_null:
            raise FieldError(f"Cannot return null for non-nullable type {type_ref}")
        return Value.null()

    type_ref = type_ref.nullable()
    if type_ref.kind == "list":
        item_type = type_ref.of_type
        items = _list_items(value)

        async def complete_item(index: int, item: Any) -> Optional[Value]:
            sub_executor = executor.index_sub_executor(index)
            try:
                return await complete_value_async(sub_executor, item_type, item)
            except SchemaError:
                raise
            except Exception as e:
                sub_executor.push_error(e)
                return None

        if not executor.config.concurrent_fields:
            completed = [await complete_item(i, item) for i, item in enumerate(items)]
            return _finish_list(item_type, completed)

        tasks = [asyncio.ensure_future(complete_item(i, item)) for i, item in enumerate(items)]
        try:
            completed = await asyncio.gather(*tasks)
        finally:
            # Items still running after a fatal error are cancelled.
            for task in tasks:
                if not task.done():
                    task.cancel()
        return _finish_list(item_type, list(completed))

    meta = _leaf_or_composite(executor, type_ref)
    if isinstance(meta, (ScalarMeta, EnumMeta)):
        return _complete_leaf(executor, meta, value)
    return await executor.resolve_async(None, value)


# =============================================================================
# Object types
# =============================================================================


class ObjectType(GraphQLValueAsync):
    """
    Object type whose fields are declared with field().

    Class attributes:
        graphql_name: schema name (defaults to the class name)
        graphql_description: description (defaults to the docstring)
        interfaces: interfaces the type implements
    """

    graphql_name: ClassVar[Optional[str]] = None
    graphql_description: ClassVar[Optional[str]] = None
    interfaces: ClassVar[tuple[Any, ...]] = ()

    _graphql_fields: ClassVar[dict[str, FieldDefinition]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._graphql_fields = _collect_fields(cls)

    @classmethod
    def graphql_type_name(cls, info: Any = None) -> str:
        return _declared_name(cls)

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> MetaType:
        return registry.build_object_type(
            cls,
            info,
            _field_metas(cls, registry, info),
            interfaces=cls.interfaces,
            description=_declared_description(cls),
        )

    def _field(self, info: Any, field_name: str, executor: "Executor") -> tuple[FieldDefinition, FieldMeta]:
        type_name = self.type_name(info)
        definition = self._graphql_fields.get(field_name)
        meta = executor.schema.type_by_name(type_name)
        field_meta = meta.field_by_name(field_name) if meta is not None else None
        if definition is None or field_meta is None:
            raise FieldNotFoundError(field_name, type_name)
        return definition, field_meta

    def resolve_field(self, info: Any, field_name: str, arguments: Arguments, executor: "Executor") -> Value:
        definition, field_meta = self._field(info, field_name, executor)
        logger.debug(f"Resolving {self.type_name(info)}.{field_name}")
        return definition.resolve(self, field_meta, arguments, executor)

    async def resolve_field_async(
        self,
        info: Any,
        field_name: str,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        definition, field_meta = self._field(info, field_name, executor)
        logger.debug(f"Resolving {self.type_name(info)}.{field_name}")
        return await definition.resolve_async(self, field_meta, arguments, executor)


# =============================================================================
# Interfaces and unions
# =============================================================================


def instance_resolver(type_spec: Any) -> Callable[[Callable], Callable]:
    """
    Mark a method as the accessor for one concrete type of an interface/union.

    The accessor is called as accessor(self, context) and returns the value
    to resolve as that type, or None if the instance is not of that type.
    Accessors are tried in declaration order.
    """
    def decorator(accessor: Callable) -> Callable:
        accessor._instance_resolver_for = type_spec
        return accessor
    return decorator


def _spec_type_name(spec: Any, info: Any) -> str:
    if isinstance(spec, str):
        return spec
    return spec.graphql_type_name(info)


class AbstractType(GraphQLValueAsync):
    """Common base of InterfaceType and UnionType: wraps a value and resolves its concrete type."""

    graphql_name: ClassVar[Optional[str]] = None
    graphql_description: ClassVar[Optional[str]] = None

    _instance_resolvers: ClassVar[tuple[tuple[Any, Callable], ...]] = ()

    def __init__(self, value: Any):
        self.value = value

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        accessors: dict[str, tuple[Any, Callable]] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                spec = getattr(value, "_instance_resolver_for", None)
                if spec is not None:
                    accessors[attr] = (spec, value)
        cls._instance_resolvers = tuple(accessors.values())

    @classmethod
    def graphql_type_name(cls, info: Any = None) -> str:
        return _declared_name(cls)

    @classmethod
    def _possible_specs(cls) -> list[Any]:
        return [spec for spec, _ in cls._instance_resolvers]

    def concrete_type_name(self, context: Any, info: Any) -> str:
        for spec, accessor in self._instance_resolvers:
            if accessor(self, context) is not None:
                return _spec_type_name(spec, info)
        raise InstanceResolutionError(self.type_name(info))

    def _downcast(self, info: Any, type_name: str, context: Any) -> Any:
        for spec, accessor in self._instance_resolvers:
            if _spec_type_name(spec, info) == type_name:
                return accessor(self, context)
        raise InstanceResolutionError(self.type_name(info), requested=type_name)

    def resolve_into_type(
        self,
        info: Any,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        value = self._downcast(info, type_name, executor.context)
        return executor.type_sub_executor(type_name, selection_set).resolve(None, value)

    async def resolve_into_type_async(
        self,
        info: Any,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        value = self._downcast(info, type_name, executor.context)
        return await executor.type_sub_executor(type_name, selection_set).resolve_async(None, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class InterfaceType(AbstractType):
    """
    Interface wrapper.

    Fields are declared like object fields; they describe the interface and
    are always resolved by the concrete value the instance resolvers pick.
    """

    _graphql_fields: ClassVar[dict[str, FieldDefinition]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._graphql_fields = _collect_fields(cls)

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> MetaType:
        return registry.build_interface_type(
            cls,
            info,
            _field_metas(cls, registry, info),
            possible_types=cls._possible_specs(),
            description=_declared_description(cls),
        )

    def _concrete(self, info: Any, executor: "Executor") -> tuple[Any, "Executor"]:
        concrete_name = self.concrete_type_name(executor.context, info)
        value = self._downcast(info, concrete_name, executor.context)
        if isinstance(value, WithContext):
            return value.value, executor.replaced_context(value.context)
        return value, executor

    def resolve_field(self, info: Any, field_name: str, arguments: Arguments, executor: "Executor") -> Value:
        value, executor = self._concrete(info, executor)
        return value.resolve_field(None, field_name, arguments, executor)

    async def resolve_field_async(
        self,
        info: Any,
        field_name: str,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        value, executor = self._concrete(info, executor)
        return await value.resolve_field_async(None, field_name, arguments, executor)


class UnionType(AbstractType):
    """Union wrapper; members are the types named by the instance resolvers."""

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> MetaType:
        return registry.build_union_type(
            cls,
            info,
            cls._possible_specs(),
            description=_declared_description(cls),
        )


# =============================================================================
# Enums and input objects
# =============================================================================


class EnumType(GraphQLType):
    """
    Enum type built from a Python Enum or a name -> value mapping.

        class Episode(EnumType):
            enum = PyEpisode

    Resolvers return the host value (enum member); arguments receive it.
    """

    graphql_name: ClassVar[Optional[str]] = None
    graphql_description: ClassVar[Optional[str]] = None
    enum: ClassVar[Optional[type[Enum]]] = None
    values: ClassVar[Optional[Mapping[str, Any]]] = None

    @classmethod
    def graphql_type_name(cls, info: Any = None) -> str:
        return _declared_name(cls)

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> MetaType:
        if cls.enum is not None:
            values = [EnumValueMeta(member.name, member) for member in cls.enum]
        elif cls.values:
            values = [EnumValueMeta(name, value) for name, value in cls.values.items()]
        else:
            raise SchemaError(f"Enum {cls.__name__} declares no values")
        return registry.build_enum_type(cls, info, values, description=_declared_description(cls))


class InputObjectType(GraphQLType):
    """
    Input object type; input fields are declared with Arg attributes.

        class ReviewInput(InputObjectType):
            stars = Arg("Int!")
            commentary = Arg("String")

    Coerced arguments of this type arrive as instances with snake_case
    attributes; absent optional fields are None.
    """

    graphql_name: ClassVar[Optional[str]] = None
    graphql_description: ClassVar[Optional[str]] = None

    _input_fields: ClassVar[dict[str, tuple[str, Arg]]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        fields: dict[str, tuple[str, Arg]] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if isinstance(value, Arg):
                    fields[value.name or to_camel_case(attr)] = (attr, value)
        cls._input_fields = fields

    def __init__(self, **values: Any):
        for attr, _ in self._input_fields.values():
            setattr(self, attr, values.get(attr))

    @classmethod
    def from_input(cls, data: Mapping[str, Any]) -> "InputObjectType":
        return cls(**{
            attr: data[name]
            for name, (attr, _) in cls._input_fields.items()
            if name in data
        })

    @classmethod
    def graphql_type_name(cls, info: Any = None) -> str:
        return _declared_name(cls)

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> MetaType:
        input_fields = [
            registry.arg(name, arg.type_spec, info, default=arg.default, description=arg.description)
            for name, (_, arg) in cls._input_fields.items()
        ]
        return registry.build_input_object_type(
            cls,
            info,
            input_fields,
            construct=cls.from_input,
            description=_declared_description(cls),
        )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return all(
            getattr(self, attr) == getattr(other, attr)
            for attr, _ in self._input_fields.values()
        )

    def __repr__(self) -> str:
        values = ", ".join(
            f"{attr}={getattr(self, attr)!r}" for attr, _ in self._input_fields.values()
        )
        return f"{type(self).__name__}({values})"
