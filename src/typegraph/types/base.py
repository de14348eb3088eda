"""
Capability contracts and the synchronous selection-set algorithm.

A schema type takes part in execution by implementing:

    GraphQLType   static metadata: name, MetaType builder, origin type
    GraphQLValue  synchronous value resolution
    GraphQLValueAsync (types.async_await)  suspendable value resolution

Planning a selection set (directives, __typename, field metadata, argument
coercion, fragment type conditions) is shared by the synchronous and the
asynchronous algorithm; only the way the planned steps are driven differs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping, Optional, Union

from ..core.ast import Field, FragmentSpread, Selection, SourcePosition
from ..core.errors import (
    CoercionError,
    FieldNotFoundError,
    SchemaConsistencyError,
    SchemaError,
    UnimplementedCapabilityError,
)
from ..value import Object, Value, merge_key_into

if TYPE_CHECKING:
    from ..runtime.executor import Executor
    from ..schema.meta import FieldMeta, MetaType
    from ..schema.registry import Registry

logger = logging.getLogger(__name__)


class Arguments:
    """Coerced field arguments, keyed by argument name."""

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: dict[str, Any] = dict(values or {})

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def contains(self, name: str) -> bool:
        return name in self._values

    def items(self):
        return self._values.items()

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Arguments):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Arguments({self._values!r})"


# =============================================================================
# Capability contracts
# =============================================================================


class GraphQLType:
    """Static metadata capability."""

    @classmethod
    def graphql_type_name(cls, info: Any = None) -> Optional[str]:
        """Name of the type in the schema, or None for unnamed (wrapper) types."""
        return None

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> "MetaType":
        raise UnimplementedCapabilityError(f"{cls.__name__} does not build schema metadata")

    @classmethod
    def origin_type(cls) -> type:
        """The type that owns the schema name (wrappers report what they wrap)."""
        return cls


class GraphQLValue(GraphQLType):
    """
    Synchronous value resolution capability.

    Object-shaped types implement resolve_field; interfaces and unions
    implement concrete_type_name and resolve_into_type. Using a type in a
    role it does not implement raises UnimplementedCapabilityError.
    """

    def type_name(self, info: Any) -> Optional[str]:
        return type(self).graphql_type_name(info)

    def concrete_type_name(self, context: Any, info: Any) -> str:
        name = self.type_name(info)
        if name is None:
            raise UnimplementedCapabilityError(
                f"{type(self).__name__} must implement concrete_type_name()"
            )
        return name

    def resolve_field(
        self,
        info: Any,
        field_name: str,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        raise UnimplementedCapabilityError(
            f"{type(self).__name__} must implement resolve_field() to resolve field '{field_name}'"
        )

    def resolve_into_type(
        self,
        info: Any,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        if self.type_name(info) == type_name:
            return self.resolve(info, selection_set, executor)
        raise UnimplementedCapabilityError(
            f"{type(self).__name__} must implement resolve_into_type() to resolve into '{type_name}'"
        )

    def resolve(
        self,
        info: Any,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        if selection_set is None:
            raise UnimplementedCapabilityError(
                f"{type(self).__name__} must implement resolve() to be used as a leaf value"
            )
        result = Object()
        if resolve_selection_set_into(self, info, selection_set, executor, result):
            return Value.object(result)
        return Value.null()


# =============================================================================
# Planning
# =============================================================================


@dataclass
class TypenameStep:
    response_name: str
    value: Value


@dataclass
class FieldStep:
    response_name: str
    field_name: str
    field_meta: "FieldMeta"
    # None when argument coercion failed; the error is already recorded
    arguments: Optional[Arguments]
    executor: "Executor"


@dataclass
class MergeStep:
    selection_set: tuple[Selection, ...]


@dataclass
class DowncastStep:
    type_name: str
    selection_set: tuple[Selection, ...]
    position: SourcePosition
    executor: "Executor"


PlanStep = Union[TypenameStep, FieldStep, MergeStep, DowncastStep]


def plan_selection_set(
    instance: GraphQLValue,
    info: Any,
    selection_set: tuple[Selection, ...],
    executor: "Executor",
) -> Iterator[PlanStep]:
    """
    Turn a selection set into ordered execution steps.

    Excluded selections and fragments whose type condition does not apply
    produce no step. Nothing in here suspends.
    """
    schema = executor.schema
    type_name = instance.type_name(info)
    meta_type = schema.type_by_name(type_name) if type_name else None
    if meta_type is None or not meta_type.kind.is_composite:
        raise SchemaConsistencyError(
            f"Type '{type_name}' of {type(instance).__name__} is not a composite type of the schema"
        )

    for selection in selection_set:
        if executor.is_excluded(selection.directives):
            continue

        if isinstance(selection, Field):
            yield _plan_field(instance, info, meta_type, selection, executor)
            continue

        if isinstance(selection, FragmentSpread):
            fragment = executor.fragment_by_name(selection.name)
            condition, nested = fragment.type_condition, fragment.selection_set
        else:
            condition, nested = selection.type_condition, selection.selection_set
            if condition is None:
                yield MergeStep(nested)
                continue

        step = _plan_fragment(instance, info, meta_type, condition, nested, selection.position, executor)
        if step is not None:
            yield step


def _plan_field(
    instance: GraphQLValue,
    info: Any,
    meta_type: "MetaType",
    selection: Field,
    executor: "Executor",
) -> PlanStep:
    response_name = selection.response_key

    if selection.name == "__typename":
        name = instance.concrete_type_name(executor.context, info)
        return TypenameStep(response_name, Value.scalar(executor.schema.scalar_type("string", name)))

    field_meta = meta_type.field_by_name(selection.name)
    if field_meta is None:
        raise FieldNotFoundError(selection.name, meta_type.name)

    sub_executor = executor.field_sub_executor(
        response_name, selection.name, selection.position, selection.selection_set
    )
    try:
        arguments: Optional[Arguments] = executor.coerce_arguments(field_meta, selection.arguments)
    except CoercionError as e:
        sub_executor.push_error(e)
        arguments = None

    return FieldStep(response_name, selection.name, field_meta, arguments, sub_executor)


def _plan_fragment(
    instance: GraphQLValue,
    info: Any,
    meta_type: "MetaType",
    condition: str,
    selection_set: tuple[Selection, ...],
    position: SourcePosition,
    executor: "Executor",
) -> Optional[PlanStep]:
    schema = executor.schema
    if schema.type_condition_applies(condition, meta_type.name):
        return MergeStep(selection_set)

    if meta_type.kind.is_abstract:
        concrete = instance.concrete_type_name(executor.context, info)
        if schema.type_condition_applies(condition, concrete):
            return DowncastStep(
                concrete,
                selection_set,
                position,
                executor.type_sub_executor(concrete, selection_set),
            )

    logger.debug(f"Fragment on {condition} does not apply to {meta_type.name}")
    return None


# =============================================================================
# Merging
# =============================================================================


def field_outcome(field_meta: "FieldMeta", value: Optional[Value]) -> Optional[Value]:
    """
    Value to store under a field's response key.

    `value` is None when the resolver failed. Returns None when the enclosing
    object must collapse to null (non-null field without a value).
    """
    if value is None or value.is_null():
        if field_meta.field_type.is_non_null:
            return None
        return Value.null()
    return value


def merge_fragment_value(result: Object, value: Value) -> bool:
    """Splice a fragment's object into `result`; False if it collapsed to null."""
    fragment_object = value.as_object_value()
    if fragment_object is not None:
        for key, item in fragment_object.items():
            merge_key_into(result, key, item)
        return True
    if value.is_null():
        return False
    raise SchemaConsistencyError(f"Fragment resolution produced a non-object value: {value!r}")


def call_resolver(executor: "Executor", resolver: Callable[[], Value]) -> Optional[Value]:
    """Run a resolver, recording any non-fatal failure at the executor's position."""
    try:
        return resolver()
    except SchemaError:
        raise
    except Exception as e:
        executor.push_error(e)
        return None


# =============================================================================
# Synchronous algorithm
# =============================================================================


def resolve_selection_set_into(
    instance: GraphQLValue,
    info: Any,
    selection_set: tuple[Selection, ...],
    executor: "Executor",
    result: Object,
) -> bool:
    """
    Resolve a selection set against `instance`, merging keys into `result`.

    Returns False when a non-null field came back null, in which case the
    whole object must be replaced by null.
    """
    for step in plan_selection_set(instance, info, selection_set, executor):
        if isinstance(step, TypenameStep):
            merge_key_into(result, step.response_name, step.value)

        elif isinstance(step, FieldStep):
            value = None
            if step.arguments is not None:
                value = call_resolver(
                    step.executor,
                    lambda: instance.resolve_field(info, step.field_name, step.arguments, step.executor),
                )
            value = field_outcome(step.field_meta, value)
            if value is None:
                return False
            merge_key_into(result, step.response_name, value)

        elif isinstance(step, MergeStep):
            if not resolve_selection_set_into(instance, info, step.selection_set, executor, result):
                return False

        else:
            try:
                value = instance.resolve_into_type(info, step.type_name, step.selection_set, step.executor)
            except SchemaError:
                raise
            except Exception as e:
                executor.push_error_at(e, step.position)
                continue
            if not merge_fragment_value(result, value):
                return False

    return True
