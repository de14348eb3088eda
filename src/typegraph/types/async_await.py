"""
Asynchronous value resolution.

Every field of a selection set becomes one unit of work. Units are started
as asyncio tasks on the running loop (or run one after another for mutation
roots and when concurrent_fields is off) and are always drained in
declaration order, so the response keeps the order of the query no matter
which resolver finishes first.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Optional

from ..core.ast import Selection
from ..core.errors import SchemaError, UnimplementedCapabilityError
from ..value import Object, Value, merge_key_into
from .base import (
    Arguments,
    DowncastStep,
    FieldStep,
    GraphQLValue,
    MergeStep,
    PlanStep,
    TypenameStep,
    field_outcome,
    merge_fragment_value,
    plan_selection_set,
)

if TYPE_CHECKING:
    from ..runtime.executor import Executor

logger = logging.getLogger(__name__)

# (response key, value) for fields; (None, object or null) for fragments
Contribution = tuple[Optional[str], Optional[Value]]


class GraphQLValueAsync(GraphQLValue):
    """Suspendable counterpart of GraphQLValue."""

    async def resolve_field_async(
        self,
        info: Any,
        field_name: str,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        raise UnimplementedCapabilityError(
            f"{type(self).__name__} must implement resolve_field_async() to resolve field '{field_name}'"
        )

    async def resolve_into_type_async(
        self,
        info: Any,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        if self.type_name(info) == type_name:
            return await self.resolve_async(info, selection_set, executor)
        raise UnimplementedCapabilityError(
            f"{type(self).__name__} must implement resolve_into_type_async() to resolve into '{type_name}'"
        )

    async def resolve_async(
        self,
        info: Any,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        if selection_set is None:
            raise UnimplementedCapabilityError(
                f"{type(self).__name__} must implement resolve_async() to be used as a leaf value"
            )
        return await resolve_selection_set_into_async(self, info, selection_set, executor)


async def resolve_selection_set_into_async(
    instance: GraphQLValueAsync,
    info: Any,
    selection_set: tuple[Selection, ...],
    executor: "Executor",
) -> Value:
    """
    Resolve a selection set against `instance`.

    Returns an object value, or null when a non-null field came back null.
    Units still in flight when the object collapses are cancelled.
    """
    concurrent = executor.config.concurrent_fields and not executor.serial
    units: list[Any] = []
    result = Object()

    try:
        for step in plan_selection_set(instance, info, selection_set, executor):
            unit = _run_step(instance, info, step, executor)
            units.append(asyncio.ensure_future(unit) if concurrent else unit)

        for unit in units:
            key, value = await unit
            if key is None:
                if not merge_fragment_value(result, value):
                    return Value.null()
            elif value is None:
                return Value.null()
            else:
                merge_key_into(result, key, value)

        return Value.object(result)
    finally:
        for unit in units:
            if asyncio.isfuture(unit):
                if not unit.done():
                    unit.cancel()
            else:
                unit.close()


def _run_step(
    instance: GraphQLValueAsync,
    info: Any,
    step: PlanStep,
    executor: "Executor",
) -> Awaitable[Contribution]:
    if isinstance(step, TypenameStep):
        return _typename_unit(step)
    if isinstance(step, FieldStep):
        return _field_unit(instance, info, step)
    if isinstance(step, MergeStep):
        return _merge_unit(instance, info, step, executor)
    return _downcast_unit(instance, info, step, executor)


async def _typename_unit(step: TypenameStep) -> Contribution:
    return step.response_name, step.value


async def _field_unit(instance: GraphQLValueAsync, info: Any, step: FieldStep) -> Contribution:
    value = None
    if step.arguments is not None:
        try:
            value = await instance.resolve_field_async(info, step.field_name, step.arguments, step.executor)
        except SchemaError:
            raise
        except Exception as e:
            step.executor.push_error(e)
    return step.response_name, field_outcome(step.field_meta, value)


async def _merge_unit(
    instance: GraphQLValueAsync,
    info: Any,
    step: MergeStep,
    executor: "Executor",
) -> Contribution:
    return None, await resolve_selection_set_into_async(instance, info, step.selection_set, executor)


async def _downcast_unit(
    instance: GraphQLValueAsync,
    info: Any,
    step: DowncastStep,
    executor: "Executor",
) -> Contribution:
    try:
        value = await instance.resolve_into_type_async(info, step.type_name, step.selection_set, step.executor)
    except SchemaError:
        raise
    except Exception as e:
        executor.push_error_at(e, step.position)
        value = Value.object(Object())
    return None, value
