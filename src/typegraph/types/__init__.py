"""
Types module - capability contracts, scalars and declarative schema types.
"""

from __future__ import annotations

from .base import (
    Arguments,
    GraphQLType,
    GraphQLValue,
    plan_selection_set,
    resolve_selection_set_into,
)
from .async_await import GraphQLValueAsync, resolve_selection_set_into_async
from .pointers import Borrowed, Delegating, Owned, Shared
from .scalars import BUILTIN_SCALARS, ID, UUID, Boolean, Float, Int, ScalarDefinition, String, define_scalar
from .definitions import (
    AbstractType,
    Arg,
    EnumType,
    FieldDefinition,
    InputObjectType,
    InterfaceType,
    ObjectType,
    UnionType,
    complete_value,
    complete_value_async,
    field,
    instance_resolver,
)

__all__ = [
    # Capabilities
    "Arguments",
    "GraphQLType",
    "GraphQLValue",
    "GraphQLValueAsync",
    "plan_selection_set",
    "resolve_selection_set_into",
    "resolve_selection_set_into_async",
    # Ownership adapters
    "Delegating",
    "Owned",
    "Shared",
    "Borrowed",
    # Scalars
    "ScalarDefinition",
    "define_scalar",
    "Int",
    "Float",
    "String",
    "Boolean",
    "ID",
    "UUID",
    "BUILTIN_SCALARS",
    # Declarative types
    "Arg",
    "FieldDefinition",
    "field",
    "instance_resolver",
    "ObjectType",
    "AbstractType",
    "InterfaceType",
    "UnionType",
    "EnumType",
    "InputObjectType",
    "complete_value",
    "complete_value_async",
]
