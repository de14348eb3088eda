"""
Schema module - type metadata, registry and the immutable schema.
"""

from __future__ import annotations

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
    TypeKind,
    UnionMeta,
)
from .model import Schema
from .registry import Registry
from .root import RootNode

__all__ = [
    # Metadata
    "TypeKind",
    "ListOf",
    "NonNull",
    "UNSET",
    "ArgumentMeta",
    "FieldMeta",
    "EnumValueMeta",
    "MetaType",
    "ScalarMeta",
    "EnumMeta",
    "ObjectMeta",
    "InterfaceMeta",
    "UnionMeta",
    "InputObjectMeta",
    "PlaceholderMeta",
    # Schema
    "Schema",
    "Registry",
    "RootNode",
]
