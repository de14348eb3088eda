"""
Schema model - the immutable type table consulted during execution.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from ..value import DefaultScalarValue, ScalarValue
from .meta import MetaType, TypeKind


class Schema:
    """
    Immutable, by-name type table.

    Built once by Registry.build_schema() and shared read-only by every
    query executed against it.
    """

    def __init__(
        self,
        types: Mapping[str, MetaType],
        query_type_name: str,
        mutation_type_name: Optional[str] = None,
        scalar_type: type[ScalarValue] = DefaultScalarValue,
    ):
        self._types: Mapping[str, MetaType] = MappingProxyType(dict(types))
        self._query_type_name = query_type_name
        self._mutation_type_name = mutation_type_name
        self._scalar_type = scalar_type
        self._possible_types: Mapping[str, tuple[str, ...]] = MappingProxyType({
            name: tuple(meta.possible_types)
            for name, meta in self._types.items()
            if meta.kind.is_abstract
        })

    @property
    def types(self) -> Mapping[str, MetaType]:
        return self._types

    @property
    def scalar_type(self) -> type[ScalarValue]:
        return self._scalar_type

    @property
    def query_type(self) -> MetaType:
        return self._types[self._query_type_name]

    @property
    def mutation_type(self) -> Optional[MetaType]:
        if self._mutation_type_name is None:
            return None
        return self._types[self._mutation_type_name]

    def type_by_name(self, name: str) -> Optional[MetaType]:
        return self._types.get(name)

    def concrete_type_by_name(self, name: str) -> Optional[MetaType]:
        """Find a type that can hold field metadata (object or interface)."""
        meta = self._types.get(name)
        if meta is None or meta.kind not in (TypeKind.OBJECT, TypeKind.INTERFACE):
            return None
        return meta

    def possible_types(self, name: str) -> tuple[str, ...]:
        return self._possible_types.get(name, ())

    def is_possible_type(self, abstract_name: str, concrete_name: str) -> bool:
        return concrete_name in self._possible_types.get(abstract_name, ())

    def type_condition_applies(self, condition: str, type_name: str) -> bool:
        """Whether a fragment on `condition` applies to a value of type `type_name`."""
        return condition == type_name or self.is_possible_type(condition, type_name)

    def __repr__(self) -> str:
        return f"Schema(query={self._query_type_name!r}, types={len(self._types)})"
