"""
Root node - root values plus the schema built from their types.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ..core.ast import OperationType
from ..core.errors import OperationError
from ..value import DefaultScalarValue, ScalarValue
from .model import Schema
from .registry import Registry

logger = logging.getLogger(__name__)


class RootNode:
    """
    Query (and optional mutation) root values and their schema.

    Usage:
        root = RootNode(Query(), Mutation(), types=[Human, Droid])
        data, errors = execute("{ hero { name } }", root)

    `types` lists types that are only reachable by name (for example the
    implementers of an interface that no field returns directly).
    """

    def __init__(
        self,
        query: Any,
        mutation: Any = None,
        *,
        info: Any = None,
        types: Iterable[Any] = (),
        scalar_type: type[ScalarValue] = DefaultScalarValue,
    ):
        self.query = query
        self.mutation = mutation
        self.info = info

        registry = Registry(scalar_type)
        query_name = registry.get_type(type(query), info).innermost_name
        mutation_name = None
        if mutation is not None:
            mutation_name = registry.get_type(type(mutation), info).innermost_name
        for graphql_type in types:
            registry.type_ref(graphql_type, info)

        self.schema: Schema = registry.build_schema(query_name, mutation_name)
        logger.info(
            f"Built schema with {len(self.schema.types)} types "
            f"(query={query_name}, mutation={mutation_name})"
        )

    def root_for(self, operation_type: OperationType) -> Any:
        """Return the root value an operation of the given type runs against."""
        if operation_type is OperationType.QUERY:
            return self.query
        if operation_type is OperationType.MUTATION:
            if self.mutation is None:
                raise OperationError("Schema is not configured for mutations")
            return self.mutation
        raise OperationError(f"Operation type '{operation_type.value}' is not supported")

    def __repr__(self) -> str:
        return f"RootNode({self.schema!r})"
