"""
Per-query executor.

Holds everything resolution needs for one query: the schema, fragment
table, coerced variables, context and the shared error sink, plus the
response path and source position errors are reported at.

Sub-executors (field_sub_executor, index_sub_executor, ...) are cheap
copies that extend the path or swap the context; all of them append to the
same ErrorSink.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Union

from ..config import EngineConfig
from ..core.ast import Directive, FragmentDefinition, InputValue, Selection, SourcePosition
from ..core.errors import (
    ExecutionError,
    FieldError,
    SchemaConsistencyError,
    SourceLocation,
    UnimplementedCapabilityError,
)
from ..types.async_await import GraphQLValueAsync
from ..types.base import Arguments, GraphQLValue
from ..value import Value
from .coercion import coerce_argument_values, is_excluded
from .context import WithContext

if TYPE_CHECKING:
    from ..schema.meta import FieldMeta
    from ..schema.model import Schema

logger = logging.getLogger(__name__)

PathSegment = Union[str, int]


class ErrorSink:
    """Append-only error list shared by an executor and all its sub-executors."""

    def __init__(self):
        self._errors: list[ExecutionError] = []

    def push(self, error: ExecutionError) -> None:
        self._errors.append(error)

    def errors(self, sort: bool = True) -> list[ExecutionError]:
        """Recorded errors, ordered by (location, path, message) when sort is set."""
        if sort:
            return sorted(self._errors, key=lambda e: e.sort_key())
        return list(self._errors)

    def __len__(self) -> int:
        return len(self._errors)


class Executor:
    """
    Resolution state for one query.

    Usage:
        executor = Executor(schema, fragments=document.fragments, variables=variables,
                            context=context, selection_set=operation.selection_set)
        value = executor.resolve(None, root)
        errors = executor.errors()
    """

    def __init__(
        self,
        schema: "Schema",
        *,
        fragments: Optional[Mapping[str, FragmentDefinition]] = None,
        variables: Optional[Mapping[str, InputValue]] = None,
        context: Any = None,
        errors: Optional[ErrorSink] = None,
        config: Optional[EngineConfig] = None,
        path: tuple[PathSegment, ...] = (),
        location: Optional[SourcePosition] = None,
        selection_set: Optional[tuple[Selection, ...]] = None,
        serial: bool = False,
    ):
        self.schema = schema
        self.fragments: Mapping[str, FragmentDefinition] = fragments or {}
        self.variables: Mapping[str, InputValue] = variables or {}
        self.context = context
        self.error_sink = errors if errors is not None else ErrorSink()
        self.config = config or EngineConfig()
        self.path = path
        self.location = location
        self.current_selection_set = selection_set
        self.serial = serial

    def _derive(self, **changes: Any) -> "Executor":
        state = {
            "fragments": self.fragments,
            "variables": self.variables,
            "context": self.context,
            "errors": self.error_sink,
            "config": self.config,
            "path": self.path,
            "location": self.location,
            "selection_set": self.current_selection_set,
            "serial": False,
        }
        state.update(changes)
        return Executor(self.schema, **state)

    # =========================================================================
    # Sub-executors
    # =========================================================================

    def field_sub_executor(
        self,
        response_name: str,
        field_name: str,
        location: SourcePosition,
        selection_set: Optional[tuple[Selection, ...]],
    ) -> "Executor":
        """Executor for one field: path extended by its response key."""
        logger.debug(f"Planning field {field_name} at {'.'.join(map(str, self.path + (response_name,)))}")
        return self._derive(
            path=self.path + (response_name,),
            location=location,
            selection_set=selection_set,
        )

    def index_sub_executor(self, index: int) -> "Executor":
        """Executor for one list item: path extended by its index."""
        return self._derive(path=self.path + (index,))

    def type_sub_executor(
        self,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
    ) -> "Executor":
        """Executor for resolving the current value as a concrete type."""
        logger.debug(f"Resolving into type {type_name}")
        return self._derive(selection_set=selection_set)

    def replaced_context(self, context: Any) -> "Executor":
        """Executor with a new context; this executor's context is left untouched."""
        return self._derive(context=context)

    # =========================================================================
    # Resolution
    # =========================================================================

    def resolve(self, info: Any, value: Any) -> Value:
        """Resolve a value against the current selection set."""
        if value is None:
            return Value.null()
        if isinstance(value, WithContext):
            return self.replaced_context(value.context).resolve(info, value.value)
        if isinstance(value, GraphQLValue):
            return value.resolve(info, self.current_selection_set, self)
        raise UnimplementedCapabilityError(
            f"{type(value).__name__} does not implement value resolution"
        )

    async def resolve_async(self, info: Any, value: Any) -> Value:
        """Suspendable counterpart of resolve()."""
        if value is None:
            return Value.null()
        if isinstance(value, WithContext):
            return await self.replaced_context(value.context).resolve_async(info, value.value)
        if isinstance(value, GraphQLValueAsync):
            return await value.resolve_async(info, self.current_selection_set, self)
        raise UnimplementedCapabilityError(
            f"{type(value).__name__} does not implement asynchronous value resolution"
        )

    def is_excluded(self, directives: Iterable[Directive]) -> bool:
        return is_excluded(directives, self.variables)

    def coerce_arguments(self, field_meta: "FieldMeta", arguments: Iterable[tuple[str, InputValue]]) -> Arguments:
        return coerce_argument_values(field_meta, arguments, self.variables, self.schema)

    def fragment_by_name(self, name: str) -> FragmentDefinition:
        fragment = self.fragments.get(name)
        if fragment is None:
            raise SchemaConsistencyError(f"Fragment '{name}' is not defined in the document")
        return fragment

    # =========================================================================
    # Errors
    # =========================================================================

    def push_error(self, error: BaseException) -> None:
        """Record an error at the current field."""
        self.push_error_at(error, self.location)

    def push_error_at(self, error: BaseException, location: Optional[SourcePosition]) -> None:
        """Record an error at the given source position and the current path."""
        if isinstance(error, FieldError):
            message = error.message
            extensions = error.extensions
        else:
            logger.warning(
                f"Unexpected {type(error).__name__} while resolving {self._path_text()}: {error}",
                exc_info=error,
            )
            message = self.config.masked_error_message if self.config.mask_internal_errors else str(error)
            extensions = None

        locations = []
        if location is not None and location.line > 0:
            locations.append(SourceLocation(line=location.line, column=location.column))

        self.error_sink.push(ExecutionError(
            message=message,
            locations=locations,
            path=list(self.path),
            extensions=extensions,
        ))
        if self.config.log_field_errors:
            logger.info(f"Field error at {self._path_text()}: {message}")

    def errors(self) -> list[ExecutionError]:
        return self.error_sink.errors(sort=self.config.sort_errors)

    def _path_text(self) -> str:
        return ".".join(str(segment) for segment in self.path) or "<root>"
