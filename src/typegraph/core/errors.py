"""
Exceptions and error records for the typegraph execution engine.

Three families:
- recoverable errors (FieldError, CoercionError, ScalarConversionError) are
  recorded against a response position and trigger null propagation
- schema errors (SchemaError and subclasses) indicate a schema/resolver
  mismatch and are never recorded as query errors
- request errors (DocumentError, OperationError) reject a request before
  execution starts
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field


class TypegraphError(Exception):
    """Base exception for all typegraph errors."""
    pass


# =============================================================================
# Recoverable errors
# =============================================================================


class FieldError(TypegraphError):
    """
    Raised by resolvers when a field cannot be produced.

    The message and extensions end up in the response error list; the
    field itself becomes null.
    """

    def __init__(self, message: str, extensions: Optional[dict[str, Any]] = None):
        self.message = message
        self.extensions = extensions
        super().__init__(message)


class CoercionError(FieldError):
    """Raised when an argument or variable cannot be coerced to its declared type."""
    pass


class ScalarConversionError(CoercionError):
    """Raised when a scalar kind rejects a literal token or input value."""
    pass


# =============================================================================
# Fatal schema errors
# =============================================================================


class SchemaError(TypegraphError):
    """Raised when the schema itself is inconsistent (fatal)."""
    pass


class SchemaConsistencyError(SchemaError):
    """Raised when resolvers and schema metadata disagree during execution."""
    pass


class FieldNotFoundError(SchemaConsistencyError):
    """Raised when a selected field has no metadata on the concrete type."""

    def __init__(self, field_name: str, type_name: str):
        self.field_name = field_name
        self.type_name = type_name
        super().__init__(f"Field {field_name} not found on type {type_name}")


class InstanceResolutionError(SchemaConsistencyError):
    """Raised when no instance resolver of an interface/union matches."""

    def __init__(self, type_name: str, requested: Optional[str] = None):
        self.type_name = type_name
        self.requested = requested
        if requested:
            message = f"Concrete type {requested} not handled by instance resolvers on {type_name}"
        else:
            message = f"Concrete type not handled by instance resolvers on {type_name}"
        super().__init__(message)


class UnimplementedCapabilityError(SchemaConsistencyError):
    """Raised when a type is used in a role it does not implement."""
    pass


# =============================================================================
# Request errors
# =============================================================================


class DocumentError(TypegraphError):
    """Raised when query source text cannot be turned into a document."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        where = f" at {line}:{column}" if line is not None else ""
        super().__init__(f"Syntax error{where}: {message}")


class OperationError(TypegraphError):
    """Raised when the operation to execute cannot be determined."""
    pass


# =============================================================================
# Error records
# =============================================================================


class SourceLocation(BaseModel):
    """Line/column pair (1-based) of a selection in the query document."""
    line: int
    column: int


class ExecutionError(BaseModel):
    """
    One positioned error produced while executing a query.

    Output format mirrors the usual transport shape:
    {"message": ..., "locations": [{"line": 1, "column": 3}], "path": ["a", 0, "b"]}
    """
    message: str
    locations: list[SourceLocation] = Field(default_factory=list)
    path: list[Union[str, int]] = Field(default_factory=list)
    extensions: Optional[dict[str, Any]] = None

    def sort_key(self) -> tuple:
        location = self.locations[0] if self.locations else SourceLocation(line=0, column=0)
        # List indices sort numerically and before field names at the same depth.
        path = [(0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in self.path]
        return (location.line, location.column, path, self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict, dropping empty extensions."""
        return self.model_dump(exclude_none=True)
