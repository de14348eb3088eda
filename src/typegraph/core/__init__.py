"""
Core module - errors, query AST and naming utilities.
"""

from __future__ import annotations

from .ast import (
    Directive,
    Document,
    Field,
    FragmentDefinition,
    FragmentSpread,
    InlineFragment,
    InputValue,
    InputValueKind,
    OperationDefinition,
    OperationType,
    ScalarToken,
    Selection,
    SourcePosition,
    TypeRef,
    VariableDefinition,
)
from .errors import (
    CoercionError,
    DocumentError,
    ExecutionError,
    FieldError,
    FieldNotFoundError,
    InstanceResolutionError,
    OperationError,
    ScalarConversionError,
    SchemaConsistencyError,
    SchemaError,
    SourceLocation,
    TypegraphError,
    UnimplementedCapabilityError,
)
from .utils import to_camel_case, to_snake_case

__all__ = [
    # AST
    "SourcePosition",
    "TypeRef",
    "ScalarToken",
    "InputValue",
    "InputValueKind",
    "Directive",
    "Field",
    "FragmentSpread",
    "InlineFragment",
    "Selection",
    "FragmentDefinition",
    "VariableDefinition",
    "OperationType",
    "OperationDefinition",
    "Document",
    # Errors
    "TypegraphError",
    "FieldError",
    "CoercionError",
    "ScalarConversionError",
    "SchemaError",
    "SchemaConsistencyError",
    "FieldNotFoundError",
    "InstanceResolutionError",
    "UnimplementedCapabilityError",
    "DocumentError",
    "OperationError",
    "SourceLocation",
    "ExecutionError",
    # Utils
    "to_snake_case",
    "to_camel_case",
]
