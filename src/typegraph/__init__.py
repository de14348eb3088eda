"""
Typegraph - async execution engine for typed query languages.

Resolves a pre-validated query document against a schema of typed values:
field resolution, fragments, interface/union type resolution, null
propagation and positioned error collection.

Usage:
    from typegraph import ObjectType, RootNode, execute, field

    class Query(ObjectType):
        @field("String!")
        def hello(self, executor):
            return "world"

    data, errors = execute("{ hello }", RootNode(Query()))
    print(data)   # {"hello": "world"}
"""

from __future__ import annotations

from .core import (
    CoercionError,
    Document,
    DocumentError,
    ExecutionError,
    FieldError,
    FieldNotFoundError,
    InputValue,
    InstanceResolutionError,
    OperationError,
    ScalarConversionError,
    SchemaConsistencyError,
    SchemaError,
    SourceLocation,
    TypegraphError,
    TypeRef,
    UnimplementedCapabilityError,
)
from .core.document import parse_document
from .value import DefaultScalarValue, Object, ScalarValue, Value
from .schema import ListOf, NonNull, Registry, RootNode, Schema
from .types import (
    ID,
    UUID,
    Arg,
    Arguments,
    Boolean,
    Borrowed,
    EnumType,
    Float,
    GraphQLType,
    GraphQLValue,
    GraphQLValueAsync,
    InputObjectType,
    Int,
    InterfaceType,
    ObjectType,
    Owned,
    ScalarDefinition,
    Shared,
    String,
    UnionType,
    define_scalar,
    field,
    instance_resolver,
)
from .runtime import (
    ErrorSink,
    Executor,
    ResponseAssembler,
    WithContext,
    execute,
    execute_async,
)
from .config import EngineConfig, load_config

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Values
    "Value",
    "Object",
    "ScalarValue",
    "DefaultScalarValue",
    # Documents
    "Document",
    "InputValue",
    "TypeRef",
    "parse_document",
    # Schema
    "Schema",
    "Registry",
    "RootNode",
    "ListOf",
    "NonNull",
    # Types
    "GraphQLType",
    "GraphQLValue",
    "GraphQLValueAsync",
    "Arguments",
    "ObjectType",
    "InterfaceType",
    "UnionType",
    "EnumType",
    "InputObjectType",
    "Arg",
    "field",
    "instance_resolver",
    "Owned",
    "Shared",
    "Borrowed",
    "ScalarDefinition",
    "define_scalar",
    "Int",
    "Float",
    "String",
    "Boolean",
    "ID",
    "UUID",
    # Execution
    "Executor",
    "ErrorSink",
    "WithContext",
    "execute",
    "execute_async",
    "ResponseAssembler",
    # Config
    "EngineConfig",
    "load_config",
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
    "ExecutionError",
    "SourceLocation",
]
