"""
Query entry points.

    data, errors = execute("{ hero { name } }", root)
    data, errors = await execute_async(document, root, variables={"id": "1000"})

Both return the response value and the ordered error list; turning them into
a transport payload is ResponseAssembler's job.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from ..config import EngineConfig
from ..core.ast import Document, OperationDefinition, OperationType
from ..core.document import parse_document
from ..core.errors import CoercionError, ExecutionError, OperationError
from ..value import Value
from .coercion import coerce_variable_values
from .executor import Executor

if TYPE_CHECKING:
    from ..schema.root import RootNode

logger = logging.getLogger(__name__)

ExecutionResult = tuple[Value, list[ExecutionError]]


def select_operation(document: Document, operation_name: Optional[str] = None) -> OperationDefinition:
    """Pick the operation to run: the named one, or the only one."""
    if operation_name is None:
        if not document.operations:
            raise OperationError("Document does not contain any operation")
        if len(document.operations) > 1:
            raise OperationError("Must provide operation name if query contains multiple operations")
        return document.operations[0]

    operation = document.operation(operation_name)
    if operation is None:
        raise OperationError(f"Unknown operation named '{operation_name}'")
    return operation


def _start(
    document: Union[Document, str],
    root_node: "RootNode",
    operation_name: Optional[str],
    variables: Optional[Mapping[str, Any]],
    context: Any,
    config: Optional[EngineConfig],
) -> tuple[OperationDefinition, Optional[Executor], Optional[ExecutionResult]]:
    if isinstance(document, str):
        document = parse_document(document)

    operation = select_operation(document, operation_name)
    # Raises OperationError for operation types the root node cannot serve
    root_node.root_for(operation.operation_type)

    schema = root_node.schema
    try:
        variable_values = coerce_variable_values(
            operation.variable_definitions, variables, schema.scalar_type
        )
    except CoercionError as e:
        logger.info(f"Rejected variables of operation {operation.name or '<anonymous>'}: {e.message}")
        return operation, None, (Value.null(), [ExecutionError(message=e.message)])

    executor = Executor(
        schema,
        fragments=document.fragments,
        variables=variable_values,
        context=context,
        config=config,
        selection_set=operation.selection_set,
        serial=operation.operation_type is OperationType.MUTATION,
    )
    logger.info(f"Executing {operation.operation_type.value} {operation.name or '<anonymous>'}")
    return operation, executor, None


def _finish(operation: OperationDefinition, value: Value, executor: Executor) -> ExecutionResult:
    errors = executor.errors()
    logger.info(
        f"Finished {operation.operation_type.value} {operation.name or '<anonymous>'} "
        f"with {len(errors)} error(s)"
    )
    return value, errors


def execute(
    document: Union[Document, str],
    root_node: "RootNode",
    *,
    operation_name: Optional[str] = None,
    variables: Optional[Mapping[str, Any]] = None,
    context: Any = None,
    config: Optional[EngineConfig] = None,
) -> ExecutionResult:
    """
    Execute a query synchronously.

    Every resolver must be synchronous; an async resolver is a fatal
    UnimplementedCapabilityError.
    """
    operation, executor, rejected = _start(document, root_node, operation_name, variables, context, config)
    if rejected is not None:
        return rejected
    root = root_node.root_for(operation.operation_type)
    value = executor.resolve(root_node.info, root)
    return _finish(operation, value, executor)


async def execute_async(
    document: Union[Document, str],
    root_node: "RootNode",
    *,
    operation_name: Optional[str] = None,
    variables: Optional[Mapping[str, Any]] = None,
    context: Any = None,
    config: Optional[EngineConfig] = None,
) -> ExecutionResult:
    """Execute a query on the running event loop."""
    operation, executor, rejected = _start(document, root_node, operation_name, variables, context, config)
    if rejected is not None:
        return rejected
    root = root_node.root_for(operation.operation_type)
    value = await executor.resolve_async(root_node.info, root)
    return _finish(operation, value, executor)
