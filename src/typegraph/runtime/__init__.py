"""
Runtime module - query execution pipeline.
"""

from __future__ import annotations

from .context import WithContext
from .executor import ErrorSink, Executor
from .coercion import coerce_argument_values, coerce_input_value, coerce_variable_values, is_excluded
from .assembler import ResponseAssembler
from .execute import execute, execute_async, select_operation

__all__ = [
    "WithContext",
    "ErrorSink",
    "Executor",
    "is_excluded",
    "coerce_argument_values",
    "coerce_input_value",
    "coerce_variable_values",
    "ResponseAssembler",
    "execute",
    "execute_async",
    "select_operation",
]
