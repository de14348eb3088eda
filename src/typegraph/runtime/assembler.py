"""
Response assembler - turns an execution result into the transport shape.

Output:
    {"data": {...}}                                when there are no errors
    {"data": {...} | None, "errors": [{...}, ...]} otherwise
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

from ..core.errors import ExecutionError
from ..value import Value


class ResponseAssembler:
    """
    Assembles the final response from a value and its errors.

    Usage:
        assembler = ResponseAssembler()
        data, errors = execute(query, root)
        response = assembler.assemble(data, errors)
    """

    def assemble(self, value: Value, errors: Iterable[ExecutionError] = ()) -> dict[str, Any]:
        """
        Assemble the response dict.

        Args:
            value: Resolved response value (null when the root collapsed)
            errors: Errors recorded during execution, already ordered

        Returns:
            Dict with "data" and, if anything failed, "errors"
        """
        response: dict[str, Any] = {"data": value.to_python()}
        error_list = [error.to_dict() for error in errors]
        if error_list:
            response["errors"] = error_list
        return response

    def to_json(
        self,
        value: Value,
        errors: Iterable[ExecutionError] = (),
        indent: Optional[int] = None,
    ) -> str:
        """Assemble and serialize to JSON text."""
        return json.dumps(self.assemble(value, errors), indent=indent, ensure_ascii=False)
