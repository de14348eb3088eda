"""
Naming utilities.

Schema field and argument names are camelCase; Python resolver methods and
their keyword arguments are snake_case.
"""

from __future__ import annotations

import re


# Pre-compiled regex patterns
_CAMEL_TO_SNAKE_PATTERN = re.compile(r'(?<=[a-z0-9])(?=[A-Z])')
_SNAKE_TO_CAMEL_PATTERN = re.compile(r'(?<=[0-9a-zA-Z])_([a-z0-9])')


def to_snake_case(name: str) -> str:
    """
    Convert camelCase to snake_case.

    Examples:
        longWithArg -> long_with_arg
        appearsIn -> appears_in
        HTTPResponse -> http_response
    """
    # Handle consecutive uppercase (HTTP -> http)
    result = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
    # Handle standard camelCase
    result = _CAMEL_TO_SNAKE_PATTERN.sub('_', result)
    return result.lower()


def to_camel_case(name: str) -> str:
    """
    Convert snake_case to camelCase.

    Leading underscores are kept, so reserved-looking names survive.

    Examples:
        long_with_arg -> longWithArg
        appears_in -> appearsIn
        _private -> _private
    """
    def replace_underscore(match: re.Match) -> str:
        return match.group(1).upper()

    return _SNAKE_TO_CAMEL_PATTERN.sub(replace_underscore, name)
