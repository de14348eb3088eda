"""
Execution context handling.

The context is an opaque value threaded through resolution. It is never
mutated by the engine; a resolver can only swap it for a narrower one by
returning WithContext, which scopes the new context to the nested
resolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WithContext:
    """
    Resolver result carrying the context its value must be resolved under.

    Usage:
        @field(Human)
        def owner(self, executor):
            return WithContext(executor.context.for_user(self.owner_id), self.owner)
    """
    context: Any
    value: Any
