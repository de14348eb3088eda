"""
Ownership adapters.

One generic adapter per ownership kind. Each forwards every static and
dynamic capability to the value it holds and adds no behavior of its own:

    Owned(human)       exclusive owner
    Shared(human)      reference-counted handle, clone() for more handles
    Borrowed(human)    weak, non-owning reference

Subscripting gives the specialization for a wrapped type, usable wherever a
type is expected (field types, RootNode types):

    @field(ListOf(Shared[Human]))
    def friends(self, executor): ...

Constructing an adapter from a value picks the specialization for the
value's type automatically.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from ..core.ast import Selection
from ..core.errors import UnimplementedCapabilityError
from ..value import Value
from .async_await import GraphQLValueAsync
from .base import Arguments

if TYPE_CHECKING:
    from ..runtime.executor import Executor
    from ..schema.meta import MetaType
    from ..schema.registry import Registry


def _capability(target: Any, name: str):
    method = getattr(target, name, None)
    if method is None:
        raise UnimplementedCapabilityError(f"{type(target).__name__} does not implement {name}()")
    return method


class Delegating(GraphQLValueAsync):
    """Base of the ownership adapters: forwards everything to get()."""

    wrapped: ClassVar[Optional[type]] = None
    _specializations: ClassVar[dict[type, type]]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.wrapped is None:
            cls._specializations = {}

    def __class_getitem__(cls, item: type) -> type:
        specialized = cls._specializations.get(item)
        if specialized is None:
            specialized = type(f"{cls.__name__}[{item.__name__}]", (cls,), {"wrapped": item})
            cls._specializations[item] = specialized
        return specialized

    def __new__(cls, value: Any, *args: Any, **kwargs: Any):
        if cls.wrapped is None:
            cls = cls[type(value)]
        return object.__new__(cls)

    def get(self) -> Any:
        raise NotImplementedError

    # --- static metadata ---

    @classmethod
    def _wrapped_type(cls) -> type:
        if cls.wrapped is None:
            raise UnimplementedCapabilityError(f"{cls.__name__} must be specialized with a wrapped type")
        return cls.wrapped

    @classmethod
    def graphql_type_name(cls, info: Any = None) -> Optional[str]:
        return cls._wrapped_type().graphql_type_name(info)

    @classmethod
    def graphql_meta(cls, info: Any, registry: "Registry") -> "MetaType":
        return cls._wrapped_type().graphql_meta(info, registry)

    @classmethod
    def origin_type(cls) -> type:
        return cls._wrapped_type().origin_type()

    # --- value resolution ---

    def type_name(self, info: Any) -> Optional[str]:
        return _capability(self.get(), "type_name")(info)

    def concrete_type_name(self, context: Any, info: Any) -> str:
        return _capability(self.get(), "concrete_type_name")(context, info)

    def resolve_field(self, info: Any, field_name: str, arguments: Arguments, executor: "Executor") -> Value:
        return _capability(self.get(), "resolve_field")(info, field_name, arguments, executor)

    def resolve_into_type(
        self,
        info: Any,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        return _capability(self.get(), "resolve_into_type")(info, type_name, selection_set, executor)

    def resolve(self, info: Any, selection_set: Optional[tuple[Selection, ...]], executor: "Executor") -> Value:
        return _capability(self.get(), "resolve")(info, selection_set, executor)

    async def resolve_field_async(
        self,
        info: Any,
        field_name: str,
        arguments: Arguments,
        executor: "Executor",
    ) -> Value:
        return await _capability(self.get(), "resolve_field_async")(info, field_name, arguments, executor)

    async def resolve_into_type_async(
        self,
        info: Any,
        type_name: str,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        return await _capability(self.get(), "resolve_into_type_async")(info, type_name, selection_set, executor)

    async def resolve_async(
        self,
        info: Any,
        selection_set: Optional[tuple[Selection, ...]],
        executor: "Executor",
    ) -> Value:
        return await _capability(self.get(), "resolve_async")(info, selection_set, executor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get()!r})"


class Owned(Delegating):
    """Exclusive owner of the wrapped value."""

    def __init__(self, value: Any):
        self._value = value

    def get(self) -> Any:
        return self._value


class _SharedCell:
    __slots__ = ("value", "handles")

    def __init__(self, value: Any):
        self.value = value
        self.handles: weakref.WeakSet = weakref.WeakSet()


class Shared(Delegating):
    """
    Reference-counted handle on a shared value.

    Every clone() is another handle on the same value; ref_count counts the
    handles still alive.
    """

    def __init__(self, value: Any, _cell: Optional[_SharedCell] = None):
        self._cell = _cell if _cell is not None else _SharedCell(value)
        self._cell.handles.add(self)

    def get(self) -> Any:
        return self._cell.value

    def clone(self) -> "Shared":
        return type(self)(self._cell.value, _cell=self._cell)

    @property
    def ref_count(self) -> int:
        return len(self._cell.handles)

    def ptr_eq(self, other: "Shared") -> bool:
        return self._cell is other._cell


class Borrowed(Delegating):
    """Non-owning reference; using it after the referent is gone raises ReferenceError."""

    def __init__(self, value: Any):
        self._ref = weakref.ref(value)

    def get(self) -> Any:
        value = self._ref()
        if value is None:
            raise ReferenceError(f"Borrowed {self.graphql_type_name()} value no longer exists")
        return value

    def __repr__(self) -> str:
        value = self._ref()
        if value is None:
            return f"{type(self).__name__}(<dead>)"
        return f"{type(self).__name__}({value!r})"
