"""
Ordered response objects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Optional

if TYPE_CHECKING:
    from .base import Value


class Object:
    """
    Insertion-ordered mapping from response key to Value.

    Adding a key that is already present replaces its value in place: the key
    keeps the position of its first occurrence and the last write wins.
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Optional[Iterable[tuple[str, "Value"]]] = None):
        self._fields: dict[str, Value] = {}
        if fields is not None:
            for key, value in fields:
                self.add_field(key, value)

    def add_field(self, key: str, value: "Value") -> Optional["Value"]:
        """Set a field, returning the value it replaced (if any)."""
        previous = self._fields.get(key)
        self._fields[key] = value
        return previous

    def get_field_value(self, key: str) -> Optional["Value"]:
        return self._fields.get(key)

    def contains_field(self, key: str) -> bool:
        return key in self._fields

    def field_count(self) -> int:
        return len(self._fields)

    def keys(self) -> list[str]:
        return list(self._fields)

    def items(self) -> Iterator[tuple[str, "Value"]]:
        return iter(self._fields.items())

    def __iter__(self) -> Iterator[tuple[str, "Value"]]:
        return self.items()

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __getitem__(self, key: str) -> "Value":
        return self._fields[key]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Object):
            return NotImplemented
        # Order is part of the response contract.
        return list(self._fields.items()) == list(other._fields.items())

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {v!r}" for k, v in self._fields.items())
        return f"Object({{{inner}}})"


def merge_key_into(target: Object, response_name: str, value: "Value") -> None:
    """
    Merge one response key into an object.

    Objects merge recursively and lists of objects merge element-wise, so
    overlapping selections of the same field combine their sub-fields. Any
    other collision is resolved by last write wins.
    """
    existing = target.get_field_value(response_name)
    if existing is not None:
        dest_obj = existing.as_object_value()
        src_obj = value.as_object_value()
        if dest_obj is not None and src_obj is not None:
            merge_maps(dest_obj, src_obj)
            return

        dest_list = existing.as_list_value()
        src_list = value.as_list_value()
        if (
            dest_list is not None
            and src_list is not None
            and len(dest_list) == len(src_list)
            and all(
                d.as_object_value() is not None and s.as_object_value() is not None
                for d, s in zip(dest_list, src_list)
            )
        ):
            for dest_item, src_item in zip(dest_list, src_list):
                merge_maps(dest_item.as_object_value(), src_item.as_object_value())
            return

    target.add_field(response_name, value)


def merge_maps(dest: Object, src: Object) -> None:
    """Merge every key of src into dest."""
    for key, value in src.items():
        merge_key_into(dest, key, value)
