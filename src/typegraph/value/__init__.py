"""
Value module - result values, ordered objects and scalar representations.
"""

from __future__ import annotations

from .base import Value, ValueKind
from .object import Object, merge_key_into, merge_maps
from .scalar import INT32_MAX, INT32_MIN, DefaultScalarValue, ScalarValue, fits_int32

__all__ = [
    "Value",
    "ValueKind",
    "Object",
    "merge_key_into",
    "merge_maps",
    "ScalarValue",
    "DefaultScalarValue",
    "INT32_MIN",
    "INT32_MAX",
    "fits_int32",
]
