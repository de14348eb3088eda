"""
Scalar definitions.

A scalar kind takes part in execution through exactly three functions:

    parse_token(token, scalar_type) -> ScalarValue   # literal in query text
    from_input_value(input_value) -> host value      # argument/variable coercion
    resolve(host_value, scalar_type) -> Value        # resolver result -> response

Usage:
    Long = define_scalar(
        "Long",
        parse_token=lambda token, st: st("long", int(token.text)),
        from_input_value=lambda v: v.as_scalar().as_int(),
        resolve=lambda value, st: Value.scalar(st("long", value)),
    )
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..core.ast import InputValue, ScalarToken
from ..core.errors import FieldError, ScalarConversionError
from ..value import ScalarValue, Value, fits_int32


ParseToken = Callable[[ScalarToken, type[ScalarValue]], ScalarValue]
FromInputValue = Callable[[InputValue], Any]
Resolve = Callable[[Any, type[ScalarValue]], Value]


@dataclass(frozen=True, eq=False)
class ScalarDefinition:
    """One scalar kind: its name plus the parse/coerce/resolve triple."""
    name: str
    parse_token: ParseToken
    from_input_value: FromInputValue
    resolve: Resolve
    description: Optional[str] = None

    def graphql_type_name(self, info: Any = None) -> str:
        return self.name

    def origin_type(self) -> "ScalarDefinition":
        return self

    def __repr__(self) -> str:
        return f"ScalarDefinition({self.name!r})"


def define_scalar(
    name: str,
    *,
    parse_token: ParseToken,
    from_input_value: FromInputValue,
    resolve: Resolve,
    description: Optional[str] = None,
) -> ScalarDefinition:
    """Define a custom scalar kind."""
    return ScalarDefinition(
        name=name,
        parse_token=parse_token,
        from_input_value=from_input_value,
        resolve=resolve,
        description=description,
    )


def _scalar_of(value: InputValue, name: str) -> ScalarValue:
    scalar = value.as_scalar()
    if scalar is None:
        raise ScalarConversionError(f"{name} cannot represent a non-scalar value: {value!r}")
    return scalar


# =============================================================================
# Int
# =============================================================================


def _int_parse_token(token: ScalarToken, scalar_type: type[ScalarValue]) -> ScalarValue:
    if token.kind != "int":
        raise ScalarConversionError(f"Int cannot represent literal {token.text}")
    number = int(token.text)
    if not fits_int32(number):
        raise ScalarConversionError(f"Int cannot represent non 32-bit signed integer value: {token.text}")
    return scalar_type("int", number)


def _int_from_input_value(value: InputValue) -> int:
    scalar = _scalar_of(value, "Int")
    number = scalar.as_int()
    if number is None or not fits_int32(number):
        raise ScalarConversionError(f"Int cannot represent non-integer value: {scalar}")
    return number


def _int_resolve(value: Any, scalar_type: type[ScalarValue]) -> Value:
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise FieldError(f"Int cannot represent non-integer value: {value!r}")
    if not fits_int32(value):
        raise FieldError(f"Int cannot represent non 32-bit signed integer value: {value}")
    return Value.scalar(scalar_type("int", value))


# =============================================================================
# Float
# =============================================================================


def _float_parse_token(token: ScalarToken, scalar_type: type[ScalarValue]) -> ScalarValue:
    if token.kind not in ("int", "float"):
        raise ScalarConversionError(f"Float cannot represent literal {token.text}")
    return scalar_type("float", float(token.text))


def _float_from_input_value(value: InputValue) -> float:
    scalar = _scalar_of(value, "Float")
    number = scalar.as_float()
    if number is None:
        raise ScalarConversionError(f"Float cannot represent non numeric value: {scalar}")
    return number


def _float_resolve(value: Any, scalar_type: type[ScalarValue]) -> Value:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise FieldError(f"Float cannot represent non numeric value: {value!r}")
    return Value.scalar(scalar_type("float", float(value)))


# =============================================================================
# String / ID
# =============================================================================


def _string_parse_token(token: ScalarToken, scalar_type: type[ScalarValue]) -> ScalarValue:
    if token.kind != "string":
        raise ScalarConversionError(f"String cannot represent literal {token.text}")
    return scalar_type("string", token.text)


def _string_from_input_value(value: InputValue) -> str:
    scalar = _scalar_of(value, "String")
    text = scalar.as_string()
    if text is None:
        raise ScalarConversionError(f"String cannot represent a non string value: {scalar}")
    return text


def _string_resolve(value: Any, scalar_type: type[ScalarValue]) -> Value:
    if not isinstance(value, str):
        raise FieldError(f"String cannot represent value: {value!r}")
    return Value.scalar(scalar_type("string", value))


def _id_parse_token(token: ScalarToken, scalar_type: type[ScalarValue]) -> ScalarValue:
    if token.kind not in ("string", "int"):
        raise ScalarConversionError(f"ID cannot represent literal {token.text}")
    return scalar_type("string", token.text)


def _id_from_input_value(value: InputValue) -> str:
    scalar = _scalar_of(value, "ID")
    if scalar.as_string() is not None:
        return scalar.as_string()
    if scalar.as_int() is not None:
        return str(scalar.as_int())
    raise ScalarConversionError(f"ID cannot represent value: {scalar}")


def _id_resolve(value: Any, scalar_type: type[ScalarValue]) -> Value:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise FieldError(f"ID cannot represent value: {value!r}")
    return Value.scalar(scalar_type("string", str(value)))


# =============================================================================
# Boolean
# =============================================================================


def _boolean_parse_token(token: ScalarToken, scalar_type: type[ScalarValue]) -> ScalarValue:
    if token.kind != "boolean":
        raise ScalarConversionError(f"Boolean cannot represent literal {token.text}")
    return scalar_type("boolean", token.text == "true")


def _boolean_from_input_value(value: InputValue) -> bool:
    scalar = _scalar_of(value, "Boolean")
    flag = scalar.as_boolean()
    if flag is None:
        raise ScalarConversionError(f"Boolean cannot represent a non boolean value: {scalar}")
    return flag


def _boolean_resolve(value: Any, scalar_type: type[ScalarValue]) -> Value:
    if not isinstance(value, bool):
        raise FieldError(f"Boolean cannot represent a non boolean value: {value!r}")
    return Value.scalar(scalar_type("boolean", value))


Int = define_scalar(
    "Int",
    parse_token=_int_parse_token,
    from_input_value=_int_from_input_value,
    resolve=_int_resolve,
    description="32-bit signed integer",
)

Float = define_scalar(
    "Float",
    parse_token=_float_parse_token,
    from_input_value=_float_from_input_value,
    resolve=_float_resolve,
    description="Double-precision floating point value",
)

String = define_scalar(
    "String",
    parse_token=_string_parse_token,
    from_input_value=_string_from_input_value,
    resolve=_string_resolve,
    description="UTF-8 text",
)

Boolean = define_scalar(
    "Boolean",
    parse_token=_boolean_parse_token,
    from_input_value=_boolean_from_input_value,
    resolve=_boolean_resolve,
)

ID = define_scalar(
    "ID",
    parse_token=_id_parse_token,
    from_input_value=_id_from_input_value,
    resolve=_id_resolve,
    description="Unique identifier, serialized as a string",
)

# =============================================================================
# UUID
# =============================================================================


def _parse_uuid(text: str) -> uuid.UUID:
    try:
        return uuid.UUID(text)
    except ValueError as e:
        raise ScalarConversionError(f"UUID cannot represent value: {text!r}") from e


def _uuid_parse_token(token: ScalarToken, scalar_type: type[ScalarValue]) -> ScalarValue:
    if token.kind != "string":
        raise ScalarConversionError(f"UUID cannot represent literal {token.text}")
    _parse_uuid(token.text)
    return scalar_type("string", token.text)


def _uuid_from_input_value(value: InputValue) -> uuid.UUID:
    text = _scalar_of(value, "UUID").as_string()
    if text is None:
        raise ScalarConversionError(f"UUID cannot represent a non string value: {value!r}")
    return _parse_uuid(text)


def _uuid_resolve(value: Any, scalar_type: type[ScalarValue]) -> Value:
    if not isinstance(value, uuid.UUID):
        raise FieldError(f"UUID cannot represent value: {value!r}")
    return Value.scalar(scalar_type("string", str(value)))


UUID = define_scalar(
    "UUID",
    parse_token=_uuid_parse_token,
    from_input_value=_uuid_from_input_value,
    resolve=_uuid_resolve,
    description="UUID",
)

BUILTIN_SCALARS: dict[str, ScalarDefinition] = {
    definition.name: definition for definition in (Int, Float, String, Boolean, ID, UUID)
}
