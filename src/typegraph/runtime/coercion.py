"""
Argument and variable coercion.

Arguments arrive as InputValues: literals (with uninterpreted scalar
tokens), enum names, variable references, lists and objects. Coercion turns
them into host values against the declared argument types:

- variables are substituted; an argument bound to a variable that was not
  provided counts as not provided, so its default applies
- scalar tokens are parsed by the scalar's parse_token, then converted by
  its from_input_value
- enums map to their host values, input objects to their constructed type
- a single value given for a list type is wrapped in a list
- a missing or null value for a non-null type raises CoercionError

Nothing here suspends.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..core.ast import Directive, InputValue, TypeRef, VariableDefinition
from ..core.errors import CoercionError, ScalarConversionError, SchemaConsistencyError
from ..schema.meta import ArgumentMeta, EnumMeta, FieldMeta, InputObjectMeta, ScalarMeta
from ..schema.model import Schema
from ..types.base import Arguments
from ..value import ScalarValue


def is_excluded(directives: Iterable[Directive], variables: Mapping[str, InputValue]) -> bool:
    """Evaluate @skip(if:) and @include(if:) against the current variables."""
    for directive in directives:
        condition = directive.argument("if")
        if condition is None:
            continue
        flag = condition.into_const(variables).as_boolean_value()
        if directive.name == "skip" and flag is True:
            return True
        if directive.name == "include" and flag is False:
            return True
    return False


def coerce_argument_values(
    field_meta: FieldMeta,
    arguments: Iterable[tuple[str, InputValue]],
    variables: Mapping[str, InputValue],
    schema: Schema,
) -> Arguments:
    """Coerce the arguments given to one field against its declared arguments."""
    provided = dict(arguments)
    values = _coerce_fields(field_meta.arguments, provided, variables, schema, "Argument")
    return Arguments(values)


def _coerce_fields(
    declared: Iterable[ArgumentMeta],
    provided: Mapping[str, InputValue],
    variables: Mapping[str, InputValue],
    schema: Schema,
    what: str,
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for meta in declared:
        raw = provided.get(meta.name)
        if raw is not None and raw.is_variable() and raw.payload not in variables:
            raw = None

        if raw is None:
            if meta.default_value is not None:
                values[meta.name] = coerce_input_value(meta.default_value, meta.arg_type, variables, schema)
            elif meta.arg_type.is_non_null:
                raise CoercionError(f'{what} "{meta.name}" of required type "{meta.arg_type}" was not provided.')
            continue

        try:
            values[meta.name] = coerce_input_value(raw, meta.arg_type, variables, schema)
        except CoercionError as e:
            raise type(e)(f'{what} "{meta.name}" has invalid value: {e.message}', e.extensions) from e
    return values


def coerce_input_value(
    value: InputValue,
    type_ref: TypeRef,
    variables: Mapping[str, InputValue],
    schema: Schema,
) -> Any:
    """Coerce one input value to a host value of the given type."""
    if value.is_variable():
        value = variables.get(value.payload, InputValue.null(value.position))

    if type_ref.is_non_null:
        if value.is_null():
            raise CoercionError(f"Expected non-null value of type {type_ref}, found null")
        return coerce_input_value(value, type_ref.of_type, variables, schema)

    if value.is_null():
        return None

    if type_ref.kind == "list":
        items = value.as_list_value()
        if items is None:
            return [coerce_input_value(value, type_ref.of_type, variables, schema)]
        return [coerce_input_value(item, type_ref.of_type, variables, schema) for item in items]

    meta = schema.type_by_name(type_ref.name)
    if meta is None:
        raise SchemaConsistencyError(f"Unknown input type '{type_ref.name}'")

    if isinstance(meta, ScalarMeta):
        try:
            token = value.as_token()
            if token is not None:
                value = InputValue.scalar(
                    meta.definition.parse_token(token, schema.scalar_type), value.position
                )
            if value.as_scalar() is None:
                raise CoercionError(f"Expected a value of type {meta.name}, found {value!r}")
            return meta.definition.from_input_value(value)
        except (ValueError, TypeError) as e:
            raise ScalarConversionError(f"{meta.name} cannot represent {value!r}: {e}") from e

    if isinstance(meta, EnumMeta):
        name = value.as_enum_value()
        if name is None and value.as_scalar() is not None:
            # Variable values carry enum names as strings
            name = value.as_scalar().as_string()
        if name is None:
            raise CoercionError(f"Expected a value of enum {meta.name}, found {value!r}")
        return meta.parse(name)

    if isinstance(meta, InputObjectMeta):
        fields = value.to_object_value()
        if fields is None:
            raise CoercionError(f"Expected an object of type {meta.name}, found {value!r}")
        unknown = [key for key in fields if meta.input_field_by_name(key) is None]
        if unknown:
            raise CoercionError(f"Field '{unknown[0]}' is not defined by type {meta.name}")
        data = _coerce_fields(meta.input_fields, fields, variables, schema, "Field")
        return meta.construct(data) if meta.construct is not None else data

    raise SchemaConsistencyError(f"Type '{meta.name}' cannot be used as an input type")


def coerce_variable_values(
    definitions: Iterable[VariableDefinition],
    provided: Optional[Mapping[str, Any]],
    scalar_type: type[ScalarValue],
) -> dict[str, InputValue]:
    """
    Build the variable table of an operation.

    Provided host values become InputValues through the schema's scalar
    representation; declared defaults fill in variables that were not given.
    Variables neither provided nor defaulted stay unbound.
    """
    provided = provided or {}
    variables: dict[str, InputValue] = {}
    for definition in definitions:
        if definition.name in provided:
            variables[definition.name] = InputValue.from_host(provided[definition.name], scalar_type)
        elif definition.default_value is not None:
            variables[definition.name] = definition.default_value
    return variables
