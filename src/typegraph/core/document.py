"""
Document adapter - turns query source text into a typegraph Document.

Lexing and parsing are delegated to graphql-core; this module only maps its
AST onto core.ast nodes. Scalar literals are kept as raw tokens so that the
schema's scalar definitions decide how to read them (e.g. an Int literal that
only fits a 64-bit scalar).

Usage:
    from typegraph.core.document import parse_document

    document = parse_document("{ hero { name } }")
"""

from __future__ import annotations

from typing import Optional

from graphql import GraphQLSyntaxError, parse
from graphql.language import ast as gql

from .ast import (
    Directive,
    Document,
    Field,
    FragmentDefinition,
    FragmentSpread,
    InlineFragment,
    InputValue,
    OperationDefinition,
    OperationType,
    Selection,
    SourcePosition,
    TypeRef,
    VariableDefinition,
)
from .errors import DocumentError


def parse_document(source: str) -> Document:
    """
    Parse query source text into a Document.

    Raises:
        DocumentError: if the source is not syntactically valid
    """
    try:
        node = parse(source)
    except GraphQLSyntaxError as e:
        line = column = None
        if e.locations:
            line, column = e.locations[0].line, e.locations[0].column
        raise DocumentError(e.message, line=line, column=column) from e

    return DocumentConverter().convert(node)


class DocumentConverter:
    """Maps graphql-core AST nodes onto core.ast nodes."""

    def convert(self, node: gql.DocumentNode) -> Document:
        operations: list[OperationDefinition] = []
        fragments: dict[str, FragmentDefinition] = {}

        for definition in node.definitions:
            if isinstance(definition, gql.OperationDefinitionNode):
                operations.append(self._operation(definition))
            elif isinstance(definition, gql.FragmentDefinitionNode):
                fragment = self._fragment(definition)
                fragments[fragment.name] = fragment
            else:
                raise DocumentError(
                    f"Unsupported definition '{definition.kind}' in executable document"
                )

        return Document(operations=tuple(operations), fragments=fragments)

    # --- definitions ---

    def _operation(self, node: gql.OperationDefinitionNode) -> OperationDefinition:
        return OperationDefinition(
            operation_type=OperationType(node.operation.value),
            name=node.name.value if node.name else None,
            variable_definitions=tuple(
                self._variable_definition(v) for v in node.variable_definitions or ()
            ),
            directives=self._directives(node.directives),
            selection_set=self._selection_set(node.selection_set),
            position=self._position(node),
        )

    def _fragment(self, node: gql.FragmentDefinitionNode) -> FragmentDefinition:
        return FragmentDefinition(
            name=node.name.value,
            type_condition=node.type_condition.name.value,
            selection_set=self._selection_set(node.selection_set),
            directives=self._directives(node.directives),
            position=self._position(node),
        )

    def _variable_definition(self, node: gql.VariableDefinitionNode) -> VariableDefinition:
        return VariableDefinition(
            name=node.variable.name.value,
            var_type=self._type(node.type),
            default_value=self._value(node.default_value) if node.default_value else None,
            position=self._position(node),
        )

    def _type(self, node: gql.TypeNode) -> TypeRef:
        if isinstance(node, gql.NonNullTypeNode):
            return self._type(node.type).non_null()
        if isinstance(node, gql.ListTypeNode):
            return self._type(node.type).list_of()
        return TypeRef.named(node.name.value)

    # --- selections ---

    def _selection_set(self, node: Optional[gql.SelectionSetNode]) -> Optional[tuple[Selection, ...]]:
        if node is None:
            return None
        return tuple(self._selection(s) for s in node.selections)

    def _selection(self, node: gql.SelectionNode) -> Selection:
        if isinstance(node, gql.FieldNode):
            return Field(
                name=node.name.value,
                alias=node.alias.value if node.alias else None,
                arguments=tuple(
                    (arg.name.value, self._value(arg.value)) for arg in node.arguments or ()
                ),
                directives=self._directives(node.directives),
                selection_set=self._selection_set(node.selection_set),
                position=self._position(node),
            )
        if isinstance(node, gql.FragmentSpreadNode):
            return FragmentSpread(
                name=node.name.value,
                directives=self._directives(node.directives),
                position=self._position(node),
            )
        if isinstance(node, gql.InlineFragmentNode):
            return InlineFragment(
                type_condition=node.type_condition.name.value if node.type_condition else None,
                directives=self._directives(node.directives),
                selection_set=self._selection_set(node.selection_set),
                position=self._position(node),
            )
        raise DocumentError(f"Unsupported selection '{node.kind}'")

    def _directives(self, nodes) -> tuple[Directive, ...]:
        return tuple(
            Directive(
                name=d.name.value,
                arguments=tuple((arg.name.value, self._value(arg.value)) for arg in d.arguments or ()),
                position=self._position(d),
            )
            for d in nodes or ()
        )

    # --- values ---

    def _value(self, node: gql.ValueNode) -> InputValue:
        position = self._position(node)
        if isinstance(node, gql.VariableNode):
            return InputValue.variable(node.name.value, position)
        if isinstance(node, gql.NullValueNode):
            return InputValue.null(position)
        if isinstance(node, gql.IntValueNode):
            return InputValue.token("int", node.value, position)
        if isinstance(node, gql.FloatValueNode):
            return InputValue.token("float", node.value, position)
        if isinstance(node, gql.StringValueNode):
            return InputValue.token("string", node.value, position)
        if isinstance(node, gql.BooleanValueNode):
            # Booleans need no schema help: keep them as plain tokens with a
            # fixed spelling so every scalar representation can read them.
            return InputValue.token("boolean", "true" if node.value else "false", position)
        if isinstance(node, gql.EnumValueNode):
            return InputValue.enum(node.value, position)
        if isinstance(node, gql.ListValueNode):
            return InputValue.list([self._value(v) for v in node.values], position)
        if isinstance(node, gql.ObjectValueNode):
            return InputValue.object(
                [(f.name.value, self._value(f.value)) for f in node.fields], position
            )
        raise DocumentError(f"Unsupported value '{node.kind}'")

    @staticmethod
    def _position(node: gql.Node) -> SourcePosition:
        loc = node.loc
        if loc is None:
            return SourcePosition.unlocated()
        return SourcePosition(index=loc.start, line=loc.start_token.line, column=loc.start_token.column)
