"""Tests for type registration and schema building."""

import logging

import pytest

from typegraph import (
    Arg,
    EnumType,
    InputObjectType,
    InterfaceType,
    ListOf,
    NonNull,
    ObjectType,
    Owned,
    Registry,
    RootNode,
    SchemaError,
    Shared,
    TypeRef,
    UnionType,
    field,
    instance_resolver,
)
from typegraph.schema import EnumMeta, InputObjectMeta, InterfaceMeta, ObjectMeta, TypeKind

# --- Fixtures ---


class Counted(ObjectType):
    meta_calls = 0

    value = field("Int")

    @classmethod
    def graphql_meta(cls, info, registry):
        cls.meta_calls += 1
        return super().graphql_meta(info, registry)


class CountedQuery(ObjectType):
    graphql_name = "Query"

    first = field(Counted)
    second = field(ListOf(Counted))
    owned = field(Owned[Counted])
    shared = field(NonNull(Shared[Counted]))


class ThingA(ObjectType):
    graphql_name = "Thing"
    a = field("Int")


class ThingB(ObjectType):
    graphql_name = "Thing"
    b = field("Int")


class ConflictQuery(ObjectType):
    graphql_name = "Query"
    a = field(ThingA)
    b = field(ThingB)


class DanglingQuery(ObjectType):
    graphql_name = "Query"
    missing = field("[Nowhere!]")


class Named(InterfaceType):
    name = field("String")


class Person(ObjectType):
    interfaces = (Named,)
    name = field("String")


class Pet(ObjectType):
    """A pet."""
    interfaces = (Named,)
    name = field("String")


class NamedQuery(ObjectType):
    graphql_name = "Query"
    named = field(Named)


class NotAnInterface(ObjectType):
    interfaces = (Person,)
    name = field("String")


class BadInterfaceQuery(ObjectType):
    graphql_name = "Query"
    value = field(NotAnInterface)


class Size(EnumType):
    values = {"SMALL": 1, "LARGE": 2}


class Filter(InputObjectType):
    size = Arg(Size)
    limit = Arg("Int", default=10)


class BadUnion(UnionType):
    @instance_resolver(Size)
    def as_size(self, context):
        return None


class BadUnionQuery(ObjectType):
    graphql_name = "Query"
    value = field(BadUnion)


class InputQuery(ObjectType):
    graphql_name = "Query"

    @field(ListOf(Person), args={"filter": Arg(Filter), "first": Arg("Int!", description="Page size")})
    def people(self, executor, filter=None, first=None):
        return []


# --- Registration ---


class TestRegistration:
    def test_meta_built_once_through_adapters(self) -> None:
        Counted.meta_calls = 0
        root = RootNode(CountedQuery())
        assert Counted.meta_calls == 1
        assert isinstance(root.schema.type_by_name("Counted"), ObjectMeta)
        query = root.schema.query_type
        assert query.field_by_name("owned").field_type == TypeRef.named("Counted")
        assert query.field_by_name("shared").field_type == TypeRef.parse("Counted!")
        assert query.field_by_name("second").field_type == TypeRef.parse("[Counted]")

    def test_name_conflict_is_fatal(self) -> None:
        with pytest.raises(SchemaError, match="Thing"):
            RootNode(ConflictQuery())

    def test_unknown_reference_is_fatal(self) -> None:
        with pytest.raises(SchemaError, match="Nowhere"):
            RootNode(DanglingQuery())

    def test_builtin_scalars_register_lazily(self) -> None:
        registry = Registry()
        assert registry.type_ref("[Int!]") == TypeRef.parse("[Int!]")
        assert "Int" in registry.types
        assert "String" not in registry.types

    def test_invalid_type_string(self) -> None:
        with pytest.raises(SchemaError):
            Registry().type_ref("[Int")

    def test_unsupported_spec(self) -> None:
        with pytest.raises(SchemaError):
            Registry().type_ref(42)

    def test_field_metadata_builders(self) -> None:
        registry = Registry()
        meta = (
            registry.field("name", "String!")
            .argument(registry.arg("upper", "Boolean", default=False))
            .describe("Display name")
            .deprecated("Use fullName")
        )
        assert meta.field_type == TypeRef.parse("String!")
        assert meta.argument_by_name("upper").arg_type == TypeRef.parse("Boolean")
        assert meta.description == "Display name"
        assert meta.is_deprecated
        assert meta.deprecation_reason == "Use fullName"

    def test_list_shorthand(self) -> None:
        assert Registry().type_ref(["String"]) == TypeRef.parse("[String]")

    def test_description_from_docstring(self) -> None:
        root = RootNode(NamedQuery(), types=[Person, Pet])
        assert root.schema.type_by_name("Pet").description == "A pet."
        assert root.schema.type_by_name("Person").description is None


# --- Schema building ---


class TestBuildSchema:
    def test_interface_possible_types_from_implementers(self) -> None:
        root = RootNode(NamedQuery(), types=[Person, Pet])
        schema = root.schema
        assert isinstance(schema.type_by_name("Named"), InterfaceMeta)
        assert schema.possible_types("Named") == ("Person", "Pet")
        assert schema.is_possible_type("Named", "Pet")
        assert schema.type_condition_applies("Named", "Person")
        assert not schema.type_condition_applies("Person", "Named")

    def test_declared_possible_types_come_first(self, root) -> None:
        assert root.schema.possible_types("Character") == ("Human", "Droid")
        assert root.schema.possible_types("SearchResult") == ("Human", "Droid")

    def test_implementing_a_non_interface_is_fatal(self) -> None:
        with pytest.raises(SchemaError, match="not an interface"):
            RootNode(BadInterfaceQuery())

    def test_union_members_must_be_objects(self) -> None:
        with pytest.raises(SchemaError, match="not an object type"):
            RootNode(BadUnionQuery())

    def test_root_must_be_an_object_type(self) -> None:
        with pytest.raises(SchemaError, match="Root type"):
            RootNode(Size())

    def test_enum_and_input_object_metadata(self) -> None:
        schema = RootNode(InputQuery()).schema
        size = schema.type_by_name("Size")
        assert isinstance(size, EnumMeta)
        assert [v.name for v in size.values] == ["SMALL", "LARGE"]
        assert size.parse("LARGE") == 2
        assert size.serialize(1) == "SMALL"

        filter_meta = schema.type_by_name("Filter")
        assert isinstance(filter_meta, InputObjectMeta)
        assert filter_meta.kind is TypeKind.INPUT_OBJECT
        limit = filter_meta.input_field_by_name("limit")
        assert limit.default_value.as_scalar().value == 10

        people = schema.query_type.field_by_name("people")
        assert people.argument_by_name("first").arg_type == TypeRef.parse("Int!")
        assert people.argument_by_name("first").description == "Page size"

    def test_schema_build_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="typegraph.schema.root"):
            RootNode(NamedQuery(), types=[Person, Pet])
        assert "Built schema with" in caplog.text
        assert "query=Query, mutation=None" in caplog.text

    def test_schema_is_read_only(self, root) -> None:
        with pytest.raises(TypeError):
            root.schema.types["Extra"] = None

    def test_concrete_type_by_name(self, root) -> None:
        schema = root.schema
        assert schema.concrete_type_by_name("Human").name == "Human"
        assert schema.concrete_type_by_name("Character").name == "Character"
        assert schema.concrete_type_by_name("Episode") is None
        assert schema.mutation_type.name == "Mutation"
