"""Tests for synchronous execution: fields, fragments, null propagation and errors."""

import pytest

from typegraph import (
    EngineConfig,
    FieldError,
    FieldNotFoundError,
    InstanceResolutionError,
    InterfaceType,
    ListOf,
    NonNull,
    ObjectType,
    OperationError,
    ResponseAssembler,
    RootNode,
    UnimplementedCapabilityError,
    UnionType,
    WithContext,
    execute,
    field,
    instance_resolver,
)

# --- Fixtures ---


class Inner(ObjectType):
    @field("String")
    def ok(self, executor):
        return "ok"

    @field("String!")
    def fails(self, executor):
        raise FieldError("Inner failed")


class Middle(ObjectType):
    @field(Inner)
    def nullable_inner(self, executor):
        return Inner()

    @field(NonNull(Inner))
    def required_inner(self, executor):
        return Inner()

    @field("String")
    def sibling(self, executor):
        return "sibling"


class Item(ObjectType):
    def __init__(self, label, fail=False):
        self._label = label
        self._fail = fail

    @field("String!")
    def label(self, executor):
        if self._fail:
            raise FieldError(f"{self._label} failed")
        return self._label


class Whoami(ObjectType):
    @field("String")
    def user(self, executor):
        return executor.context["user"]


class Cat(ObjectType):
    name = field("String")

    def __init__(self, name):
        self.name = name


class Dog(ObjectType):
    name = field("String")

    def __init__(self, name):
        self.name = name


class Pet(UnionType):
    # Both accessors always match; the first declared one wins
    @instance_resolver(Cat)
    def as_cat(self, context):
        return Cat(self.value)

    @instance_resolver(Dog)
    def as_dog(self, context):
        return Dog(self.value)


class Shape(InterfaceType):
    sides = field("Int")

    @instance_resolver(Cat)
    def as_cat(self, context):
        return None


class Query(ObjectType):
    a = field("String")
    b = field("String")
    number = field("Int")

    def __init__(self):
        self.a = "A"
        self.b = "B"
        self.number = 2147483648

    @field("String")
    def broken(self, executor):
        raise FieldError("Boom", {"code": "BOOM"})

    @field("String")
    def crash(self, executor):
        raise RuntimeError("connection string leaked")

    @field(Middle)
    def middle(self, executor):
        return Middle()

    @field("String")
    def other(self, executor):
        return "other"

    @field("String!")
    def required(self, executor):
        raise FieldError("required failed")

    @field("String!")
    def required_none(self, executor):
        return None

    @field(ListOf(NonNull(Item)))
    def items(self, executor):
        return [Item("a"), Item("b", fail=True)]

    @field(ListOf(Item))
    def maybe_items(self, executor):
        return [Item("a"), Item("b", fail=True)]

    @field(Whoami)
    def me(self, executor):
        return Whoami()

    @field(Whoami)
    def as_admin(self, executor):
        return WithContext({"user": "admin"}, Whoami())

    @field(Pet)
    def pet(self, executor):
        return Pet("Rex")

    @field(Shape)
    def shape(self, executor):
        return Shape(object())

    @field(Inner)
    def opaque(self, executor):
        return object()

    @field("String")
    async def later(self, executor):
        return "later"


@pytest.fixture
def query_root() -> RootNode:
    return RootNode(Query(), types=[Cat, Dog])


def run(root, source, **kwargs):
    value, errors = execute(source, root, **kwargs)
    return value.to_python(), [error.to_dict() for error in errors]


# --- Fields ---


class TestFields:
    def test_scalar_fields_in_declaration_order(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ b a }")
        assert data == {"b": "B", "a": "A"}
        assert list(data) == ["b", "a"]
        assert errors == []

    def test_aliases(self, query_root: RootNode) -> None:
        data, _ = run(query_root, "{ first: a second: a }")
        assert data == {"first": "A", "second": "A"}

    def test_one_failing_sibling(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ a broken b }")
        assert data == {"a": "A", "broken": None, "b": "B"}
        assert errors == [{
            "message": "Boom",
            "locations": [{"line": 1, "column": 5}],
            "path": ["broken"],
            "extensions": {"code": "BOOM"},
        }]

    def test_int_out_of_range_is_field_error(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ number }")
        assert data == {"number": None}
        assert "32-bit" in errors[0]["message"]

    def test_unexpected_exception_is_recorded(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ crash }")
        assert data == {"crash": None}
        assert errors[0]["message"] == "connection string leaked"

    def test_unexpected_exception_is_masked(self, query_root: RootNode) -> None:
        config = EngineConfig(mask_internal_errors=True)
        data, errors = run(query_root, "{ crash broken }", config=config)
        assert [e["message"] for e in errors] == ["Internal server error", "Boom"]

    def test_response_assembly(self, query_root: RootNode) -> None:
        value, errors = execute("{ a }", query_root)
        assert ResponseAssembler().assemble(value, errors) == {"data": {"a": "A"}}
        assert ResponseAssembler().to_json(value, errors) == '{"data": {"a": "A"}}'


# --- Null propagation ---


class TestNullPropagation:
    def test_nullable_parent_absorbs_null(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ middle { nullableInner { ok fails } sibling } other }")
        assert data == {"middle": {"nullableInner": None, "sibling": "sibling"}, "other": "other"}
        assert [e["path"] for e in errors] == [["middle", "nullableInner", "fails"]]

    def test_non_null_parent_propagates_further(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ middle { requiredInner { fails } sibling } other }")
        assert data == {"middle": None, "other": "other"}
        assert [e["path"] for e in errors] == [["middle", "requiredInner", "fails"]]

    def test_root_collapses(self, query_root: RootNode) -> None:
        value, errors = execute("{ other required }", query_root)
        assert value.is_null()
        response = ResponseAssembler().assemble(value, errors)
        assert response["data"] is None
        assert response["errors"][0]["message"] == "required failed"

    def test_null_from_non_null_field(self, query_root: RootNode) -> None:
        value, errors = execute("{ requiredNone }", query_root)
        assert value.is_null()
        assert errors[0].message == "Cannot return null for non-nullable field Query.requiredNone"

    def test_non_null_items_null_the_list(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ items { label } }")
        assert data == {"items": None}
        assert errors[0]["path"] == ["items", 1, "label"]
        assert errors[0]["message"] == "b failed"

    def test_nullable_items_null_only_the_item(self, query_root: RootNode) -> None:
        data, errors = run(query_root, "{ maybeItems { label } }")
        assert data == {"maybeItems": [{"label": "a"}, None]}
        assert errors[0]["path"] == ["maybeItems", 1, "label"]


# --- Fragments and abstract types ---


class TestFragments:
    def test_same_fragment_spread_twice(self, root, database) -> None:
        source = "{ hero { ...Name ...Name } } fragment Name on Character { name }"
        data, errors = run(root, source, context=database)
        assert data == {"hero": {"name": "R2-D2"}}
        assert errors == []

    def test_non_matching_type_condition_is_skipped(self, root, database) -> None:
        data, errors = run(root, "{ hero { __typename ... on Human { id } } }", context=database)
        assert data == {"hero": {"__typename": "Droid"}}
        assert errors == []

    def test_matching_type_condition_downcasts(self, root, database) -> None:
        source = "{ hero(episode: EMPIRE) { __typename name ... on Human { homePlanet } } }"
        data, errors = run(root, source, context=database)
        assert data == {"hero": {"__typename": "Human", "name": "Luke Skywalker", "homePlanet": "Tatooine"}}
        assert errors == []

    def test_inline_fragment_collision_last_write_wins(self, root, database) -> None:
        source = "{ hero { name ... on Droid { name: primaryFunction } } }"
        data, _ = run(root, source, context=database)
        assert data == {"hero": {"name": "Astromech"}}

    def test_untyped_inline_fragment_merges(self, query_root: RootNode) -> None:
        data, _ = run(query_root, "{ a ... { b } }")
        assert data == {"a": "A", "b": "B"}

    def test_typename_keeps_declaration_order(self, root, database) -> None:
        data, _ = run(root, "{ hero { name __typename id } }", context=database)
        assert list(data["hero"]) == ["name", "__typename", "id"]

    def test_union_first_matching_accessor_wins(self, query_root: RootNode) -> None:
        source = "{ pet { __typename ... on Cat { meow: name } ... on Dog { bark: name } } }"
        data, errors = run(query_root, source)
        assert data == {"pet": {"__typename": "Cat", "meow": "Rex"}}
        assert errors == []

    def test_union_search(self, root, database) -> None:
        source = "{ search(text: \"r2\") { __typename ... on Droid { primaryFunction } } }"
        data, _ = run(root, source, context=database)
        assert data == {"search": [{"__typename": "Droid", "primaryFunction": "Astromech"}]}

    def test_directives(self, query_root: RootNode) -> None:
        data, _ = run(query_root, "{ a @skip(if: true) b @include(if: false) other ... @skip(if: true) { number } }")
        assert data == {"other": "other"}


# --- Context ---


class TestContext:
    def test_with_context_replaces_context_for_subtree(self, query_root: RootNode) -> None:
        data, _ = run(query_root, "{ asAdmin { user } me { user } }", context={"user": "guest"})
        assert data == {"asAdmin": {"user": "admin"}, "me": {"user": "guest"}}


# --- Fatal errors ---


class TestFatalErrors:
    def test_unknown_field(self, query_root: RootNode) -> None:
        with pytest.raises(FieldNotFoundError):
            execute("{ nope }", query_root)

    def test_unresolvable_abstract_instance(self, query_root: RootNode) -> None:
        with pytest.raises(InstanceResolutionError):
            execute("{ shape { __typename } }", query_root)

    def test_value_without_resolution_capability(self, query_root: RootNode) -> None:
        with pytest.raises(UnimplementedCapabilityError):
            execute("{ opaque { ok } }", query_root)

    def test_async_resolver_in_sync_execution(self, query_root: RootNode) -> None:
        with pytest.raises(UnimplementedCapabilityError, match="asynchronous"):
            execute("{ later }", query_root)

    def test_missing_mutation_root(self, query_root: RootNode) -> None:
        with pytest.raises(OperationError):
            execute("mutation { a }", query_root)

    def test_subscriptions_are_not_supported(self, query_root: RootNode) -> None:
        with pytest.raises(OperationError):
            execute("subscription { a }", query_root)

    def test_operation_name_required_for_multiple_operations(self, query_root: RootNode) -> None:
        with pytest.raises(OperationError):
            execute("query A { a } query B { b }", query_root)

    def test_named_operation(self, query_root: RootNode) -> None:
        data, _ = run(query_root, "query A { a } query B { b }", operation_name="B")
        assert data == {"b": "B"}


# --- Example schema ---


class TestStarWars:
    def test_human_through_shared_handle(self, root, database) -> None:
        data, errors = run(root, '{ human(id: "1000") { name friends { name } } }', context=database)
        assert data == {"human": {
            "name": "Luke Skywalker",
            "friends": [
                {"name": "Han Solo"},
                {"name": "Leia Organa"},
                {"name": "C-3PO"},
                {"name": "R2-D2"},
            ],
        }}
        assert errors == []

    def test_wrong_kind_of_character_is_null(self, root, database) -> None:
        data, _ = run(root, '{ human(id: "2000") { name } }', context=database)
        assert data == {"human": None}

    def test_enum_list(self, root, database) -> None:
        data, _ = run(root, '{ droid(id: "2001") { appearsIn } }', context=database)
        assert data == {"droid": {"appearsIn": ["NEW_HOPE", "EMPIRE", "JEDI"]}}

    def test_enum_variable(self, root, database) -> None:
        source = "query ($episode: Episode) { hero(episode: $episode) { name } }"
        data, _ = run(root, source, variables={"episode": "EMPIRE"}, context=database)
        assert data == {"hero": {"name": "Luke Skywalker"}}

    def test_mutation(self, root, database) -> None:
        source = """
            mutation {
              createReview(episode: JEDI, review: {stars: 5, commentary: "Great"}) {
                episode stars commentary
              }
            }
        """
        data, errors = run(root, source, context=database)
        assert data == {"createReview": {"episode": "JEDI", "stars": 5, "commentary": "Great"}}
        assert errors == []
        assert len(database.reviews) == 1

    def test_async_field_in_sync_execution_is_fatal(self, root, database) -> None:
        with pytest.raises(UnimplementedCapabilityError):
            execute("{ hero { friends { name } } }", root, context=database)
