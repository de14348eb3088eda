"""Tests for asynchronous execution: ordering, concurrency, serial mutations and cancellation."""

import asyncio

import pytest

from typegraph import (
    Arg,
    EngineConfig,
    FieldError,
    ListOf,
    NonNull,
    ObjectType,
    RootNode,
    UnimplementedCapabilityError,
    execute,
    execute_async,
    field,
)

# --- Fixtures ---


class Row(ObjectType):
    def __init__(self, index, delay, cancelled=None):
        self._index = index
        self._delay = delay
        self._cancelled = cancelled

    @field("Int!")
    async def index(self, executor):
        try:
            await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            if self._cancelled is not None:
                self._cancelled.append(f"row {self._index}")
            raise
        return self._index


class Opaque:
    """Host value without any resolution capability."""


class Query(ObjectType):
    def __init__(self):
        self.finished = []
        self.cancelled = []

    @field("String")
    async def slow(self, executor):
        await asyncio.sleep(0.05)
        self.finished.append("slow")
        return "slow"

    @field("String")
    async def fast(self, executor):
        self.finished.append("fast")
        return "fast"

    @field("String")
    def plain(self, executor):
        return "plain"

    @field("String!")
    async def broken(self, executor):
        raise FieldError("broken")

    @field("String")
    async def slow_failure(self, executor):
        await asyncio.sleep(0.05)
        raise FieldError("slow failure")

    @field("String")
    async def fast_failure(self, executor):
        raise FieldError("fast failure")

    @field("String")
    async def hang(self, executor):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled.append("hang")
            raise
        return "never"

    @field(ListOf(NonNull(Row)))
    def rows(self, executor):
        return [Row(0, 0.03), Row(1, 0.0), Row(2, 0.01)]

    @field(ListOf(Row))
    def mixed_rows(self, executor):
        return [Row(0, 10, self.cancelled), Opaque()]


class Mutation(ObjectType):
    def __init__(self):
        self.log = []

    @field("Int", args={"by": Arg("Int!")})
    async def increment(self, executor, by):
        self.log.append(("start", by))
        await asyncio.sleep(0.02 if by == 1 else 0)
        self.log.append(("end", by))
        return by


@pytest.fixture
def query() -> Query:
    return Query()


@pytest.fixture
def async_root(query: Query) -> RootNode:
    return RootNode(query, Mutation())


async def run(root, source, **kwargs):
    value, errors = await execute_async(source, root, **kwargs)
    return value.to_python(), errors


# --- Ordering and concurrency ---


class TestOrdering:
    @pytest.mark.asyncio
    async def test_declaration_order_despite_completion_order(self, async_root: RootNode, query: Query) -> None:
        data, errors = await run(async_root, "{ slow fast plain }")
        assert list(data) == ["slow", "fast", "plain"]
        assert query.finished == ["fast", "slow"]
        assert errors == []

    @pytest.mark.asyncio
    async def test_sequential_fields_when_concurrency_is_off(self, async_root: RootNode, query: Query) -> None:
        config = EngineConfig(concurrent_fields=False)
        data, _ = await run(async_root, "{ slow fast }", config=config)
        assert data == {"slow": "slow", "fast": "fast"}
        assert query.finished == ["slow", "fast"]

    @pytest.mark.asyncio
    async def test_list_items_keep_index_order(self, async_root: RootNode) -> None:
        data, _ = await run(async_root, "{ rows { index } }")
        assert data == {"rows": [{"index": 0}, {"index": 1}, {"index": 2}]}

    @pytest.mark.asyncio
    async def test_errors_sorted_by_location(self, async_root: RootNode) -> None:
        source = "{\n  slowFailure\n  fastFailure\n}"
        _, errors = await run(async_root, source)
        assert [e.message for e in errors] == ["slow failure", "fast failure"]
        assert [e.locations[0].line for e in errors] == [2, 3]

    @pytest.mark.asyncio
    async def test_errors_in_record_order_without_sorting(self, async_root: RootNode) -> None:
        source = "{\n  slowFailure\n  fastFailure\n}"
        _, errors = await run(async_root, source, config=EngineConfig(sort_errors=False))
        assert [e.message for e in errors] == ["fast failure", "slow failure"]


# --- Mutations ---


class TestMutations:
    @pytest.mark.asyncio
    async def test_root_fields_run_serially(self, async_root: RootNode) -> None:
        data, _ = await run(async_root, "mutation { first: increment(by: 1) second: increment(by: 2) }")
        assert data == {"first": 1, "second": 2}
        assert async_root.mutation.log == [("start", 1), ("end", 1), ("start", 2), ("end", 2)]


# --- Null propagation ---


class TestCollapse:
    @pytest.mark.asyncio
    async def test_collapse_cancels_pending_siblings(self, async_root: RootNode, query: Query) -> None:
        value, errors = await execute_async("{ broken hang }", async_root)
        await asyncio.sleep(0.01)
        assert value.is_null()
        assert [e.message for e in errors] == ["broken"]
        assert query.cancelled == ["hang"]

    @pytest.mark.asyncio
    async def test_sibling_failure_keeps_other_fields(self, async_root: RootNode) -> None:
        data, errors = await run(async_root, "{ fast fastFailure plain }")
        assert data == {"fast": "fast", "fastFailure": None, "plain": "plain"}
        assert errors[0].path == ["fastFailure"]


# --- Example schema ---


class TestStarWarsAsync:
    @pytest.mark.asyncio
    async def test_droid_friends(self, root, database) -> None:
        data, errors = await run(root, "{ hero { name friends { name } } }", context=database)
        assert data == {"hero": {
            "name": "R2-D2",
            "friends": [{"name": "Luke Skywalker"}, {"name": "Han Solo"}, {"name": "Leia Organa"}],
        }}
        assert errors == []

    @pytest.mark.asyncio
    async def test_fragments_and_downcasts(self, root, database) -> None:
        source = """
            query {
              hero {
                __typename
                ...Details
              }
            }
            fragment Details on Character {
              id
              ... on Droid { primaryFunction }
              ... on Human { homePlanet }
            }
        """
        data, errors = await run(root, source, context=database)
        assert data == {"hero": {"__typename": "Droid", "id": "2001", "primaryFunction": "Astromech"}}
        assert errors == []

    @pytest.mark.asyncio
    async def test_sync_and_async_agree(self, root, database) -> None:
        source = '{ human(id: "1003") { name homePlanet friends { name } } }'
        sync_value, sync_errors = execute(source, root, context=database)
        async_value, async_errors = await execute_async(source, root, context=database)
        assert sync_value == async_value
        assert sync_errors == async_errors == []


# --- Fatal errors ---


class TestFatalErrorsAsync:
    @pytest.mark.asyncio
    async def test_value_without_async_capability(self) -> None:
        class OpaqueQuery(ObjectType):
            graphql_name = "Query"

            @field(Row)
            def row(self, executor):
                return Opaque()

        with pytest.raises(UnimplementedCapabilityError):
            await execute_async("{ row { index } }", RootNode(OpaqueQuery()))

    @pytest.mark.asyncio
    async def test_fatal_list_item_cancels_its_siblings(self, async_root: RootNode, query: Query) -> None:
        with pytest.raises(UnimplementedCapabilityError):
            await execute_async("{ mixedRows { index } }", async_root)
        await asyncio.sleep(0.01)
        assert query.cancelled == ["row 0"]
