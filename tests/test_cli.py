"""Tests for the typegraph command line interface."""

import json
from pathlib import Path

import pytest

from typegraph.cli import app
from typegraph.cli.main import create_parser, import_object, load_root

# --- Fixtures ---


@pytest.fixture
def cli_args(example_dir: Path) -> list:
    return ["--app-dir", str(example_dir)]


# --- Helpers ---


class TestImportObject:
    def test_module_attribute(self) -> None:
        assert import_object("json:dumps") is json.dumps

    def test_dotted_attribute(self) -> None:
        assert import_object("pathlib:Path.cwd") == Path.cwd

    def test_invalid_reference(self) -> None:
        with pytest.raises(ValueError):
            import_object("json")

    def test_load_root(self, root) -> None:
        assert load_root("starwars:root") is root

    def test_load_root_rejects_other_objects(self) -> None:
        with pytest.raises(ValueError):
            load_root("starwars:Database")


# --- Commands ---


class TestExecuteCommand:
    def test_execute_async(self, cli_args: list, example_dir: Path, capsys) -> None:
        code = app(cli_args + [
            "execute", "starwars:root", str(example_dir / "hero.graphql"),
            "--context", "starwars:context",
        ])
        assert code == 0
        response = json.loads(capsys.readouterr().out)
        hero = response["data"]["hero"]
        assert hero["__typename"] == "Droid"
        assert hero["name"] == "R2-D2"
        assert hero["primaryFunction"] == "Astromech"
        assert [friend["name"] for friend in hero["friends"]] == ["Luke Skywalker", "Han Solo", "Leia Organa"]
        assert [item["name"] for item in response["data"]["search"]] == ["Han Solo", "Leia Organa", "C-3PO"]
        assert "errors" not in response

    def test_execute_with_variables(self, cli_args: list, example_dir: Path, capsys) -> None:
        code = app(cli_args + [
            "execute", "starwars:root", str(example_dir / "hero.graphql"),
            "--context", "starwars:context",
            "--variables", str(example_dir / "episode.yaml"),
        ])
        assert code == 0
        response = json.loads(capsys.readouterr().out)
        assert response["data"]["hero"]["name"] == "Luke Skywalker"
        assert "primaryFunction" not in response["data"]["hero"]

    def test_sync_execution_of_async_field_fails(self, cli_args: list, example_dir: Path, capsys) -> None:
        code = app(cli_args + [
            "execute", "starwars:root", str(example_dir / "hero.graphql"),
            "--context", "starwars:context", "--sync",
        ])
        assert code == 1
        assert "asynchronous" in capsys.readouterr().out

    def test_sync_execution(self, cli_args: list, tmp_path: Path, capsys) -> None:
        query = tmp_path / "query.graphql"
        query.write_text('{ human(id: "1003") { name homePlanet } }')
        code = app(cli_args + ["execute", "starwars:root", str(query), "--context", "starwars:context", "--sync"])
        assert code == 0
        response = json.loads(capsys.readouterr().out)
        assert response == {"data": {"human": {"name": "Leia Organa", "homePlanet": "Alderaan"}}}

    def test_field_errors_are_reported(self, cli_args: list, tmp_path: Path, capsys) -> None:
        query = tmp_path / "query.graphql"
        query.write_text("{ hero { name } }")
        # Without a context the resolver fails; hero is nullable
        code = app(cli_args + ["execute", "starwars:root", str(query)])
        assert code == 0
        response = json.loads(capsys.readouterr().out)
        assert response["data"] == {"hero": None}
        assert response["errors"][0]["path"] == ["hero"]

    def test_config_file(self, cli_args: list, tmp_path: Path, capsys) -> None:
        query = tmp_path / "query.graphql"
        query.write_text("{ hero { name } }")
        config = tmp_path / "typegraph.yaml"
        config.write_text("mask_internal_errors: true\nmasked_error_message: Nope\n")
        code = app(cli_args + ["execute", "starwars:root", str(query), "--config", str(config)])
        assert code == 0
        response = json.loads(capsys.readouterr().out)
        assert response["errors"][0]["message"] == "Nope"

    def test_missing_query_file(self, cli_args: list, tmp_path: Path, capsys) -> None:
        code = app(cli_args + ["execute", "starwars:root", str(tmp_path / "missing.graphql")])
        assert code == 1
        assert "not found" in capsys.readouterr().out

    def test_syntax_error(self, cli_args: list, tmp_path: Path, capsys) -> None:
        query = tmp_path / "query.graphql"
        query.write_text("{ hero {")
        code = app(cli_args + ["execute", "starwars:root", str(query)])
        assert code == 1
        assert "Syntax error" in capsys.readouterr().out

    def test_bad_schema_reference(self, cli_args: list, tmp_path: Path, capsys) -> None:
        query = tmp_path / "query.graphql"
        query.write_text("{ hero { name } }")
        code = app(cli_args + ["execute", "no_such_module:root", str(query)])
        assert code == 1
        assert "Error loading schema" in capsys.readouterr().out


class TestTypesCommand:
    def test_lists_types(self, cli_args: list, capsys) -> None:
        code = app(cli_args + ["types", "starwars:root"])
        assert code == 0
        lines = capsys.readouterr().out.splitlines()
        assert "INTERFACE     Character" in lines
        assert "OBJECT        Human" in lines
        assert "    homePlanet: String" in lines
        assert "    = Human | Droid" in lines
        assert "    NEW_HOPE" in lines
        assert "    stars: Int!" in lines


class TestParser:
    def test_no_command_prints_help(self, capsys) -> None:
        assert app([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_execute_options(self) -> None:
        parsed = create_parser().parse_args(["execute", "s:root", "q.graphql", "-o", "Hero", "--sync"])
        assert parsed.operation == "Hero"
        assert parsed.sync is True
        assert parsed.log_level == "WARNING"
