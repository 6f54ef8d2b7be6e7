"""Tests for the offline compile command."""

import json

from tests.cli.conftest import invoke


def test_compile_json(runner):
    result = invoke(runner, ["compile", "--filter", '{"status": "active"}'], json_output=True)
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {
        "query": "SELECT * FROM c WHERE c.status = @p0",
        "parameters": [{"name": "@p0", "value": "active"}],
    }


def test_compile_text_shows_parameters(runner):
    result = invoke(runner, ["compile", "-f", '{"age": {"$gte": 25, "$lt": 30}}', "--sort=-age"])
    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "SELECT * FROM c WHERE c.age >= @p0 AND c.age < @p1 ORDER BY c.age DESC"
    assert "@p0" in result.stdout
    assert "25" in result.stdout


def test_compile_where(runner):
    args = ["compile", "-w", "name sw \"J\"", "-w", "age gte 25"]
    result = invoke(runner, args, json_output=True)
    assert result.exit_code == 0
    assert json.loads(result.stdout)["query"] == (
        "SELECT * FROM c WHERE STARTSWITH(c.name, @p0) AND c.age >= @p1"
    )


def test_compile_count(runner):
    result = invoke(runner, ["compile", "--count", "-f", '{"a": 1}'])
    assert result.exit_code == 0
    assert result.stdout.splitlines()[0] == "SELECT VALUE COUNT(1) FROM c WHERE c.a = @p0"


def test_compile_projection(runner):
    result = invoke(runner, ["compile", "--field", "id", "--field", "name"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "SELECT c.id, c.name FROM c"


def test_compile_invalid_filter(runner):
    result = invoke(runner, ["compile", "--filter", "{nope"])
    assert result.exit_code == 2
    assert "not valid JSON" in result.output


def test_compile_unknown_where_operator(runner):
    result = invoke(runner, ["compile", "-w", "a like 1"])
    assert result.exit_code == 2
    assert "Unknown filter operator" in result.output


def test_version(runner):
    result = invoke(runner, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("docstore ")
