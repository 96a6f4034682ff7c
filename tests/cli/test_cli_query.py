"""Tests for mockbase query."""

import json

from tests.cli.conftest import invoke


def test_query_text(runner, fixtures_json):
    result = invoke(runner, ["query", "trips"], fixtures_json)
    assert result.exit_code == 0
    assert "spare_kg" in result.output
    assert "t4" in result.output


def test_query_json(runner, fixtures_json):
    result = invoke(runner, ["--json", "query", "trips"], fixtures_json)
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [d["id"] for d in data] == ["t1", "t2", "t3", "t4"]


def test_query_yaml_fixtures(runner, fixtures_yaml):
    result = invoke(runner, ["--json", "query", "trips", "--limit", "1"], fixtures_yaml)
    assert result.exit_code == 0
    assert len(json.loads(result.output)) == 1


def test_query_filter_string(runner, fixtures_json):
    result = invoke(
        runner,
        ["--json", "query", "trips", "--filter", 'type eq "boat"', "--filter", "spare_kg gte 100"],
        fixtures_json,
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [d["id"] for d in data] == ["t2"]


def test_query_filter_triples(runner, fixtures_json):
    result = invoke(
        runner,
        [
            "--json",
            "query",
            "trips",
            "--filter",
            "user_id",
            "--filter",
            "eq",
            "--filter",
            '"u1"',
        ],
        fixtures_json,
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert [d["id"] for d in data] == ["t1", "t3"]


def test_query_in_and_contains(runner, fixtures_json):
    result = invoke(
        runner,
        ["--json", "query", "requests", "--filter", 'tags contains ["cold"]'],
        fixtures_json,
    )
    assert [d["id"] for d in json.loads(result.output)] == ["r2"]
    result = invoke(
        runner,
        ["--json", "query", "requests", "--filter", 'status in ["open", "closed"]'],
        fixtures_json,
    )
    assert [d["id"] for d in json.loads(result.output)] == ["r1"]


def test_query_ilike(runner, fixtures_json):
    result = invoke(
        runner,
        ["--json", "query", "requests", "--filter", 'title ilike "insu%"'],
        fixtures_json,
    )
    assert [d["id"] for d in json.loads(result.output)] == ["r2"]


def test_query_select_order_range(runner, fixtures_json):
    result = invoke(
        runner,
        [
            "--json",
            "query",
            "trips",
            "--select",
            "id,spare_kg",
            "--order",
            "spare_kg",
            "--desc",
            "--range",
            "0",
            "1",
        ],
        fixtures_json,
    )
    assert result.exit_code == 0
    assert json.loads(result.output) == [
        {"id": "t2", "spare_kg": 150},
        {"id": "t1", "spare_kg": 20},
    ]


def test_query_count(runner, fixtures_json):
    result = invoke(
        runner, ["--json", "query", "trips", "--count", "--limit", "1"], fixtures_json
    )
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["count"] == 4
    assert len(data["data"]) == 1


def test_query_no_results(runner, fixtures_json):
    result = invoke(runner, ["query", "trips", "--filter", 'status eq "x"'], fixtures_json)
    assert result.exit_code == 0
    assert "No results." in result.output


def test_query_unknown_operator(runner, fixtures_json):
    result = invoke(runner, ["query", "trips", "--filter", "spare_kg between 1"], fixtures_json)
    assert result.exit_code == 2
    assert "Unknown filter operator" in result.output


def test_query_bad_filter_shape(runner, fixtures_json):
    result = invoke(runner, ["query", "trips", "--filter", "spare_kg"], fixtures_json)
    assert result.exit_code == 2


def test_query_bad_json_value(runner, fixtures_json):
    result = invoke(runner, ["query", "trips", "--filter", "type eq boat"], fixtures_json)
    assert result.exit_code == 2
    assert "not valid JSON" in result.output


def test_query_missing_fixture_file(runner, tmp_path):
    result = invoke(runner, ["query", "trips"], str(tmp_path / "missing.json"))
    assert result.exit_code == 1
    assert "file not found" in result.output


def test_query_malformed_fixture_file(runner, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('["not", "a", "mapping"]')
    result = invoke(runner, ["query", "trips"], str(path))
    assert result.exit_code == 1
    assert "top level must be a mapping" in result.output
