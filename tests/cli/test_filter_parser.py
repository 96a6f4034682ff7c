"""Tests for CLI filter parser."""

import pytest

from mockbase.cli._filters import parse_cli_filters
from mockbase.cli.query import _parse_filter_args


def test_parse_empty():
    assert parse_cli_filters([]) == []


def test_parse_single_eq():
    [result] = parse_cli_filters([("status", "eq", '"open"')])
    assert result.column == "status"
    assert result.op == "eq"
    assert result.value == "open"


def test_parse_numeric():
    [result] = parse_cli_filters([("spare_kg", "gt", "25")])
    assert result.value == 25


def test_parse_in():
    [result] = parse_cli_filters([("status", "in", '["open","matched"]')])
    assert result.op == "in"
    assert result.value == ["open", "matched"]


def test_parse_is_null():
    [result] = parse_cli_filters([("boat_name", "is", "null")])
    assert result.op == "is"
    assert result.value is None


def test_ne_alias():
    [result] = parse_cli_filters([("status", "ne", '"open"')])
    assert result.op == "neq"


def test_parse_all_ops():
    for op_token in ("eq", "neq", "gt", "gte", "lt", "lte", "is", "contains"):
        [result] = parse_cli_filters([("col", op_token, "1")])
        assert result.op == op_token
    for op_token in ("like", "ilike"):
        [result] = parse_cli_filters([("col", op_token, '"a%"')])
        assert result.op == op_token


def test_unknown_op():
    with pytest.raises(ValueError, match="Unknown filter operator"):
        parse_cli_filters([("col", "between", "1")])


def test_in_requires_list():
    with pytest.raises(ValueError, match="list, tuple or set"):
        parse_cli_filters([("col", "in", '"open"')])


def test_like_requires_string():
    with pytest.raises(ValueError, match="pattern must be a string"):
        parse_cli_filters([("col", "like", "5")])


def test_filter_args_groups_of_three():
    result = _parse_filter_args(["a", "eq", "1", "b", "lt", "2"])
    assert [(f.column, f.op, f.value) for f in result] == [("a", "eq", 1), ("b", "lt", 2)]


def test_filter_args_value_with_spaces():
    [result] = _parse_filter_args(['to_location eq "St. Martin"'])
    assert result.value == "St. Martin"
