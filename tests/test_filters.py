"""Tests for filter expressions."""

from __future__ import annotations

import pytest

from mockbase.errors import InvalidFilterError
from mockbase.filters import (
    ComparisonExpression,
    RawOrExpression,
    apply_filters,
    compile_like,
)


def matches(op, field_value, value):
    return ComparisonExpression("col", op, value).matches({"col": field_value})


class TestComparisonExpression:
    def test_creation(self):
        expr = ComparisonExpression("status", "eq", "open")
        assert expr.column == "status"
        assert expr.op == "eq"
        assert expr.value == "open"

    def test_unknown_operator(self):
        with pytest.raises(InvalidFilterError, match="unknown operator"):
            ComparisonExpression("status", "==", "open")

    def test_empty_column(self):
        with pytest.raises(InvalidFilterError, match="column"):
            ComparisonExpression("", "eq", 1)

    def test_pattern_must_be_string(self):
        with pytest.raises(InvalidFilterError, match="pattern must be a string"):
            ComparisonExpression("title", "like", 5)

    @pytest.mark.parametrize("bad", ["abc", b"abc", {"a": 1}, 3])
    def test_in_requires_collection(self, bad):
        with pytest.raises(InvalidFilterError, match="list, tuple or set"):
            ComparisonExpression("status", "in", bad)


class TestOperators:
    def test_eq_neq(self):
        assert matches("eq", "open", "open")
        assert not matches("eq", "open", "closed")
        assert matches("neq", "open", "closed")
        assert matches("neq", None, "closed")

    def test_ordered(self):
        assert matches("gt", 5, 3)
        assert not matches("gt", 3, 3)
        assert matches("gte", 3, 3)
        assert matches("lt", 1, 3)
        assert matches("lte", 3, 3)

    def test_ordered_with_iso_strings(self):
        assert matches("gte", "2024-06-01T00:00:00+00:00", "2024-01-01T00:00:00+00:00")

    def test_ordered_with_none_or_mixed_is_false(self):
        assert not matches("gt", None, 3)
        assert not matches("lt", "abc", 3)

    def test_is(self):
        assert matches("is", None, None)
        assert matches("is", None, True)
        assert matches("is", True, True)
        assert not matches("is", False, True)

    def test_in(self):
        assert matches("in", "open", ["open", "matched"])
        assert not matches("in", "cancelled", ("open", "matched"))
        assert matches("in", 2, {1, 2})

    def test_in_unhashable_field(self):
        assert not matches("in", ["a"], {"a", "b"})

    def test_contains_scalar(self):
        assert matches("contains", ["plane", "boat"], "boat")
        assert not matches("contains", ["plane"], "boat")

    def test_contains_list_means_all(self):
        assert matches("contains", ["a", "b", "c"], ["a", "c"])
        assert not matches("contains", ["a", "b"], ["a", "z"])

    def test_contains_non_array_field(self):
        assert not matches("contains", "boat", "boat")
        assert not matches("contains", None, "boat")


class TestBoolAndNumberEquality:
    ROWS = [
        {"id": "a", "flag": True},
        {"id": "b", "flag": 1},
        {"id": "c", "flag": 0},
    ]

    def ids(self, *filters):
        return [r["id"] for r in apply_filters(self.ROWS, list(filters))]

    def test_eq_number_skips_bool(self):
        assert self.ids(ComparisonExpression("flag", "eq", 1)) == ["b"]
        assert self.ids(ComparisonExpression("flag", "eq", True)) == ["a"]

    def test_neq_bool_keeps_zero(self):
        assert self.ids(ComparisonExpression("flag", "neq", False)) == ["a", "b", "c"]

    def test_in_bool(self):
        assert self.ids(ComparisonExpression("flag", "in", [True])) == ["a"]
        assert self.ids(ComparisonExpression("flag", "in", [0, 1])) == ["b", "c"]

    def test_is_bool_does_not_match_number(self):
        assert self.ids(ComparisonExpression("flag", "is", False)) == []

    def test_contains(self):
        assert not matches("contains", [True], 1)
        assert not matches("contains", [True, False], [1])
        assert matches("contains", [1, True], [True, 1])

    def test_nested_values(self):
        assert not matches("eq", [True], [1])
        assert not matches("eq", {"a": 0}, {"a": False})
        assert matches("eq", {"a": [1]}, {"a": [1]})

    def test_int_float_still_equal(self):
        assert matches("eq", 1, 1.0)


class TestLike:
    def test_percent_matches_any_run(self):
        assert matches("like", "Test Request", "Test%")
        assert matches("like", "Test Request", "%Request")
        assert matches("like", "Test Request", "%st R%")

    def test_anchored(self):
        assert not matches("like", "My Test Request", "Test%")

    def test_every_percent_is_a_wildcard(self):
        assert matches("like", "a-b-c", "a%b%c")

    def test_underscore_matches_one_char(self):
        assert matches("like", "cat", "c_t")
        assert not matches("like", "cart", "c_t")

    def test_case_sensitivity(self):
        assert not matches("like", "MIAMI", "miami")
        assert matches("ilike", "MIAMI", "miami")
        assert matches("ilike", "St. Martin", "st.%")

    def test_regex_characters_are_literal(self):
        assert matches("like", "a.b", "a.b")
        assert not matches("like", "axb", "a.b")

    def test_none_never_matches(self):
        assert not matches("like", None, "%")
        assert not matches("ilike", None, "%")

    def test_non_string_field_is_stringified(self):
        assert matches("like", 500, "5%")

    def test_compile_like_cached(self):
        assert compile_like("a%") is compile_like("a%")


class TestRawOrExpression:
    def test_matches_everything(self):
        expr = RawOrExpression("status.eq.open,status.eq.matched")
        assert expr.matches({"status": "cancelled"})

    def test_requires_string(self):
        with pytest.raises(InvalidFilterError):
            RawOrExpression(42)


class TestApplyFilters:
    ROWS = [
        {"id": 1, "status": "open", "max_reward": 100},
        {"id": 2, "status": "matched", "max_reward": 500},
        {"id": 3, "status": "open", "max_reward": 900},
    ]

    def test_no_filters_keeps_all(self):
        assert apply_filters(self.ROWS, []) == self.ROWS

    def test_and_semantics_and_order(self):
        result = apply_filters(
            self.ROWS,
            [
                ComparisonExpression("status", "eq", "open"),
                ComparisonExpression("max_reward", "gte", 100),
            ],
        )
        assert [r["id"] for r in result] == [1, 3]

    def test_or_does_not_narrow(self):
        result = apply_filters(
            self.ROWS,
            [RawOrExpression("status.eq.matched"), ComparisonExpression("status", "eq", "open")],
        )
        assert [r["id"] for r in result] == [1, 3]
