"""Filter predicates for the PostgREST-style query builder."""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from mockbase.errors import InvalidFilterError

logger = logging.getLogger(__name__)

COMPARISON_OPS = ("eq", "neq", "gt", "gte", "lt", "lte")
PATTERN_OPS = ("like", "ilike")
FILTER_OPS = COMPARISON_OPS + PATTERN_OPS + ("is", "in", "contains")


class FilterExpression:
    """Base class for filter predicates."""

    def matches(self, record: dict[str, Any]) -> bool:
        raise NotImplementedError


@dataclass
class ComparisonExpression(FilterExpression):
    """A predicate on one column.

    op is one of: eq, neq, gt, gte, lt, lte, like, ilike, is, in, contains.
    """

    column: str
    op: str
    value: Any = None

    def __post_init__(self) -> None:
        validate_filter(self.op, self.column, self.value)

    def matches(self, record: dict[str, Any]) -> bool:
        return _evaluate(self.op, record.get(self.column), self.value)


@dataclass
class RawOrExpression(FilterExpression):
    """A raw PostgREST ``or=(...)`` expression.

    Accepted so chains keep working, but not evaluated: it matches every row.
    """

    expression: str

    def __post_init__(self) -> None:
        if not isinstance(self.expression, str):
            raise InvalidFilterError("or", "expression must be a string")

    def matches(self, record: dict[str, Any]) -> bool:
        return True


def validate_filter(op: str, column: str, value: Any) -> None:
    """Reject malformed filter arguments early."""
    if op not in FILTER_OPS:
        raise InvalidFilterError(
            op, f"unknown operator; valid operators: {', '.join(sorted(FILTER_OPS))}"
        )
    if not isinstance(column, str) or not column:
        raise InvalidFilterError(op, "column must be a non-empty string")
    if op in PATTERN_OPS and not isinstance(value, str):
        raise InvalidFilterError(op, f"pattern must be a string, got {type(value).__name__}")
    if op == "in" and (
        isinstance(value, (str, bytes, dict)) or not isinstance(value, Collection)
    ):
        raise InvalidFilterError(op, "values must be a list, tuple or set")


def apply_filters(
    records: Iterable[dict[str, Any]], filters: Iterable[FilterExpression]
) -> list[dict[str, Any]]:
    """Keep records matching every filter (logical AND), preserving order."""
    filters = list(filters)
    for f in filters:
        if isinstance(f, RawOrExpression):
            logger.debug("or filter %r is not evaluated; treating it as always true", f.expression)
    return [r for r in records if all(f.matches(r) for f in filters)]


@lru_cache(maxsize=256)
def compile_like(pattern: str, case_insensitive: bool = False) -> re.Pattern[str]:
    """Compile a SQL LIKE pattern (``%`` any run, ``_`` one char) to a regex."""
    parts: list[str] = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    flags = re.DOTALL | (re.IGNORECASE if case_insensitive else 0)
    return re.compile("".join(parts), flags)


def _compare(op: str, left: Any, right: Any) -> bool:
    try:
        if op == "gt":
            return bool(left > right)
        if op == "gte":
            return bool(left >= right)
        if op == "lt":
            return bool(left < right)
        return bool(left <= right)
    except TypeError:
        # None or mixed types never satisfy an ordered comparison.
        return False


def strict_eq(left: Any, right: Any) -> bool:
    """Value equality where a bool never equals a number (``True != 1``)."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(strict_eq(a, b) for a, b in zip(left, right))
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(strict_eq(left[k], right[k]) for k in left)
    return left == right


def _evaluate(op: str, field_value: Any, value: Any) -> bool:
    if op == "eq":
        return strict_eq(field_value, value)
    if op == "neq":
        return not strict_eq(field_value, value)
    if op in ("gt", "gte", "lt", "lte"):
        return _compare(op, field_value, value)
    if op in PATTERN_OPS:
        if field_value is None:
            return False
        regex = compile_like(value, op == "ilike")
        return regex.fullmatch(str(field_value)) is not None
    if op == "is":
        return field_value is None or strict_eq(field_value, value)
    if op == "in":
        return any(strict_eq(field_value, v) for v in value)
    if op == "contains":
        if not isinstance(field_value, (list, tuple)):
            return False
        if isinstance(value, (list, tuple)):
            return all(any(strict_eq(f, item) for f in field_value) for item in value)
        return any(strict_eq(f, value) for f in field_value)
    raise InvalidFilterError(op, "unknown operator")
