"""CLI filter token parser: converts CLI triples to ComparisonExpression."""

from __future__ import annotations

import json
from typing import Any

from mockbase.errors import InvalidFilterError
from mockbase.filters import ComparisonExpression

# Map CLI operator tokens to query builder operators
_OP_MAP: dict[str, str] = {
    "eq": "eq",
    "neq": "neq",
    "ne": "neq",
    "gt": "gt",
    "gte": "gte",
    "lt": "lt",
    "lte": "lte",
    "like": "like",
    "ilike": "ilike",
    "is": "is",
    "in": "in",
    "contains": "contains",
}


def parse_cli_filters(triples: list[tuple[str, str, str]]) -> list[ComparisonExpression]:
    """Parse CLI filter triples (COLUMN, OP, VALUE_JSON) into filter expressions.

    Multiple filters are AND-combined when applied.
    """
    exprs: list[ComparisonExpression] = []
    for column, op_token, value_json in triples:
        op = _OP_MAP.get(op_token)
        if op is None:
            raise ValueError(
                f"Unknown filter operator '{op_token}'. "
                f"Valid operators: {', '.join(sorted(_OP_MAP.keys()))}"
            )

        try:
            value: Any = json.loads(value_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"Filter value for '{column}' is not valid JSON: {value_json}") from e

        try:
            exprs.append(ComparisonExpression(column=column, op=op, value=value))
        except InvalidFilterError as e:
            raise ValueError(str(e)) from e

    return exprs
