"""mockbase query — run a builder chain against a fixture file."""

from __future__ import annotations

from typing import Any, Optional

import typer

from mockbase.cli import _exitcodes as ec
from mockbase.cli._filters import parse_cli_filters
from mockbase.cli._fixtures import client_from_fixtures
from mockbase.cli._output import print_error, print_object, print_records
from mockbase.errors import MockbaseError
from mockbase.filters import ComparisonExpression


def query_cmd(
    table: str = typer.Argument(..., help="Table name"),
    fixtures: str = typer.Option(..., "--fixtures", "-f", help="JSON or YAML fixture file"),
    columns: str = typer.Option("*", "--select", help="Comma-separated columns to return"),
    filter_args: Optional[list[str]] = typer.Option(
        None, "--filter", help="COLUMN OP VALUE_JSON (repeatable)"
    ),
    order: Optional[str] = typer.Option(None, "--order", help="Column to sort by"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    limit: Optional[int] = typer.Option(None, "--limit", min=0, help="Max results"),
    range_: Optional[tuple[int, int]] = typer.Option(
        None, "--range", help="Inclusive FROM TO row range (wins over --limit)"
    ),
    count: bool = typer.Option(False, "--count", help="Report the exact match count"),
) -> None:
    """Query rows of a fixture table."""
    from mockbase.cli import client_config, state

    json_mode = state.json_output

    try:
        filters = _parse_filter_args(filter_args)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)

    try:
        client = client_from_fixtures(fixtures, client_config())
    except MockbaseError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)

    try:
        q = client.from_(table).select(columns, count="exact" if count else None)
        for f in filters:
            q = q.filter(f.column, f.op, f.value)
        if order:
            q = q.order(order, desc=desc)
        if limit is not None:
            q = q.limit(limit)
        if range_ is not None and range_[0] is not None:
            q = q.range(range_[0], range_[1])
        response = q.execute()
    except MockbaseError as e:
        print_error(str(e))
        raise typer.Exit(ec.EXECUTION_FAILURE)

    if response.error is not None:
        print_error(response.error.message)
        raise typer.Exit(ec.EXECUTION_FAILURE)

    rows: list[dict[str, Any]] = response.data or []
    if count and json_mode:
        print_object({"count": response.count, "data": rows}, json_mode=True)
        return
    print_records(rows, json_mode=json_mode)
    if count:
        print(f"count: {response.count}")


def _parse_filter_args(filter_args: list[str] | None) -> list[ComparisonExpression]:
    """Parse --filter args (groups of 3 tokens, or one "COLUMN OP VALUE_JSON" string each)."""
    if not filter_args:
        return []

    triples: list[tuple[str, str, str]] = []
    if len(filter_args) % 3 == 0 and all(len(a.split(None, 2)) == 1 for a in filter_args):
        for i in range(0, len(filter_args), 3):
            triples.append((filter_args[i], filter_args[i + 1], filter_args[i + 2]))
    else:
        for arg in filter_args:
            parts = arg.split(None, 2)
            if len(parts) != 3:
                raise ValueError(f"Invalid filter (expected 'COLUMN OP VALUE_JSON'): {arg}")
            triples.append((parts[0], parts[1], parts[2]))

    return parse_cli_filters(triples)
