"""mockbase tables — list the tables in a fixture file."""

from __future__ import annotations

import typer

from mockbase.cli import _exitcodes as ec
from mockbase.cli._fixtures import client_from_fixtures
from mockbase.cli._output import print_error, print_table
from mockbase.errors import MockbaseError


def tables_cmd(
    fixtures: str = typer.Option(..., "--fixtures", "-f", help="JSON or YAML fixture file"),
) -> None:
    """Show table names with their row counts."""
    from mockbase.cli import client_config, state

    try:
        client = client_from_fixtures(fixtures, client_config())
    except MockbaseError as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)

    rows = [[name, client.store.count(name)] for name in client.store.tables()]
    if not rows and not state.json_output:
        print("No tables.")
        return
    print_table(["table", "rows"], rows, json_mode=state.json_output)
