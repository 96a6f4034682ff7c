"""mockbase CLI: console for inspecting fixture files through the mock backend."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from mockbase.cli import demo, query, tables
from mockbase.config import DEFAULT_BASE_URL, MockbaseConfig

app = typer.Typer(
    name="mockbase",
    help="mockbase CLI: run queries against fixture data with the mock backend.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    base_url: str = DEFAULT_BASE_URL
    json_output: bool = False
    verbose: bool = False


state = _State()


def client_config() -> MockbaseConfig:
    return MockbaseConfig(base_url=state.base_url.rstrip("/"))


def _version_callback(value: bool) -> None:
    if value:
        try:
            from importlib.metadata import version

            v = version("sparecarry-mockbase")
        except Exception:
            v = "unknown"
        print(f"mockbase {v}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        envvar="MOCKBASE_URL",
        help=f"Base URL used for storage and auth links (default: {DEFAULT_BASE_URL})",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log mock activity to stderr"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all mockbase commands."""
    state.base_url = base_url or DEFAULT_BASE_URL
    state.json_output = json_output
    state.verbose = verbose
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s", force=True
        )
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


app.command(name="query")(query.query_cmd)
app.command(name="tables")(tables.tables_cmd)
app.command(name="demo")(demo.demo_cmd)


def main() -> None:
    """Entry point for the mockbase CLI."""
    app()
