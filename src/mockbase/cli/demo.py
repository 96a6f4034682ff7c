"""mockbase demo — write the SpareCarry demo dataset as a fixture file."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from mockbase.cli import _exitcodes as ec
from mockbase.cli._fixtures import dump_fixtures
from mockbase.cli._output import print_error
from mockbase.testing import demo_dataset

_FORMATS = ("json", "yaml")


def demo_cmd(
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Destination file (default: stdout)"
    ),
    fmt: Optional[str] = typer.Option(
        None, "--format", help="json or yaml (default: from --output suffix, else json)"
    ),
) -> None:
    """Write the demo dataset (users, profiles, trips, requests, matches)."""
    if fmt is None:
        suffix = Path(output).suffix.lower() if output else ""
        fmt = "yaml" if suffix in (".yaml", ".yml") else "json"
    if fmt not in _FORMATS:
        print_error(f"Unknown format '{fmt}'. Valid formats: {', '.join(_FORMATS)}")
        raise typer.Exit(ec.USAGE_ERROR)

    text = dump_fixtures(demo_dataset(), fmt)
    if output is None:
        typer.echo(text, nl=False)
        return

    try:
        Path(output).write_text(text, encoding="utf-8")
    except OSError as e:
        print_error(f"Cannot write {output}: {e}")
        raise typer.Exit(ec.GENERAL_ERROR)
    print(f"Wrote demo dataset to {output}")
