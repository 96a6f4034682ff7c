"""Shared fixtures for CLI tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest
import yaml
from typer.testing import CliRunner

from mockbase.cli import app

# Reuse the sample rows from the main conftest
from tests.conftest import TRIPS

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def fixtures_json(tmp_path):
    """Write a JSON fixture file with trips and two requests."""
    path = tmp_path / "fixtures.json"
    data = {
        "trips": TRIPS,
        "requests": [
            {"id": "r1", "title": "Outboard motor", "status": "open", "tags": ["heavy"]},
            {"id": "r2", "title": "Insulin", "status": "matched", "tags": ["cold", "urgent"]},
        ],
    }
    path.write_text(json.dumps(data))
    return str(path)


@pytest.fixture
def fixtures_yaml(tmp_path):
    """Write the trips as a YAML fixture file."""
    path = tmp_path / "fixtures.yaml"
    path.write_text(yaml.safe_dump({"trips": TRIPS}))
    return str(path)


def invoke(runner: CliRunner, args: list[str], fixtures: str | None = None) -> "Result":
    """Invoke CLI, appending --fixtures when given."""
    if fixtures:
        args = args + ["--fixtures", fixtures]
    result = runner.invoke(app, args, catch_exceptions=False)
    return result
