"""Fixture file loading: JSON or YAML mappings of table name to rows."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from mockbase.client import MockClient, create_client
from mockbase.config import MockbaseConfig
from mockbase.errors import FixtureLoadError

Fixtures = dict[str, list[dict[str, Any]]]

_YAML_SUFFIXES = (".yaml", ".yml")


def load_fixtures(path: str) -> Fixtures:
    """Read and shape-check a fixture file.

    Args:
        path: A ``.json``, ``.yaml`` or ``.yml`` file holding ``{table: [row, ...]}``

    Returns:
        The table mapping, rows as plain dicts
    """
    file = Path(path)
    if not file.is_file():
        raise FixtureLoadError(path, "file not found")

    text = file.read_text(encoding="utf-8")
    try:
        if file.suffix.lower() in _YAML_SUFFIXES:
            raw = yaml.safe_load(text)
        else:
            raw = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise FixtureLoadError(path, f"parse error: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise FixtureLoadError(path, "top level must be a mapping of table name to rows")

    fixtures: Fixtures = {}
    for table, rows in raw.items():
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise FixtureLoadError(path, f"table '{table}' must be a list of objects")
        fixtures[str(table)] = rows
    return fixtures


def client_from_fixtures(path: str, config: MockbaseConfig | None = None) -> MockClient:
    """Build a fresh client whose tables are seeded from ``path``."""
    fixtures = load_fixtures(path)
    client = create_client(config)
    for table, rows in fixtures.items():
        client.seed(table, rows)
    return client


def dump_fixtures(fixtures: Fixtures, fmt: str = "json") -> str:
    if fmt == "yaml":
        return yaml.safe_dump(fixtures, sort_keys=False, allow_unicode=True)
    return json.dumps(fixtures, indent=2, default=str) + "\n"
