"""pytest fixtures registered through the ``pytest11`` entry point."""

from __future__ import annotations

import pytest

from mockbase import client as _client_module
from mockbase.client import MockClient, create_client, set_client
from mockbase.config import MockbaseConfig
from mockbase.testing import seed_test_data


@pytest.fixture
def mockbase_client():
    """Install a fresh client as the process default for one test."""
    previous = _client_module._default_client
    client = create_client(MockbaseConfig.from_env())
    set_client(client)
    yield client
    client.reset()
    set_client(previous)


@pytest.fixture
def seeded_client(mockbase_client: MockClient):
    """``mockbase_client`` loaded with the demo dataset."""
    seed_test_data(client=mockbase_client)
    return mockbase_client
