"""Shared test fixtures for mockbase tests."""

from __future__ import annotations

import pytest

from mockbase import MockbaseConfig, create_client
from mockbase.store import RecordStore

# --- Sample rows ---

TRIPS = [
    {"id": "t1", "user_id": "u1", "type": "plane", "spare_kg": 20, "status": "active"},
    {"id": "t2", "user_id": "u2", "type": "boat", "spare_kg": 150, "status": "active"},
    {"id": "t3", "user_id": "u1", "type": "plane", "spare_kg": 5, "status": "completed"},
    {"id": "t4", "user_id": "u3", "type": "boat", "spare_kg": 20, "status": "cancelled"},
]


# --- Fixtures ---


@pytest.fixture
def store():
    """Create an empty RecordStore."""
    return RecordStore()


@pytest.fixture
def client():
    """Create an isolated client (not installed as the process default)."""
    c = create_client(MockbaseConfig())
    yield c
    c.reset()


@pytest.fixture
def trips_client(client):
    """Client with the sample trips seeded."""
    client.seed("trips", TRIPS)
    return client


@pytest.fixture
def validating_client():
    """Client that checks insert/upsert payloads against the table models."""
    return create_client(MockbaseConfig(validate_writes=True))
