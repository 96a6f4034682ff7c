"""Client facade composing the store, auth, storage and realtime emulators."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from mockbase.auth import AuthClient, AuthState
from mockbase.config import MockbaseConfig
from mockbase.query import QueryBuilder
from mockbase.realtime import RealtimeChannel, RealtimeEmulator, SendStatus
from mockbase.schemas import SchemaRegistry, default_registry
from mockbase.storage import StorageEmulator
from mockbase.store import MonotonicClock, RecordStore
from mockbase.types import APIResponse

logger = logging.getLogger(__name__)


@dataclass
class Backend:
    """One isolated bundle of emulated backend state."""

    config: MockbaseConfig
    store: RecordStore
    auth: AuthState
    storage: StorageEmulator
    realtime: RealtimeEmulator
    schemas: SchemaRegistry = field(default_factory=default_registry)

    @classmethod
    def create(
        cls, config: MockbaseConfig | None = None, schemas: SchemaRegistry | None = None
    ) -> Backend:
        config = config or MockbaseConfig()
        clock = MonotonicClock()
        return cls(
            config=config,
            store=RecordStore(id_prefix=config.id_prefix, clock=clock),
            auth=AuthState(),
            storage=StorageEmulator(config, clock=clock),
            realtime=RealtimeEmulator(),
            schemas=schemas or default_registry(),
        )

    def reset(self) -> None:
        self.store.reset()
        self.auth.reset()
        self.storage.reset()
        self.realtime.reset()


class MockClient:
    """Drop-in stand-in for the backend client used by application code."""

    def __init__(self, backend: Backend | None = None) -> None:
        self.backend = backend or Backend.create()
        self.auth = AuthClient(self.backend.auth, self.backend.config)
        self.rpc_calls: list[dict[str, Any]] = []

    @property
    def config(self) -> MockbaseConfig:
        return self.backend.config

    @property
    def store(self) -> RecordStore:
        return self.backend.store

    @property
    def storage(self) -> StorageEmulator:
        return self.backend.storage

    @property
    def realtime(self) -> RealtimeEmulator:
        return self.backend.realtime

    def from_(self, table: str) -> QueryBuilder:
        return QueryBuilder(
            self.backend.store,
            table,
            config=self.backend.config,
            schemas=self.backend.schemas,
        )

    def table(self, table: str) -> QueryBuilder:
        return self.from_(table)

    def rpc(self, fn: str, params: dict[str, Any] | None = None) -> APIResponse[None]:
        """Stored procedures are not emulated; the call is only recorded."""
        self.rpc_calls.append({"fn": fn, "params": dict(params or {})})
        logger.debug("rpc %s (not emulated)", fn)
        return APIResponse()

    def channel(self, name: str, config: dict[str, Any] | None = None) -> RealtimeChannel:
        return self.backend.realtime.channel(name, config)

    def get_channels(self) -> list[RealtimeChannel]:
        return self.backend.realtime.get_channels()

    def remove_channel(self, channel: RealtimeChannel) -> SendStatus:
        return self.backend.realtime.remove_channel(channel)

    def remove_all_channels(self) -> list[SendStatus]:
        return self.backend.realtime.remove_all_channels()

    def seed(self, table: str, records: list[dict[str, Any]]) -> None:
        self.backend.store.seed(table, records)

    def reset(self) -> None:
        """Clear every table, the session, storage, channels and recorded calls."""
        self.backend.reset()
        self.auth.reset()
        self.rpc_calls.clear()


def create_client(
    config: MockbaseConfig | None = None, *, schemas: SchemaRegistry | None = None
) -> MockClient:
    """Return a client over a fresh, isolated backend bundle."""
    return MockClient(Backend.create(config, schemas))


_default_client: MockClient | None = None


def get_client() -> MockClient:
    """Process-wide default client, created on first use."""
    global _default_client
    if _default_client is None:
        _default_client = create_client(MockbaseConfig.from_env())
    return _default_client


def set_client(client: MockClient | None) -> None:
    """Replace (or with ``None``, drop) the process-wide default client."""
    global _default_client
    _default_client = client


def reset() -> None:
    """Reset the default client's state (the between-tests hook)."""
    get_client().reset()
