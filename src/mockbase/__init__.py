"""mockbase: in-memory stand-in for the SpareCarry Supabase backend."""

__version__ = "0.1.0"

from mockbase.auth import AuthClient, AuthState, AuthSubscription, build_session
from mockbase.client import Backend, MockClient, create_client, get_client, reset, set_client
from mockbase.config import MockbaseConfig
from mockbase.errors import (
    ApiError,
    FixtureLoadError,
    InsertFailedError,
    InvalidFilterError,
    InvalidPayloadError,
    MissingOperationError,
    MockbaseError,
    QueryConsumedError,
    UploadFailedError,
)
from mockbase.query import QueryBuilder
from mockbase.realtime import RealtimeChannel, RealtimeEmulator
from mockbase.schemas import SchemaRegistry, TableRow, default_registry
from mockbase.storage import StorageEmulator
from mockbase.store import RecordStore
from mockbase.types import APIResponse, Session, User

__all__ = [
    "__version__",
    "create_client",
    "get_client",
    "set_client",
    "reset",
    "MockClient",
    "Backend",
    "MockbaseConfig",
    "RecordStore",
    "QueryBuilder",
    "AuthClient",
    "AuthState",
    "AuthSubscription",
    "build_session",
    "StorageEmulator",
    "RealtimeChannel",
    "RealtimeEmulator",
    "SchemaRegistry",
    "TableRow",
    "default_registry",
    "APIResponse",
    "ApiError",
    "User",
    "Session",
    "MockbaseError",
    "InvalidFilterError",
    "InvalidPayloadError",
    "InsertFailedError",
    "QueryConsumedError",
    "MissingOperationError",
    "UploadFailedError",
    "FixtureLoadError",
]
