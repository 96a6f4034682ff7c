"""Convenience helpers for writing tests against the mock backend.

All helpers act on the process default client unless ``client=`` is given.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from typing import Any

from mockbase.auth import AuthEvent, build_session
from mockbase.client import MockClient, get_client
from mockbase.errors import InsertFailedError, UploadFailedError
from mockbase.storage import FileBody
from mockbase.types import Session, User

FilterTriple = tuple[str, str, Any]


def _client(client: MockClient | None) -> MockClient:
    return client if client is not None else get_client()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def reset_all_mocks(*, client: MockClient | None = None) -> None:
    _client(client).reset()


def seed(table: str, records: list[dict[str, Any]], *, client: MockClient | None = None) -> None:
    """Load fixture rows as-is (no generated ids or timestamps)."""
    _client(client).seed(table, records)


def mock_user_login(*, client: MockClient | None = None, **user_fields: Any) -> Session:
    """Sign a user in and return the fabricated session."""
    c = _client(client)
    user = User(
        id=user_fields.pop("id", None) or "test-user-id",
        email=user_fields.pop("email", None) or "test@example.com",
        created_at=user_fields.pop("created_at", None) or _now(),
        app_metadata=user_fields.pop("app_metadata", None) or {},
        user_metadata=user_fields.pop("user_metadata", None) or {},
        **user_fields,
    )
    session = build_session(user, ttl_s=c.config.session_ttl_s)
    c.backend.auth.set_user(user, session)
    return session


def mock_user_logout(*, client: MockClient | None = None) -> None:
    _client(client).backend.auth.clear_user()


def mock_auth_events(
    event: AuthEvent, session: Session | None = None, *, client: MockClient | None = None
) -> None:
    """Notify auth listeners without changing the stored session."""
    _client(client).backend.auth.notify_listeners(event, session)


def mock_insert(
    table: str, data: dict[str, Any] | list[dict[str, Any]], *, client: MockClient | None = None
) -> list[dict[str, Any]]:
    """Insert through the query builder; raises :class:`InsertFailedError` on a 409/400."""
    response = _client(client).from_(table).insert(data).execute()
    if response.error is not None:
        raise InsertFailedError(table, response.error)
    return response.data


def mock_select(
    table: str,
    *,
    filters: Iterable[FilterTriple] | None = None,
    order_by: tuple[str, bool] | str | None = None,
    limit: int | None = None,
    client: MockClient | None = None,
) -> list[dict[str, Any]]:
    """Select rows; ``filters`` are ``(column, operator, value)`` triples.

    ``order_by`` is a column name or ``(column, ascending)``.
    """
    query = _client(client).from_(table).select("*")
    for column, op, value in filters or ():
        query = query.filter(column, op, value)
    if order_by is not None:
        column, ascending = (order_by, True) if isinstance(order_by, str) else order_by
        query = query.order(column, ascending=ascending)
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def mock_update(
    table: str,
    updates: dict[str, Any],
    filter: tuple[str, Any] | None = None,
    *,
    client: MockClient | None = None,
) -> list[dict[str, Any]]:
    """Update rows matching ``(column, value)``; without a filter, every row."""
    query = _client(client).from_(table).update(updates)
    if filter is not None:
        query = query.eq(*filter)
    return query.execute().data or []


def mock_delete(
    table: str, filter: tuple[str, Any], *, client: MockClient | None = None
) -> int:
    """Delete rows matching ``(column, value)``; returns how many were removed."""
    response = _client(client).from_(table).delete().eq(*filter).execute()
    return len(response.data or [])


def mock_storage_upload(
    bucket: str, path: str, file: FileBody, *, client: MockClient | None = None
) -> dict[str, str]:
    response = _client(client).storage.from_(bucket).upload(path, file)
    if response.error is not None:
        raise UploadFailedError(bucket, path, response.error)
    return response.data


def mock_storage_get_public_url(
    bucket: str, path: str, *, client: MockClient | None = None
) -> str:
    return _client(client).storage.from_(bucket).get_public_url(path)


def demo_dataset() -> dict[str, list[dict[str, Any]]]:
    """The SpareCarry fixture set: two users, their profiles, a trip, a request, a match."""
    now = datetime.now(timezone.utc)
    stamp = now.isoformat(timespec="microseconds")
    in_7_days = (now + timedelta(days=7)).isoformat(timespec="microseconds")
    in_14_days = (now + timedelta(days=14)).isoformat(timespec="microseconds")
    return {
        "users": [
            {
                "id": "user-1",
                "email": "traveler@example.com",
                "created_at": stamp,
                "subscription_status": None,
                "supporter_status": None,
                "completed_deliveries_count": 5,
                "average_rating": 4.5,
                "referral_credits": 0,
                "karma_points": 0,
            },
            {
                "id": "user-2",
                "email": "requester@example.com",
                "created_at": stamp,
                "subscription_status": "active",
                "supporter_status": None,
                "completed_deliveries_count": 2,
                "average_rating": 4.8,
                "referral_credits": 50,
                "karma_points": 0,
            },
        ],
        "profiles": [
            {
                "user_id": "user-1",
                "full_name": "Test Traveler",
                "verified_identity": True,
                "verified_sailor": False,
                "stripe_account_id": "acct_test_123",
                "expo_push_token": "ExponentPushToken[test-token-1]",
                "push_notifications_enabled": True,
                "boat_name": None,
                "created_at": stamp,
                "updated_at": stamp,
            },
            {
                "user_id": "user-2",
                "full_name": "Test Requester",
                "verified_identity": True,
                "verified_sailor": False,
                "stripe_account_id": None,
                "expo_push_token": "ExponentPushToken[test-token-2]",
                "push_notifications_enabled": True,
                "boat_name": None,
                "created_at": stamp,
                "updated_at": stamp,
            },
        ],
        "trips": [
            {
                "id": "trip-1",
                "user_id": "user-1",
                "type": "plane",
                "from_location": "Miami",
                "to_location": "St. Martin",
                "departure_date": in_7_days,
                "spare_kg": 20,
                "status": "active",
                "created_at": stamp,
                "updated_at": stamp,
            }
        ],
        "requests": [
            {
                "id": "request-1",
                "user_id": "user-2",
                "title": "Test Request",
                "from_location": "Miami",
                "to_location": "St. Martin",
                "deadline_latest": in_14_days,
                "preferred_method": "any",
                "max_reward": 500,
                "weight_kg": 10,
                "length_cm": 50,
                "width_cm": 40,
                "height_cm": 30,
                "emergency": False,
                "status": "open",
                "created_at": stamp,
                "updated_at": stamp,
            }
        ],
        "matches": [
            {
                "id": "match-1",
                "trip_id": "trip-1",
                "request_id": "request-1",
                "status": "pending",
                "reward_amount": 500,
                "created_at": stamp,
                "updated_at": stamp,
            }
        ],
    }


def seed_test_data(*, client: MockClient | None = None) -> None:
    """Reset the tables and load :func:`demo_dataset`."""
    c = _client(client)
    c.store.reset()
    for table, rows in demo_dataset().items():
        c.seed(table, rows)
