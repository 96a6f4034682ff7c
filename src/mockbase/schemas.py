"""Typed row models for the SpareCarry tables, and a table -> model registry.

Records stay plain dicts in the store. Models are only used to validate writes
when ``MockbaseConfig.validate_writes`` is enabled, and by callers who want to
hydrate rows (``Trip.model_validate(row)``).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError


class TableRow(BaseModel):
    """Base for table models; unknown columns are kept."""

    model_config = ConfigDict(extra="allow")


class UserRow(TableRow):
    id: str
    email: str
    role: Literal["requester", "traveler", "sailor", "admin"] | None = None
    subscription_status: Literal["active", "trialing", "canceled", "past_due"] | None = None
    supporter_status: Literal["active", "inactive", "expired"] | None = None
    referral_code: str | None = None
    referred_by: str | None = None
    referral_credits: float = 0
    completed_deliveries_count: int = 0
    average_rating: float = 0
    karma_points: int = 0
    created_at: str | None = None
    updated_at: str | None = None


class ProfileRow(TableRow):
    id: str | None = None
    user_id: str
    full_name: str | None = None
    phone: str | None = None
    verified_identity: bool = False
    verified_sailor: bool = False
    stripe_account_id: str | None = None
    expo_push_token: str | None = None
    push_notifications_enabled: bool = True
    boat_name: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class TripRow(TableRow):
    id: str | None = None
    user_id: str
    type: Literal["plane", "boat"]
    from_location: str
    to_location: str
    departure_date: str | None = None
    eta_window_start: str | None = None
    eta_window_end: str | None = None
    spare_kg: float
    spare_volume_liters: float | None = None
    status: Literal["active", "completed", "cancelled"] = "active"
    created_at: str | None = None
    updated_at: str | None = None


class RequestRow(TableRow):
    id: str | None = None
    user_id: str
    title: str
    description: str | None = None
    from_location: str
    to_location: str
    deadline_earliest: str | None = None
    deadline_latest: str
    preferred_method: Literal["plane", "boat", "any"] = "any"
    max_reward: float
    weight_kg: float
    length_cm: float
    width_cm: float
    height_cm: float
    value_usd: float | None = None
    emergency: bool = False
    status: Literal["open", "matched", "completed", "cancelled"] = "open"
    created_at: str | None = None
    updated_at: str | None = None


class MatchRow(TableRow):
    id: str | None = None
    trip_id: str
    request_id: str
    group_buy_id: str | None = None
    status: Literal[
        "pending", "chatting", "escrow_paid", "delivered", "completed", "cancelled", "disputed"
    ] = "pending"
    reward_amount: float
    platform_fee_percent: float | None = None
    conversation_id: str | None = None
    delivered_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class SchemaRegistry:
    """Maps table names to row models."""

    def __init__(self, models: dict[str, type[BaseModel]] | None = None) -> None:
        self._models: dict[str, type[BaseModel]] = dict(models or {})

    def register(self, table: str, model: type[BaseModel]) -> None:
        self._models[table] = model

    def get(self, table: str) -> type[BaseModel] | None:
        return self._models.get(table)

    def tables(self) -> list[str]:
        return sorted(self._models)

    def validate(self, table: str, record: dict[str, Any]) -> list[dict[str, Any]]:
        """Validate one record; returns pydantic error dicts (empty when valid or untyped)."""
        model = self._models.get(table)
        if model is None:
            return []
        try:
            model.model_validate(record)
        except PydanticValidationError as e:
            return [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ]
        return []


def default_registry() -> SchemaRegistry:
    """Registry with the SpareCarry tables."""
    return SchemaRegistry(
        {
            "users": UserRow,
            "profiles": ProfileRow,
            "trips": TripRow,
            "requests": RequestRow,
            "matches": MatchRow,
        }
    )
