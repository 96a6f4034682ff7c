"""Response, user and session types shared across mockbase components."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from mockbase.errors import ApiError

T = TypeVar("T")


@dataclass
class APIResponse(Generic[T]):
    """``{data, error}`` result of every emulated backend call."""

    data: T | None = None
    error: ApiError | None = None
    count: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "data": self.data,
            "error": self.error.to_dict() if self.error else None,
        }
        if self.count is not None:
            result["count"] = self.count
        return result


class User(BaseModel):
    """Authenticated identity as exposed by the auth client."""

    model_config = ConfigDict(extra="allow")

    id: str
    email: str
    created_at: str
    app_metadata: dict[str, Any] = Field(default_factory=dict)
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class Session(BaseModel):
    """Token pair plus the user it belongs to."""

    access_token: str
    refresh_token: str
    expires_in: int
    expires_at: int | None = None
    token_type: str = "bearer"
    user: User
