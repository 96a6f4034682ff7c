"""Structured error types for mockbase.

Expected outcomes (missing rows, storage conflicts) are returned as data via
:class:`ApiError`. Exceptions are reserved for programmer misuse.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class ApiError:
    """Error payload carried in ``APIResponse.error``."""

    message: str
    status_code: str
    code: str | None = None
    details: Any = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message, "statusCode": self.status_code}
        if self.code is not None:
            data["code"] = self.code
        if self.details is not None:
            data["details"] = self.details
        return data


def conflict(message: str) -> ApiError:
    return ApiError(message=message, status_code="409")


def not_found(message: str) -> ApiError:
    return ApiError(message=message, status_code="404")


def bad_request(message: str, details: Any = None) -> ApiError:
    return ApiError(message=message, status_code="400", details=details)


class MockbaseError(Exception):
    """Base error for all mockbase errors."""


class InvalidFilterError(MockbaseError):
    """Raised when a filter method receives malformed arguments."""

    def __init__(self, op: str, detail: str) -> None:
        self.op = op
        self.detail = detail
        super().__init__(f"Invalid '{op}' filter: {detail}")


class InvalidPayloadError(MockbaseError):
    """Raised when a write payload is not a record or a list of records."""

    def __init__(self, op: str, payload: object) -> None:
        self.op = op
        super().__init__(
            f"{op}() expects a dict or a list of dicts, got {type(payload).__name__}"
        )


class QueryConsumedError(MockbaseError):
    """Raised when a query builder is resolved a second time."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(
            f"Query on '{table}' was already executed; start a new chain with client.from_()"
        )


class MissingOperationError(MockbaseError):
    """Raised in strict mode when a builder is resolved without an operation."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(
            f"Query on '{table}' has no operation. Call select(), insert(), update(), "
            "upsert() or delete() before executing."
        )


class InsertFailedError(MockbaseError):
    """Raised by the fixture insert helper when the emulated insert fails."""

    def __init__(self, table: str, error: ApiError) -> None:
        self.table = table
        self.error = error
        super().__init__(f"Insert into '{table}' failed: {error.message}")


class UploadFailedError(MockbaseError):
    """Raised by the fixture upload helper when the emulated upload fails."""

    def __init__(self, bucket: str, path: str, error: ApiError) -> None:
        self.bucket = bucket
        self.path = path
        self.error = error
        super().__init__(f"Upload failed for {bucket}/{path}: {error.message}")


class FixtureLoadError(MockbaseError):
    """Raised when a fixture file cannot be read or has the wrong shape."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot load fixtures from '{path}': {detail}")
