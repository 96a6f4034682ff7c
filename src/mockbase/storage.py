"""Bucketed object storage emulator: (bucket, path) -> bytes + metadata."""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import IO, Any, Union

from mockbase.config import MockbaseConfig
from mockbase.errors import conflict, not_found
from mockbase.store import MonotonicClock
from mockbase.types import APIResponse

logger = logging.getLogger(__name__)

FileBody = Union[bytes, bytearray, str, IO[bytes]]

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass
class StoredObject:
    """One stored file."""

    payload: bytes
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.payload)


def _read_body(file: FileBody) -> bytes:
    if isinstance(file, (bytes, bytearray)):
        return bytes(file)
    if isinstance(file, str):
        return file.encode("utf-8")
    data = file.read()
    return data.encode("utf-8") if isinstance(data, str) else bytes(data)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class StorageBucket:
    """``client.storage.from_(bucket)``."""

    def __init__(self, emulator: StorageEmulator, bucket: str) -> None:
        self._emulator = emulator
        self.bucket = bucket

    @property
    def _files(self) -> dict[str, StoredObject]:
        return self._emulator._bucket(self.bucket)

    def upload(
        self, path: str, file: FileBody, file_options: dict[str, Any] | None = None
    ) -> APIResponse[dict[str, str]]:
        """Store ``file`` at ``path``.

        Without ``upsert`` an existing object is left untouched and a 409
        error is returned.
        """
        options = file_options or {}
        if not _as_bool(options.get("upsert", False)) and path in self._files:
            logger.debug("upload conflict %s/%s", self.bucket, path)
            return APIResponse(error=conflict("File already exists"))

        payload = _read_body(file)
        content_type = (
            options.get("content-type")
            or options.get("content_type")
            or options.get("contentType")
            or mimetypes.guess_type(path)[0]
            or DEFAULT_CONTENT_TYPE
        )
        self._files[path] = StoredObject(
            payload=payload,
            metadata={
                "size": len(payload),
                "mimetype": content_type,
                "uploaded_at": self._emulator.clock.timestamp(),
            },
        )
        logger.debug("upload %s/%s (%d bytes)", self.bucket, path, len(payload))
        return APIResponse(data={"path": path})

    def update(
        self, path: str, file: FileBody, file_options: dict[str, Any] | None = None
    ) -> APIResponse[dict[str, str]]:
        """Overwrite ``path`` (an upload with ``upsert`` forced on)."""
        return self.upload(path, file, {**(file_options or {}), "upsert": True})

    def download(self, path: str) -> APIResponse[bytes]:
        stored = self._files.get(path)
        if stored is None:
            return APIResponse(error=not_found("File not found"))
        return APIResponse(data=stored.payload)

    def list(
        self, path: str | None = None, options: dict[str, Any] | None = None
    ) -> APIResponse[list[dict[str, Any]]]:
        """List objects whose key starts with ``path``, paginated by offset/limit."""
        options = options or {}
        now = self._emulator.clock.timestamp()
        entries: list[dict[str, Any]] = []
        for key, stored in self._files.items():
            if path and not key.startswith(path):
                continue
            uploaded_at = stored.metadata.get("uploaded_at") or now
            entries.append(
                {
                    "name": key.rsplit("/", 1)[-1] or key,
                    "id": key,
                    "updated_at": uploaded_at,
                    "created_at": uploaded_at,
                    "last_accessed_at": now,
                    "metadata": dict(stored.metadata),
                }
            )
        offset = options.get("offset") or 0
        limit = options.get("limit") or len(entries)
        return APIResponse(data=entries[offset : offset + limit])

    def remove(self, paths: list[str]) -> APIResponse[list[dict[str, str]]]:
        removed: list[dict[str, str]] = []
        for path in paths:
            if self._files.pop(path, None) is not None:
                removed.append({"path": path})
        logger.debug("remove %s: %d of %d path(s)", self.bucket, len(removed), len(paths))
        return APIResponse(data=removed)

    def get_public_url(self, path: str) -> str:
        return f"{self._emulator.base_url}/storage/v1/object/public/{self.bucket}/{path}"

    def create_signed_url(self, path: str, expires_in: int) -> APIResponse[dict[str, str]]:
        """Build a signed URL carrying its expiry. The expiry is not enforced."""
        expires_at = (datetime.now(timezone.utc) + timedelta(seconds=expires_in)).isoformat(
            timespec="milliseconds"
        ).replace("+00:00", "Z")
        url = (
            f"{self._emulator.base_url}/storage/v1/object/sign/{self.bucket}/{path}"
            f"?expires={expires_at}"
        )
        return APIResponse(data={"signedUrl": url, "signed_url": url})


class StorageEmulator:
    """``client.storage``: bucket name -> path -> :class:`StoredObject`."""

    def __init__(self, config: MockbaseConfig, clock: MonotonicClock | None = None) -> None:
        self._buckets: dict[str, dict[str, StoredObject]] = {}
        self._config = config
        self.clock = clock or MonotonicClock()

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    def _bucket(self, name: str) -> dict[str, StoredObject]:
        return self._buckets.setdefault(name, {})

    def from_(self, bucket: str) -> StorageBucket:
        self._bucket(bucket)
        return StorageBucket(self, bucket)

    def list_buckets(self) -> list[str]:
        return list(self._buckets)

    def files(self, bucket: str) -> dict[str, StoredObject]:
        """Snapshot of the objects in ``bucket`` for assertions."""
        return dict(self._buckets.get(bucket, {}))

    def reset(self) -> None:
        self._buckets.clear()
