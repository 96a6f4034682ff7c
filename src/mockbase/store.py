"""In-memory record store: table name -> ordered list of loosely typed records."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Any

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class MonotonicClock:
    """UTC clock that never hands out the same timestamp twice."""

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = datetime.now(timezone.utc)
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(microseconds=1)
            self._last = current
            return current

    def timestamp(self) -> str:
        return self.now().isoformat(timespec="microseconds")


def generate_id(prefix: str = "mock") -> str:
    """Return a collision-resistant id: ``{prefix}-{epoch_ms}-{random}``."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


class RecordStore:
    """Process-local tables of records.

    Absence is always data: unknown tables read as empty lists and missing
    ids produce ``None``/``False``. Nothing here raises for absent rows.
    """

    def __init__(self, id_prefix: str = "mock", clock: MonotonicClock | None = None) -> None:
        self._tables: dict[str, list[Record]] = {}
        self._id_prefix = id_prefix
        self._lock = threading.RLock()
        self.clock = clock or MonotonicClock()

    @contextmanager
    def transaction(self) -> Iterator[RecordStore]:
        """Hold the store lock so a whole query appears atomic to other threads."""
        with self._lock:
            yield self

    def new_id(self) -> str:
        return generate_id(self._id_prefix)

    def tables(self) -> list[str]:
        with self._lock:
            return list(self._tables)

    def get(self, table: str) -> list[Record]:
        """Return the live ordered list for ``table`` (empty if unknown)."""
        with self._lock:
            return self._tables.get(table, [])

    def count(self, table: str) -> int:
        return len(self.get(table))

    def find(self, table: str, record_id: Any) -> Record | None:
        with self._lock:
            for record in self._tables.get(table, []):
                if record.get("id") == record_id:
                    return record
            return None

    def fill_defaults(self, record: Record, *, updated_at: bool = True) -> Record:
        """Assign ``id``/``created_at`` (and ``updated_at``) where absent."""
        if not record.get("id"):
            record["id"] = self.new_id()
        now = self.clock.timestamp()
        if not record.get("created_at"):
            record["created_at"] = now
        if updated_at and not record.get("updated_at"):
            record["updated_at"] = now
        return record

    def insert(self, table: str, record: Record) -> Record | None:
        """Append a copy of ``record`` after filling generated fields.

        Returns ``None`` without writing when ``table`` already holds a row
        with the same ``id``.
        """
        with self._lock:
            if record.get("id") and self.find(table, record["id"]) is not None:
                logger.debug("insert %s id=%s rejected: duplicate id", table, record["id"])
                return None
            stored = self.fill_defaults(dict(record))
            self._tables.setdefault(table, []).append(stored)
        logger.debug("insert %s id=%s", table, stored["id"])
        return stored

    def touch(self, record: Record) -> Record:
        record["updated_at"] = self.clock.timestamp()
        return record

    def merge(self, record: Record, partial: Record) -> Record:
        """Merge ``partial`` into ``record`` in place and refresh ``updated_at``."""
        record.update(partial)
        return self.touch(record)

    def update(self, table: str, record_id: Any, partial: Record) -> Record | None:
        with self._lock:
            record = self.find(table, record_id)
            if record is None:
                return None
            self.merge(record, partial)
        logger.debug("update %s id=%s", table, record_id)
        return record

    def delete(self, table: str, record_id: Any) -> bool:
        with self._lock:
            rows = self._tables.get(table, [])
            for index, record in enumerate(rows):
                if record.get("id") == record_id:
                    del rows[index]
                    logger.debug("delete %s id=%s", table, record_id)
                    return True
        return False

    def remove(self, table: str, records: Iterable[Record]) -> int:
        """Remove the given record objects (by identity, not by id)."""
        doomed = {id(r) for r in records}
        with self._lock:
            rows = self._tables.get(table, [])
            kept = [r for r in rows if id(r) not in doomed]
            removed = len(rows) - len(kept)
            rows[:] = kept
        return removed

    def seed(self, table: str, records: Iterable[Record]) -> None:
        """Replace a table wholesale; rows are stored as given, with no auto-fill.

        A row repeating an earlier row's ``id`` is dropped.
        """
        rows: list[Record] = []
        seen: set[Any] = set()
        for r in records:
            record_id = r.get("id")
            if record_id is not None:
                if record_id in seen:
                    logger.warning("seed %s: dropping duplicate id=%s", table, record_id)
                    continue
                seen.add(record_id)
            rows.append(dict(r))
        with self._lock:
            self._tables[table] = rows
        logger.debug("seed %s rows=%d", table, len(rows))

    def reset(self) -> None:
        with self._lock:
            self._tables.clear()
