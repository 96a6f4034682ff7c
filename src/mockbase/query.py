"""Query DSL: a chainable PostgREST-style builder executed against the record store."""

from __future__ import annotations

import logging
from collections.abc import Generator
from dataclasses import dataclass, field
from datetime import date, datetime, time
from functools import cmp_to_key
from typing import TYPE_CHECKING, Any, Literal

from mockbase.errors import (
    InvalidFilterError,
    InvalidPayloadError,
    MissingOperationError,
    QueryConsumedError,
    bad_request,
    conflict,
)
from mockbase.filters import ComparisonExpression, FilterExpression, RawOrExpression, apply_filters
from mockbase.types import APIResponse

if TYPE_CHECKING:
    from mockbase.config import MockbaseConfig
    from mockbase.schemas import SchemaRegistry
    from mockbase.store import Record, RecordStore

logger = logging.getLogger(__name__)

Operation = Literal["select", "insert", "update", "upsert", "delete"]
Cardinality = Literal["many", "single", "maybe_single"]


@dataclass
class QueryDescriptor:
    """Accumulated, not-yet-executed description of one chain."""

    table: str
    operation: Operation | None = None
    payload: Any = None
    filters: list[FilterExpression] = field(default_factory=list)
    columns: str = "*"
    count: str | None = None
    order_by: str | None = None
    order_desc: bool = False
    limit: int | None = None
    range: tuple[int, int] | None = None
    on_conflict: str = "id"
    cardinality: Cardinality = "many"

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "operation": self.operation or "select",
            "filters": [_describe_filter(f) for f in self.filters],
            "columns": self.columns,
            "order": (
                {"column": self.order_by, "ascending": not self.order_desc}
                if self.order_by
                else None
            ),
            "limit": self.limit,
            "range": list(self.range) if self.range else None,
            "cardinality": self.cardinality,
        }


class QueryBuilder:
    """Chainable query against one table.

    Every chain method returns the builder. Nothing touches the store until the
    builder is resolved with :meth:`execute` or ``await``; a builder resolves
    exactly once.
    """

    def __init__(
        self,
        store: RecordStore,
        table: str,
        *,
        config: MockbaseConfig | None = None,
        schemas: SchemaRegistry | None = None,
    ) -> None:
        self._store = store
        self._config = config
        self._schemas = schemas
        self._query = QueryDescriptor(table=table)
        self._executed = False

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._query

    # Operations

    def select(self, columns: str = "*", *, count: str | None = None) -> QueryBuilder:
        # After a write, select() only picks the returned columns.
        if self._query.operation is None:
            self._query.operation = "select"
        self._query.columns = columns
        self._query.count = count
        return self

    def insert(self, data: Record | list[Record]) -> QueryBuilder:
        self._set_write("insert", data)
        return self

    def update(self, data: Record) -> QueryBuilder:
        if not isinstance(data, dict):
            raise InvalidPayloadError("update", data)
        self._query.operation = "update"
        self._query.payload = dict(data)
        return self

    def upsert(self, data: Record | list[Record], *, on_conflict: str = "id") -> QueryBuilder:
        self._set_write("upsert", data)
        self._query.on_conflict = on_conflict or "id"
        return self

    def delete(self) -> QueryBuilder:
        self._query.operation = "delete"
        self._query.payload = None
        return self

    # Filters

    def eq(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "lte", value)

    def like(self, column: str, pattern: str) -> QueryBuilder:
        return self._add_filter(column, "like", pattern)

    def ilike(self, column: str, pattern: str) -> QueryBuilder:
        return self._add_filter(column, "ilike", pattern)

    def is_(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "is", value)

    def in_(self, column: str, values: list[Any] | tuple[Any, ...] | set[Any]) -> QueryBuilder:
        return self._add_filter(column, "in", values)

    def contains(self, column: str, value: Any) -> QueryBuilder:
        return self._add_filter(column, "contains", value)

    def or_(self, expression: str) -> QueryBuilder:
        """Accept a raw ``or`` expression. It is recorded but not evaluated."""
        self._query.filters.append(RawOrExpression(expression))
        return self

    def filter(self, column: str, op: str, value: Any) -> QueryBuilder:
        """Generic form: ``filter("status", "eq", "open")``."""
        return self._add_filter(column, op, value)

    # Ordering and pagination

    def order(
        self, column: str, *, desc: bool = False, ascending: bool | None = None
    ) -> QueryBuilder:
        if not isinstance(column, str) or not column:
            raise InvalidFilterError("order", "column must be a non-empty string")
        self._query.order_by = column
        self._query.order_desc = (not ascending) if ascending is not None else desc
        return self

    def limit(self, count: int) -> QueryBuilder:
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidFilterError("limit", f"count must be a non-negative int, got {count!r}")
        self._query.limit = count
        return self

    def range(self, start: int, end: int) -> QueryBuilder:
        for bound in (start, end):
            if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
                raise InvalidFilterError(
                    "range", f"bounds must be non-negative ints, got {bound!r}"
                )
        self._query.range = (start, end)
        return self

    def single(self) -> QueryBuilder:
        """Resolve to the first row or ``None``; never fails on 0 or many rows."""
        self._query.cardinality = "single"
        return self

    def maybe_single(self) -> QueryBuilder:
        """Resolve to the row when exactly one matches, else ``None``."""
        self._query.cardinality = "maybe_single"
        return self

    # Resolution

    def execute(self) -> APIResponse[Any]:
        if self._executed:
            raise QueryConsumedError(self._query.table)
        self._executed = True

        q = self._query
        if q.operation is None and self._config is not None and self._config.strict_operations:
            raise MissingOperationError(q.table)
        op = q.operation or "select"

        with self._store.transaction():
            if op in ("insert", "upsert"):
                error = self._validate_writes(op) or self._reject_duplicate_ids(op)
                if error is not None:
                    return error
            if op == "insert":
                rows, total = self._run_insert()
            elif op == "update":
                rows, total = self._run_update()
            elif op == "upsert":
                rows, total = self._run_upsert()
            elif op == "delete":
                rows, total = self._run_delete()
            else:
                rows, total = self._run_select()

        logger.debug("%s %s -> %d row(s)", op, q.table, len(rows))
        return self._finish(rows, total)

    def __await__(self) -> Generator[Any, None, APIResponse[Any]]:
        return self._resolve().__await__()

    async def _resolve(self) -> APIResponse[Any]:
        return self.execute()

    def __repr__(self) -> str:
        return f"QueryBuilder({self._query.to_dict()!r})"

    # Internals

    def _set_write(self, op: Operation, data: Any) -> None:
        if isinstance(data, dict):
            rows = [dict(data)]
        elif isinstance(data, (list, tuple)) and all(isinstance(r, dict) for r in data):
            rows = [dict(r) for r in data]
        else:
            raise InvalidPayloadError(op, data)
        self._query.operation = op
        self._query.payload = rows

    def _add_filter(self, column: str, op: str, value: Any) -> QueryBuilder:
        self._query.filters.append(ComparisonExpression(column, op, value))
        return self

    def _validate_writes(self, op: str) -> APIResponse[Any] | None:
        if self._config is None or not self._config.validate_writes or self._schemas is None:
            return None
        table = self._query.table
        problems: list[dict[str, Any]] = []
        for index, row in enumerate(self._query.payload):
            candidate = row
            if op == "upsert":
                existing = self._find_conflict(row)
                if existing is not None:
                    candidate = {**existing, **row}
            for issue in self._schemas.validate(table, candidate):
                problems.append({"row": index, **issue})
        if not problems:
            return None
        logger.debug("%s %s rejected: %d validation issue(s)", op, table, len(problems))
        return APIResponse(
            data=None,
            error=bad_request(f"Invalid row(s) for table '{table}'", details=problems),
        )

    def _reject_duplicate_ids(self, op: str) -> APIResponse[Any] | None:
        """409 when a row would be inserted with an ``id`` the table already holds."""
        q = self._query
        # Upserts keyed on id merge repeated ids instead of inserting them.
        check_batch = op == "insert" or q.on_conflict != "id"
        seen: set[Any] = set()
        for row in q.payload:
            if op == "upsert" and self._find_conflict(row) is not None:
                continue
            row_id = row.get("id")
            if not row_id:
                continue
            if (check_batch and row_id in seen) or self._store.find(q.table, row_id) is not None:
                logger.debug("%s %s rejected: duplicate id=%s", op, q.table, row_id)
                return APIResponse(
                    data=None,
                    error=conflict(f"Duplicate id '{row_id}' in table '{q.table}'"),
                )
            seen.add(row_id)
        return None

    def _run_insert(self) -> tuple[list[Record], int]:
        rows = [self._store.insert(self._query.table, r) for r in self._query.payload]
        return rows, len(rows)

    def _run_update(self) -> tuple[list[Record], int]:
        q = self._query
        if not q.filters:
            logger.warning("update on '%s' without filters updates every row", q.table)
        matched = apply_filters(self._store.get(q.table), q.filters)
        for record in matched:
            self._store.merge(record, q.payload)
        return matched, len(matched)

    def _run_upsert(self) -> tuple[list[Record], int]:
        results: list[Record] = []
        for row in self._query.payload:
            existing = self._find_conflict(row)
            if existing is not None:
                results.append(self._store.merge(existing, row))
            else:
                results.append(self._store.insert(self._query.table, row))
        return results, len(results)

    def _run_delete(self) -> tuple[list[Record], int]:
        q = self._query
        matched = apply_filters(self._store.get(q.table), q.filters)
        snapshots = [dict(r) for r in matched]
        self._store.remove(q.table, matched)
        return snapshots, len(snapshots)

    def _run_select(self) -> tuple[list[Record], int]:
        q = self._query
        rows = apply_filters(self._store.get(q.table), q.filters)
        total = len(rows)
        if q.order_by:
            rows = sort_records(rows, q.order_by, desc=q.order_desc)
        return paginate(rows, limit=q.limit, range_=q.range), total

    def _find_conflict(self, row: Record) -> Record | None:
        columns = [c.strip() for c in self._query.on_conflict.split(",") if c.strip()]
        if not columns or any(not row.get(c) for c in columns):
            return None
        for record in self._store.get(self._query.table):
            if all(record.get(c) == row[c] for c in columns):
                return record
        return None

    def _finish(self, rows: list[Record], total: int) -> APIResponse[Any]:
        q = self._query
        data = [project(r, q.columns) for r in rows]
        count = total if q.count else None
        if q.cardinality == "single":
            return APIResponse(data=data[0] if data else None, count=count)
        if q.cardinality == "maybe_single":
            return APIResponse(data=data[0] if len(data) == 1 else None, count=count)
        return APIResponse(data=data, count=count)


def _sort_value(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return value
    if isinstance(value, datetime):
        return value.timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time()).timestamp()
    if value is None:
        return ""
    return str(value)


def _compare_values(a: Any, b: Any) -> int:
    left, right = _sort_value(a), _sort_value(b)
    if isinstance(left, str) != isinstance(right, str):
        left, right = str(left), str(right)
    if left == right:
        return 0
    return 1 if left > right else -1


def sort_records(rows: list[Record], column: str, *, desc: bool = False) -> list[Record]:
    """Stable sort on one column; equal keys keep their input order."""
    sign = -1 if desc else 1

    def compare(a: Record, b: Record) -> int:
        return sign * _compare_values(a.get(column), b.get(column))

    return sorted(rows, key=cmp_to_key(compare))


def paginate(
    rows: list[Record], *, limit: int | None = None, range_: tuple[int, int] | None = None
) -> list[Record]:
    """Apply an inclusive range, or else a row limit. Range wins when both are set."""
    if range_ is not None:
        start, end = range_
        return rows[start : end + 1]
    if limit is not None:
        return rows[:limit]
    return rows


def project(record: Record, columns: str | None) -> Record:
    """Return a copy of ``record`` restricted to the requested columns."""
    if columns is None or columns.strip() in ("", "*"):
        return dict(record)
    tokens = [t.strip() for t in columns.split(",") if t.strip()]
    if any("*" in t or "(" in t for t in tokens):
        return dict(record)
    result: Record = {}
    for token in tokens:
        name = token.split("::", 1)[0]
        alias = name
        if ":" in name:
            alias, name = (part.strip() for part in name.split(":", 1))
        if name in record:
            result[alias] = record[name]
    return result


def _describe_filter(expr: FilterExpression) -> dict[str, Any]:
    if isinstance(expr, RawOrExpression):
        return {"op": "or", "expression": expr.expression}
    if isinstance(expr, ComparisonExpression):
        return {"op": expr.op, "column": expr.column, "value": expr.value}
    return {"op": type(expr).__name__}
