from __future__ import annotations

import asyncio
import copy
import uuid
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

import pytest

from src.class_attendance.class_attendance.core.exceptions import RemoteStoreError
from src.class_attendance.class_attendance.feedback.context import FeedbackContext


class FakeHandle:
    def __init__(self, when_ms: int, seq: int, callback):
        self.when_ms = when_ms
        self.seq = seq
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock: callbacks fire only when the test advances time."""

    def __init__(self):
        self.now_ms = 0
        self._seq = 0
        self._handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback) -> FakeHandle:
        self._seq += 1
        handle = FakeHandle(self.now_ms + round(delay * 1000), self._seq, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled and not h.fired)

    def advance(self, ms: int) -> None:
        target = self.now_ms + ms
        while True:
            due = [h for h in self._handles if not h.cancelled and not h.fired and h.when_ms <= target]
            if not due:
                break
            h = min(due, key=lambda x: (x.when_ms, x.seq))
            self.now_ms = h.when_ms
            h.fired = True
            h.callback()
        self.now_ms = target


UNIQUE_KEYS = {"student_attendance": ("member_id", "class_id", "session_date")}


class InMemoryRecordStore:
    """RecordStore double with call log and failure injection."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = defaultdict(dict)
        self.calls: list[tuple] = []
        self._failures: list[dict] = []
        self.delay_seconds: dict[str, float] = {}

    def seed(self, collection: str, *records: Mapping[str, Any]) -> None:
        for r in records:
            row = dict(r)
            row.setdefault("id", str(uuid.uuid4()))
            self.tables[collection][row["id"]] = row

    def rows(self, collection: str) -> list[dict]:
        return [dict(r) for r in self.tables[collection].values()]

    def fail_on(self, op: str, collection: Optional[str] = None, *, record_id: Optional[str] = None, times: int = 1):
        self._failures.append({"op": op, "collection": collection, "record_id": record_id, "times": times})

    async def _enter(self, op: str, collection: str, record_id: Optional[str] = None) -> None:
        self.calls.append((op, collection, record_id))
        delay = self.delay_seconds.get(op)
        if delay:
            await asyncio.sleep(delay)
        else:
            await asyncio.sleep(0)
        for f in self._failures:
            if f["times"] <= 0 or f["op"] != op:
                continue
            if f["collection"] not in (None, collection):
                continue
            if f["record_id"] not in (None, record_id):
                continue
            f["times"] -= 1
            raise RemoteStoreError(f"{op} {collection} failed")

    async def get_records(self, collection, filters=None, *, order_by: Sequence[str] = ()):
        await self._enter("get_records", collection)
        filters = dict(filters or {})
        out = [
            copy.deepcopy(r)
            for r in self.tables[collection].values()
            if all(r.get(k) == v for k, v in filters.items())
        ]
        for name in reversed(tuple(order_by)):
            out.sort(key=lambda r: (r.get(name) is None, r.get(name) or ""))
        return out

    async def insert_record(self, collection, record):
        await self._enter("insert_record", collection)
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        self.tables[collection][row["id"]] = row
        return dict(row)

    async def upsert_batch(self, collection, records):
        await self._enter("upsert_batch", collection)
        keys = UNIQUE_KEYS.get(collection, ("id",))
        for record in records:
            row = dict(record)
            existing = next(
                (r for r in self.tables[collection].values() if all(r.get(k) == row.get(k) for k in keys)),
                None,
            )
            row["id"] = existing["id"] if existing else row.get("id") or str(uuid.uuid4())
            self.tables[collection][row["id"]] = row

    async def update_record(self, collection, record_id, fields):
        await self._enter("update_record", collection, record_id)
        if record_id in self.tables[collection]:
            self.tables[collection][record_id].update(fields)

    async def delete_record(self, collection, record_id):
        await self._enter("delete_record", collection, record_id)
        self.tables[collection].pop(record_id, None)


@pytest.fixture
def fixed_now():
    return datetime(2026, 2, 1, 8, 30, 0)


@pytest.fixture
def today() -> date:
    return date(2026, 2, 1)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def feedback(scheduler):
    ctx = FeedbackContext(scheduler)
    ctx.mount()
    yield ctx
    ctx.unmount()


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


def messages(feedback: FeedbackContext, category=None) -> list[str]:
    return [
        n.message
        for n in feedback.snapshot().notifications
        if category is None or n.category == category
    ]


@pytest.fixture
def notified():
    return messages
