from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

import mysql.connector

from ..core.constants import CLASSES, STUDENT_ATTENDANCE, STUDENTS, TEACHERS
from ..core.exceptions import RemoteStoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, quote_ident
from .repository import Record, RecordStore

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TableMapping:
    name: str
    columns: tuple[str, ...]
    # Columns of the unique key an upsert collides on.
    conflict_keys: tuple[str, ...] = ("id",)

    def check_columns(self, names) -> None:
        unknown = [n for n in names if n not in self.columns]
        if unknown:
            raise RemoteStoreError(f"Unknown column(s) for {self.name}: {', '.join(unknown)}")


COLLECTIONS: dict[str, TableMapping] = {
    CLASSES: TableMapping(
        name="classes",
        columns=(
            "id", "name", "age_range", "room", "schedule", "color", "image_url",
            "show_image", "status", "created_at", "updated_at",
        ),
    ),
    STUDENTS: TableMapping(
        name="students",
        columns=(
            "id", "first_name", "last_name", "birth_date", "class_id", "guardian_name",
            "guardian_phone", "guardian_email", "photo_url", "status", "notes",
            "created_at", "updated_at",
        ),
    ),
    TEACHERS: TableMapping(
        name="teachers",
        columns=(
            "id", "first_name", "last_name", "national_id", "class_name", "photo_url",
            "status", "role", "phone", "email", "created_at", "updated_at",
        ),
    ),
    STUDENT_ATTENDANCE: TableMapping(
        name="student_attendance",
        columns=(
            "id", "member_id", "class_id", "session_date", "status", "recorded_by",
            "created_at", "updated_at",
        ),
        conflict_keys=("member_id", "class_id", "session_date"),
    ),
}


class MySQLRecordStore(RecordStore):
    """RecordStore over MySQL.

    The connector is blocking, so every statement runs in a worker thread and
    the event loop only awaits its completion.
    """

    def __init__(self, conn_factory: DatabaseConnection, collections: Mapping[str, TableMapping] = COLLECTIONS):
        self._conn_factory = conn_factory
        self._collections = dict(collections)

    def _table(self, collection: str) -> TableMapping:
        table = self._collections.get(collection)
        if table is None:
            raise RemoteStoreError(f"Unknown collection: {collection}")
        return table

    async def _call(self, what: str, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except mysql.connector.Error as e:
            log.warning("record store call failed: %s: %s", what, e)
            raise RemoteStoreError(f"{what} failed: {e}") from e

    async def get_records(
        self,
        collection: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        order_by: Sequence[str] = (),
    ) -> Sequence[Record]:
        table = self._table(collection)
        filters = dict(filters or {})
        table.check_columns(list(filters) + list(order_by))
        return await self._call(f"select {table.name}", self._select, table, filters, tuple(order_by))

    def _select(self, table: TableMapping, filters: dict, order_by: tuple[str, ...]) -> list[Record]:
        clauses: list[str] = []
        params: list[object] = []
        for name, value in filters.items():
            if value is None:
                clauses.append(f"{quote_ident(name)} IS NULL")
            else:
                clauses.append(f"{quote_ident(name)}=%s")
                params.append(value)

        sql = f"SELECT * FROM {quote_ident(table.name)}"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if order_by:
            sql += " ORDER BY " + ", ".join(quote_ident(c) for c in order_by)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return fetchall(cur)

    async def insert_record(self, collection: str, record: Mapping[str, Any]) -> Record:
        table = self._table(collection)
        row = dict(record)
        row.setdefault("id", str(uuid.uuid4()))
        table.check_columns(row)
        await self._call(f"insert {table.name}", self._insert, table, row)
        return row

    def _insert(self, table: TableMapping, row: Record) -> None:
        names = list(row)
        sql = (
            f"INSERT INTO {quote_ident(table.name)} ({', '.join(quote_ident(n) for n in names)}) "
            f"VALUES ({', '.join(['%s'] * len(names))})"
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(row[n] for n in names))

    async def upsert_batch(self, collection: str, records: Sequence[Mapping[str, Any]]) -> None:
        table = self._table(collection)
        if not records:
            return

        names: list[str] = ["id"]
        for r in records:
            for name in r:
                if name not in names:
                    names.append(name)
        table.check_columns(names)

        rows = [tuple(r.get(n) if n != "id" else (r.get("id") or str(uuid.uuid4())) for n in names) for r in records]
        await self._call(f"upsert {table.name}", self._upsert, table, names, rows)

    def _upsert(self, table: TableMapping, names: list[str], rows: list[tuple]) -> None:
        updates = [n for n in names if n != "id" and n not in table.conflict_keys]
        sql = (
            f"INSERT INTO {quote_ident(table.name)} ({', '.join(quote_ident(n) for n in names)}) "
            f"VALUES ({', '.join(['%s'] * len(names))})"
        )
        if updates:
            sql += " ON DUPLICATE KEY UPDATE " + ", ".join(f"{quote_ident(n)}=VALUES({quote_ident(n)})" for n in updates)

        # One transaction: the batch lands completely or not at all.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(sql, rows)

    async def update_record(self, collection: str, record_id: str, fields: Mapping[str, Any]) -> None:
        table = self._table(collection)
        fields = {k: v for k, v in fields.items() if k != "id"}
        if not fields:
            return
        table.check_columns(fields)
        await self._call(f"update {table.name}", self._update, table, str(record_id), fields)

    def _update(self, table: TableMapping, record_id: str, fields: dict) -> None:
        assignments = ", ".join(f"{quote_ident(n)}=%s" for n in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {quote_ident(table.name)} SET {assignments} WHERE `id`=%s",
                (*fields.values(), record_id),
            )

    async def delete_record(self, collection: str, record_id: str) -> None:
        table = self._table(collection)
        await self._call(f"delete {table.name}", self._delete, table, str(record_id))

    def _delete(self, table: TableMapping, record_id: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM {quote_ident(table.name)} WHERE `id`=%s", (record_id,))
