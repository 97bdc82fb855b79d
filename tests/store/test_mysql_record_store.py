from __future__ import annotations

from datetime import date

import mysql.connector
import pytest

from src.class_attendance.class_attendance.core.exceptions import RemoteStoreError
from src.class_attendance.class_attendance.store.mysql_record_store import MySQLRecordStore


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn

    def execute(self, sql, params=()):
        self.conn.statements.append((sql, tuple(params)))
        if self.conn.error:
            raise self.conn.error

    def executemany(self, sql, rows):
        self.conn.statements.append((sql, list(rows)))
        if self.conn.error:
            raise self.conn.error

    def fetchall(self):
        return list(self.conn.result)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, result=(), error=None):
        self.result = result
        self.error = error
        self.statements: list = []
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self):
        return self.conn


@pytest.mark.asyncio
async def test_get_records_builds_filtered_ordered_select():
    conn = FakeConnection(result=[{"id": "S1", "last_name": "Alvarez"}])
    store = MySQLRecordStore(FakeConnFactory(conn))

    rows = await store.get_records("students", {"class_id": "C1", "status": None}, order_by=("last_name",))

    assert rows == [{"id": "S1", "last_name": "Alvarez"}]
    sql, params = conn.statements[0]
    assert sql == "SELECT * FROM `students` WHERE `class_id`=%s AND `status` IS NULL ORDER BY `last_name`"
    assert params == ("C1",)
    assert conn.closed


@pytest.mark.asyncio
async def test_upsert_batch_is_one_statement_keyed_on_attendance_identity():
    conn = FakeConnection()
    store = MySQLRecordStore(FakeConnFactory(conn))
    day = date(2026, 2, 1)

    await store.upsert_batch(
        "student_attendance",
        [
            {"member_id": "A", "class_id": "C1", "session_date": day, "status": "present", "recorded_by": "admin"},
            {"member_id": "B", "class_id": "C1", "session_date": day, "status": "absent", "recorded_by": "admin"},
        ],
    )

    assert len(conn.statements) == 1
    sql, rows = conn.statements[0]
    assert sql.startswith("INSERT INTO `student_attendance` (`id`, `member_id`, `class_id`, `session_date`")
    assert sql.endswith("ON DUPLICATE KEY UPDATE `status`=VALUES(`status`), `recorded_by`=VALUES(`recorded_by`)")
    assert [r[1:] for r in rows] == [("A", "C1", day, "present", "admin"), ("B", "C1", day, "absent", "admin")]
    assert all(r[0] for r in rows)
    assert conn.committed


@pytest.mark.asyncio
async def test_empty_upsert_does_not_connect():
    conn = FakeConnection()
    store = MySQLRecordStore(FakeConnFactory(conn))

    await store.upsert_batch("student_attendance", [])

    assert conn.statements == []


@pytest.mark.asyncio
async def test_update_ignores_id_field():
    conn = FakeConnection()
    store = MySQLRecordStore(FakeConnFactory(conn))

    await store.update_record("teachers", "T1", {"id": "T9", "class_name": ""})

    assert conn.statements == [("UPDATE `teachers` SET `class_name`=%s WHERE `id`=%s", ("", "T1"))]


@pytest.mark.asyncio
async def test_driver_errors_become_remote_store_errors():
    conn = FakeConnection(error=mysql.connector.Error("gone away"))
    store = MySQLRecordStore(FakeConnFactory(conn))

    with pytest.raises(RemoteStoreError):
        await store.delete_record("classes", "C1")
    assert conn.rolled_back
    assert not conn.committed


@pytest.mark.asyncio
async def test_unknown_columns_are_rejected_before_sql():
    conn = FakeConnection()
    store = MySQLRecordStore(FakeConnFactory(conn))

    with pytest.raises(RemoteStoreError):
        await store.insert_record("classes", {"name": "X", "drop table": 1})
    assert conn.statements == []
