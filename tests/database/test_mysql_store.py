from __future__ import annotations

import asyncio
import json

import pytest
from mysql.connector import errors as mysql_errors

from src.absence_reconciler.absence_reconciler.core.exceptions import PermanentStoreError, TransientStoreError
from src.absence_reconciler.absence_reconciler.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from src.absence_reconciler.absence_reconciler.database.mysql_base import load_json, translate_errors
from src.absence_reconciler.absence_reconciler.database.mysql_store import MySQLDocumentStore


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.rowcount = 0
        self._rows = []

    def execute(self, sql, params=()):
        self._conn.statements.append((" ".join(sql.split()), params))
        if self._conn.fail_with is not None:
            raise self._conn.fail_with
        if sql.lstrip().startswith("SELECT"):
            self._rows = list(self._conn.rows)
        else:
            self.rowcount = self._conn.rowcount

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=(), rowcount=1, fail_with=None):
        self.rows = list(rows)
        self.rowcount = rowcount
        self.fail_with = fail_with
        self.statements = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self, *, with_database=True):
        return self.conn


def store_with(conn):
    return MySQLDocumentStore(FakeConnectionFactory(conn))


def test_transact_locks_the_row_and_upserts():
    conn = FakeConnection(rows=[{"data": json.dumps({"absences": 1})}])

    updated = asyncio.run(store_with(conn).increment("users", "u-b", "absences"))

    assert updated is None
    select, upsert = conn.statements
    assert select[0].endswith("FOR UPDATE")
    assert upsert[1][:2] == ("users", "u-b")
    assert json.loads(upsert[1][2]) == {"absences": 2}
    assert conn.committed


def test_transact_returning_none_writes_nothing():
    conn = FakeConnection(rows=[])

    result = asyncio.run(store_with(conn).transact("users", "ghost", lambda current: current))

    assert result is None
    assert len(conn.statements) == 1


def test_create_reports_an_existing_document():
    assert asyncio.run(store_with(FakeConnection(rowcount=1)).create("sessions", "s1", {})) is True
    assert asyncio.run(store_with(FakeConnection(rowcount=0)).create("sessions", "s1", {})) is False


def test_query_matches_a_json_field():
    conn = FakeConnection(rows=[{"doc_id": "u-a", "data": b'{"role": "student"}'}])

    [doc] = asyncio.run(store_with(conn).query("users", "role", "student"))

    assert doc.id == "u-a"
    assert doc.data == {"role": "student"}
    assert conn.statements[0][1] == ("users", '$."role"', '"student"')


def test_connector_errors_are_classified():
    conn = FakeConnection(fail_with=mysql_errors.OperationalError("gone away"))

    with pytest.raises(TransientStoreError):
        asyncio.run(store_with(conn).get("users", "u-a"))
    assert conn.rolled_back

    with pytest.raises(PermanentStoreError):
        with translate_errors():
            raise mysql_errors.ProgrammingError("bad sql")


def test_load_json_requires_an_object():
    assert load_json(None) == {}
    assert load_json(bytearray(b'{"a": 1}')) == {"a": 1}
    with pytest.raises(PermanentStoreError):
        load_json("[1, 2]")


def test_schema_splitter_keeps_quoted_semicolons():
    sql = "CREATE DATABASE x;\nUSE x;\nCREATE TABLE t (c VARCHAR(8) DEFAULT 'a;b');\nSELECT 1"

    statements = list(_iter_sql_statements(_strip_create_db_and_use(sql)))

    assert statements == ["CREATE TABLE t (c VARCHAR(8) DEFAULT 'a;b')", "SELECT 1"]
