from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errors as mysql_errors

from ..core.exceptions import PermanentStoreError, TransientStoreError
from .connection import DatabaseConnection

_TRANSIENT_ERRORS = (
    mysql_errors.OperationalError,
    mysql_errors.InterfaceError,
    mysql_errors.PoolError,
)


@contextmanager
def translate_errors():
    """Re-raise connector errors as store errors the services understand."""
    try:
        yield
    except _TRANSIENT_ERRORS as e:
        raise TransientStoreError(str(e)) from e
    except mysql.connector.Error as e:
        raise PermanentStoreError(str(e)) from e


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    with translate_errors():
        conn = conn_factory.connect()
        try:
            cur = conn.cursor(dictionary=dictionary)
            try:
                yield conn, cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def load_json(value: Any) -> Dict[str, Any]:
    """Normalize a JSON column across connector implementations.

    mysql-connector can return JSON as str, bytes or bytearray.
    """

    if value is None:
        return {}
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            raise PermanentStoreError(f"Document is not a JSON object: {value[:80]!r}")
        return loaded
    if isinstance(value, dict):
        return value
    raise PermanentStoreError(f"Unsupported JSON column type: {type(value)!r}")


def dump_json(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False, default=str)
