from __future__ import annotations

import asyncio
import copy
import json
from typing import Any, Optional, Sequence

from .connection import DatabaseConnection
from .mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .store import Data, Document, DocumentStore, Mutation, merge_data, union_values

_SELECT_FOR_UPDATE = """
    SELECT data FROM documents
    WHERE collection=%s AND doc_id=%s
    FOR UPDATE
"""

_UPSERT = """
    INSERT INTO documents(collection, doc_id, data)
    VALUES(%s,%s,%s)
    ON DUPLICATE KEY UPDATE data=VALUES(data)
"""


class MySQLDocumentStore(DocumentStore):
    """Document store over a single MySQL table with a JSON column.

    Blocking connector calls run in worker threads; every mutation is a
    ``SELECT ... FOR UPDATE`` plus upsert inside one transaction.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _mutate_sync(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Data]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT_FOR_UPDATE, (collection, doc_id))
            row = fetchone(cur)
            current = load_json(row["data"]) if row else None
            updated = mutate(copy.deepcopy(current) if current is not None else None)
            if updated is not None:
                cur.execute(_UPSERT, (collection, doc_id, dump_json(updated)))
            return updated

    def _get_sync(self, collection: str, doc_id: str) -> Optional[Data]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT data FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            row = fetchone(cur)
            return load_json(row["data"]) if row else None

    def _query_sync(self, collection: str, field: str, value: Any) -> list[Document]:
        path = "$." + json.dumps(field)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT doc_id, data FROM documents
                WHERE collection=%s AND JSON_EXTRACT(data, %s) = CAST(%s AS JSON)
                ORDER BY doc_id
                """,
                (collection, path, json.dumps(value)),
            )
            return [Document(id=str(r["doc_id"]), data=load_json(r["data"])) for r in fetchall(cur)]

    def _create_sync(self, collection: str, doc_id: str, data: Data) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO documents(collection, doc_id, data) VALUES(%s,%s,%s)",
                (collection, doc_id, dump_json(data)),
            )
            return cur.rowcount > 0

    async def get(self, collection: str, doc_id: str) -> Optional[Data]:
        return await asyncio.to_thread(self._get_sync, collection, doc_id)

    async def query(self, collection: str, field: str, value: Any) -> Sequence[Document]:
        return await asyncio.to_thread(self._query_sync, collection, field, value)

    async def set(self, collection: str, doc_id: str, data: Data, *, merge: bool = False) -> None:
        if merge:
            await self.transact(collection, doc_id, lambda current: merge_data(current, data))
        else:
            await self.transact(collection, doc_id, lambda _current: dict(data))

    async def create(self, collection: str, doc_id: str, data: Data) -> bool:
        return await asyncio.to_thread(self._create_sync, collection, doc_id, data)

    async def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> None:
        def bump(current: Optional[Data]) -> Data:
            updated = dict(current or {})
            updated[field] = int(updated.get(field) or 0) + int(amount)
            return updated

        await self.transact(collection, doc_id, bump)

    async def array_union(self, collection: str, doc_id: str, field: str, values: Sequence[Any]) -> None:
        def union(current: Optional[Data]) -> Data:
            updated = dict(current or {})
            updated[field] = union_values(updated.get(field), values)
            return updated

        await self.transact(collection, doc_id, union)

    async def transact(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Data]:
        return await asyncio.to_thread(self._mutate_sync, collection, doc_id, mutate)
