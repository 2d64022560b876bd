from __future__ import annotations

import asyncio
import copy
import threading
from typing import Any, Optional, Sequence

from .store import Data, Document, DocumentStore, Mutation, merge_data, union_values


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store for development and tests.

    Each operation yields once to the event loop (like a network round trip)
    and then runs its read-modify-write under a lock without suspending, so
    ``transact`` is atomic even across threads and event loops.
    """

    def __init__(self, initial: Optional[dict[str, dict[str, Data]]] = None):
        self._collections: dict[str, dict[str, Data]] = copy.deepcopy(initial or {})
        self._lock = threading.RLock()
        self.writes = 0

    def _docs(self, collection: str) -> dict[str, Data]:
        return self._collections.setdefault(collection, {})

    def _write(self, collection: str, doc_id: str, data: Data) -> None:
        self._docs(collection)[doc_id] = copy.deepcopy(data)
        self.writes += 1

    def seed(self, collection: str, doc_id: str, data: Data) -> None:
        with self._lock:
            self._docs(collection)[doc_id] = copy.deepcopy(data)

    def dump(self, collection: str) -> dict[str, Data]:
        with self._lock:
            return copy.deepcopy(self._docs(collection))

    async def get(self, collection: str, doc_id: str) -> Optional[Data]:
        await asyncio.sleep(0)
        with self._lock:
            doc = self._docs(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    async def query(self, collection: str, field: str, value: Any) -> Sequence[Document]:
        await asyncio.sleep(0)
        with self._lock:
            return [
                Document(id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in self._docs(collection).items()
                if data.get(field) == value
            ]

    async def set(self, collection: str, doc_id: str, data: Data, *, merge: bool = False) -> None:
        await asyncio.sleep(0)
        with self._lock:
            current = self._docs(collection).get(doc_id)
            self._write(collection, doc_id, merge_data(current, data) if merge else data)

    async def create(self, collection: str, doc_id: str, data: Data) -> bool:
        await asyncio.sleep(0)
        with self._lock:
            if doc_id in self._docs(collection):
                return False
            self._write(collection, doc_id, data)
            return True

    async def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> None:
        await asyncio.sleep(0)
        with self._lock:
            current = dict(self._docs(collection).get(doc_id) or {})
            current[field] = int(current.get(field) or 0) + int(amount)
            self._write(collection, doc_id, current)

    async def array_union(self, collection: str, doc_id: str, field: str, values: Sequence[Any]) -> None:
        await asyncio.sleep(0)
        with self._lock:
            current = dict(self._docs(collection).get(doc_id) or {})
            current[field] = union_values(current.get(field), values)
            self._write(collection, doc_id, current)

    async def transact(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Data]:
        await asyncio.sleep(0)
        with self._lock:
            current = self._docs(collection).get(doc_id)
            updated = mutate(copy.deepcopy(current) if current is not None else None)
            if updated is not None:
                self._write(collection, doc_id, updated)
            return updated
