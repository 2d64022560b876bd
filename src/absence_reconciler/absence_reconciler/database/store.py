from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, Sequence

Data = dict[str, Any]
Mutation = Callable[[Optional[Data]], Optional[Data]]


@dataclass(frozen=True)
class Document:
    id: str
    data: Data = field(default_factory=dict)


class DocumentStore(Protocol):
    """Key-value/document collection abstraction the services depend on.

    Note (DIP): services and repositories only see this interface, never a
    concrete backend.
    """

    async def get(self, collection: str, doc_id: str) -> Optional[Data]:
        raise NotImplementedError

    async def query(self, collection: str, field: str, value: Any) -> Sequence[Document]:
        """Documents whose top-level ``field`` equals ``value``."""

        raise NotImplementedError

    async def set(self, collection: str, doc_id: str, data: Data, *, merge: bool = False) -> None:
        raise NotImplementedError

    async def create(self, collection: str, doc_id: str, data: Data) -> bool:
        """Create the document unless it exists.

        Returns False (not an error) when another writer created it first.
        """

        raise NotImplementedError

    async def increment(self, collection: str, doc_id: str, field: str, amount: int = 1) -> None:
        raise NotImplementedError

    async def array_union(self, collection: str, doc_id: str, field: str, values: Sequence[Any]) -> None:
        raise NotImplementedError

    async def transact(self, collection: str, doc_id: str, mutate: Mutation) -> Optional[Data]:
        """Atomic read-modify-write of a single document.

        ``mutate`` receives a private copy of the current data (None when the
        document is missing) and returns the data to store, or None to leave
        the document untouched. Returns whatever ``mutate`` returned.
        """

        raise NotImplementedError


def merge_data(current: Optional[Data], data: Data) -> Data:
    merged = dict(current or {})
    merged.update(data)
    return merged


def union_values(existing: Any, values: Sequence[Any]) -> list[Any]:
    items = list(existing) if isinstance(existing, list) else []
    for value in values:
        if value not in items:
            items.append(value)
    return items
