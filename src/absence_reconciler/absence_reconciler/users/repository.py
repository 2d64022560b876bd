from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Repository interface for user documents holding students.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    async def list_by_role(self, role: str) -> Sequence[Student]:
        raise NotImplementedError

    async def find_by_matricule(self, matricule: str) -> Optional[Student]:
        raise NotImplementedError

    async def get_notifications(self, user_id: str) -> Sequence[dict]:
        raise NotImplementedError
