from __future__ import annotations

from typing import Optional, Sequence

from ..common.logging import get_logger
from ..core.constants import USERS_COLLECTION
from ..database.store import Data, DocumentStore
from .model import Student
from .repository import StudentRepository

log = get_logger(__name__)


def _to_student(doc_id: str, data: Data) -> Student:
    return Student(
        id=doc_id,
        matricule=str(data.get("matricule") or ""),
        first_name=str(data.get("first_name") or ""),
        last_name=str(data.get("last_name") or ""),
        class_id=str(data.get("class_id") or ""),
        role=str(data.get("role") or ""),
    )


class DocumentStudentRepository(StudentRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    async def list_by_role(self, role: str) -> Sequence[Student]:
        docs = await self._store.query(USERS_COLLECTION, "role", role)
        return [_to_student(d.id, d.data) for d in docs]

    async def find_by_matricule(self, matricule: str) -> Optional[Student]:
        docs = await self._store.query(USERS_COLLECTION, "matricule", matricule)
        if not docs:
            return None
        if len(docs) > 1:
            log.warning("duplicate_matricule", matricule=matricule, user_ids=[d.id for d in docs])
        return _to_student(docs[0].id, docs[0].data)

    async def get_notifications(self, user_id: str) -> Sequence[dict]:
        data = await self._store.get(USERS_COLLECTION, user_id)
        if not data:
            return []
        notifications = data.get("notifications")
        return list(notifications) if isinstance(notifications, list) else []
