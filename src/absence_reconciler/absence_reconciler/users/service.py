from __future__ import annotations

from collections import defaultdict

from ..common.logging import get_logger
from ..core.constants import DEFAULT_STUDENT_ROLE
from .model import Student
from .repository import StudentRepository

log = get_logger(__name__)


class RosterService:
    """Loads every learner and groups them by class."""

    def __init__(self, students: StudentRepository, *, student_role: str = DEFAULT_STUDENT_ROLE):
        self._students = students
        self._role = student_role

    async def load_roster(self) -> dict[str, list[Student]]:
        roster: dict[str, list[Student]] = defaultdict(list)
        for student in await self._students.list_by_role(self._role):
            if not student.class_id:
                log.warning("student_without_class", user_id=student.id, matricule=student.matricule)
                continue
            if not student.matricule:
                log.warning("student_without_matricule", user_id=student.id)
                continue
            roster[student.class_id].append(student)
        return dict(roster)
