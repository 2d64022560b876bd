from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Student:
    """Domain entity: a learner on a class roster.

    Note: plain data object, no store access here.
    """

    id: str
    matricule: str
    first_name: str
    last_name: str
    class_id: str
    role: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
