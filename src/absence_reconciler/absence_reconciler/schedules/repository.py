from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ClassSchedule


class ScheduleRepository(Protocol):
    async def list_for_class(self, class_id: str) -> Sequence[ClassSchedule]:
        raise NotImplementedError

    async def get_class_label(self, class_id: str) -> Optional[str]:
        raise NotImplementedError
