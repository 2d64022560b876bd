from __future__ import annotations

from typing import Sequence

from ..common.logging import get_logger
from ..common.validators import require_non_empty
from ..core.constants import UNKNOWN_CLASS_LABEL
from .model import ClassSchedule
from .repository import ScheduleRepository

log = get_logger(__name__)


class TimetableService:
    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    async def schedules_for_class(self, class_id: str) -> Sequence[ClassSchedule]:
        """All timetable documents of a class; an empty list is not an error."""

        class_id = require_non_empty(class_id, "class_id")
        schedules = await self._schedules.list_for_class(class_id)
        if not schedules:
            log.warning("no_schedule_for_class", class_id=class_id)
        return schedules

    async def class_label(self, class_id: str) -> str:
        label = await self._schedules.get_class_label(class_id)
        if label is None:
            log.warning("class_document_missing", class_id=class_id)
            return UNKNOWN_CLASS_LABEL
        return label
