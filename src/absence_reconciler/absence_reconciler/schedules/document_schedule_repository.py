from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.logging import get_logger
from ..core.constants import CLASSES_COLLECTION, SCHEDULES_COLLECTION
from ..database.store import Data, DocumentStore
from .model import ClassSchedule, Slot
from .repository import ScheduleRepository

log = get_logger(__name__)


def _as_weekday(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    weekday = int(value)
    if not 1 <= weekday <= 7:
        raise ValueError(f"weekday out of range: {weekday}")
    return weekday


def _as_unavailable(value: Any) -> bool:
    # Older documents store the flag as 0/1, some as "true"/"1".
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true"}
    return value == 1


def _to_slot(data: Data) -> Slot:
    return Slot(
        subject_id=str(data.get("subject_id") or ""),
        subject_label=str(data.get("subject_label") or ""),
        start=str(data.get("start") or ""),
        end=str(data.get("end") or ""),
        weekday=_as_weekday(data.get("weekday")),
        room=str(data.get("room") or ""),
        teacher=str(data.get("teacher") or ""),
        unavailable=_as_unavailable(data.get("unavailable")),
    )


def _to_slots(schedule_id: str, raw: Any) -> tuple[Slot, ...]:
    slots = []
    for index, item in enumerate(raw if isinstance(raw, list) else []):
        if not isinstance(item, dict):
            log.warning("malformed_slot_skipped", schedule_id=schedule_id, index=index)
            continue
        try:
            slots.append(_to_slot(item))
        except (TypeError, ValueError):
            log.warning("malformed_slot_skipped", schedule_id=schedule_id, index=index, subject_id=item.get("subject_id"))
    return tuple(slots)


def _to_schedule(schedule_id: str, data: Data) -> ClassSchedule:
    return ClassSchedule(
        class_id=str(data.get("class_id") or ""),
        year=str(data.get("year") or ""),
        semester=str(data.get("semester") or ""),
        title=str(data.get("title") or ""),
        slots=_to_slots(schedule_id, data.get("slots")),
    )


class DocumentScheduleRepository(ScheduleRepository):
    def __init__(self, store: DocumentStore):
        self._store = store

    async def list_for_class(self, class_id: str) -> Sequence[ClassSchedule]:
        schedules = []
        for doc in await self._store.query(SCHEDULES_COLLECTION, "class_id", class_id):
            try:
                schedules.append(_to_schedule(doc.id, doc.data))
            except (TypeError, ValueError):
                log.warning("malformed_schedule_skipped", schedule_id=doc.id, class_id=class_id)
        return schedules

    async def get_class_label(self, class_id: str) -> Optional[str]:
        data = await self._store.get(CLASSES_COLLECTION, class_id)
        if not data or not data.get("label"):
            return None
        return str(data["label"]).lower()
