from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import business_weekday, is_course_day, is_time_expired
from ..common.keys import session_key
from ..common.logging import get_logger
from ..schedules.model import ClassSchedule, Slot
from .model import Session, SessionResult
from .repository import SessionRepository

log = get_logger(__name__)


class SessionService:
    """Turns (schedule, slot, today) into exactly one session record."""

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    @staticmethod
    def is_due(slot: Slot, now: datetime) -> bool:
        """A slot is due once it is scheduled today and its class has ended.

        Slots cancelled by the teacher are never due.
        """

        if slot.unavailable:
            return False
        if not is_course_day(slot.weekday, now.date()):
            return False
        return is_time_expired(slot.end, now)

    @staticmethod
    def build_session(schedule: ClassSchedule, slot: Slot, *, class_label: str, now: datetime) -> Session:
        today = now.date()
        return Session(
            id=session_key(schedule.year, schedule.class_id, today, slot.subject_id, slot.start, slot.end),
            year=schedule.year,
            class_id=schedule.class_id,
            class_label=class_label,
            semester=schedule.semester,
            date=today,
            weekday=slot.weekday or business_weekday(today),
            start=slot.start,
            end=slot.end,
            room=slot.room,
            subject_id=slot.subject_id,
            subject_label=slot.subject_label,
            teacher=slot.teacher,
            created_at=now,
        )

    async def establish(self, schedule: ClassSchedule, slot: Slot, *, class_label: str, now: datetime) -> SessionResult:
        session = self.build_session(schedule, slot, class_label=class_label, now=now)

        if await self._sessions.get(session.id) is not None:
            return SessionResult(session=session, created=False)

        # Another pass may win the race between the read and the create.
        created = await self._sessions.create_if_absent(session)
        if created:
            log.info("session_created", session_id=session.id, class_id=session.class_id)
        else:
            log.debug("session_created_concurrently", session_id=session.id)
        return SessionResult(session=session, created=created)
