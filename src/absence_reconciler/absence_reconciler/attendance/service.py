from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, now_local
from ..common.keys import session_key, unique_id
from ..common.logging import get_logger
from ..common.validators import require_hhmm, require_non_empty
from ..core.constants import PRESENCE_MESSAGE
from ..core.enums import AttendanceType, JustificationStatus, NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..sessions.repository import SessionRepository
from ..users.repository import StudentRepository
from .model import AttendanceEntry, EntryRef, Justification, Notification
from .repository import AttendanceRepository, EntryWrite
from .serialization import justification_from_document

log = get_logger(__name__)

_OPEN_STATUSES = {JustificationStatus.PENDING, JustificationStatus.REJECTED}


class AttendanceService:
    """Check-in and justification operations on top of the attendance lists."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        sessions: SessionRepository,
        *,
        clock: Clock = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._sessions = sessions
        self._clock = clock

    async def record_presence(
        self,
        matricule: str,
        *,
        subject_id: str,
        subject_label: str,
        start: str,
        end: str,
        teacher: str = "",
        room: str = "",
        year: str = "",
        semester: str = "",
        now: Optional[datetime] = None,
    ) -> EntryWrite:
        matricule = require_non_empty(matricule, "matricule")
        subject_id = require_non_empty(subject_id, "subject_id")
        start = require_hhmm(start, "start")
        end = require_hhmm(end, "end")
        now = now or self._clock()

        student = await self._students.find_by_matricule(matricule)
        if not student:
            raise NotFoundError(f"No student with matricule {matricule}")

        entry = AttendanceEntry(
            subject_id=subject_id,
            subject_label=subject_label,
            matricule=matricule,
            full_name=student.full_name,
            timestamp=now,
            type=AttendanceType.PRESENCE,
            start=start,
            end=end,
            date=now.date(),
            teacher=teacher,
            room=room,
            year=year,
            semester=semester,
        )
        notification = Notification(
            id=unique_id("presence"),
            course_title=subject_label,
            subject_id=subject_id,
            timestamp=now,
            date=now.date(),
            message=PRESENCE_MESSAGE.format(subject=subject_label),
            type=NotificationType.PRESENCE,
        )

        result = await self._attendance.record_presence(user_id=student.id, entry=entry, notification=notification)
        if result is None:
            raise NotFoundError(f"No student with matricule {matricule}")

        if year and student.class_id:
            sid = session_key(year, student.class_id, now.date(), subject_id, start, end)
            if not await self._sessions.upsert_entry(sid, entry):
                log.debug("presence_without_session", session_id=sid, matricule=matricule)

        log.info("presence_recorded", matricule=matricule, subject_id=subject_id, counted=result.counted)
        return result

    async def list_entries(self, matricule: str) -> Sequence[AttendanceEntry]:
        student = await self._students.find_by_matricule(require_non_empty(matricule, "matricule"))
        if not student:
            raise NotFoundError(f"No student with matricule {matricule}")
        return await self._attendance.list_entries(student.id)

    async def _current_justification(self, session_id: str, ref: EntryRef) -> Justification:
        entry = await self._sessions.find_entry(session_id, ref)
        if entry is None:
            raise NotFoundError("Absence not found in session")
        return justification_from_document(entry.get("justification")) or Justification()

    async def _store_justification(self, session_id: str, ref: EntryRef, justification: Justification) -> None:
        if not await self._sessions.set_justification(session_id, ref, justification):
            raise NotFoundError("Absence not found in session")

        student = await self._students.find_by_matricule(ref.matricule)
        if not student or not await self._attendance.set_justification(
            user_id=student.id, ref=ref, justification=justification
        ):
            log.warning("justification_not_mirrored", session_id=session_id, matricule=ref.matricule)

    async def submit_justification(
        self,
        session_id: str,
        ref: EntryRef,
        *,
        content: str,
        documents: Sequence[str] = (),
        now: Optional[datetime] = None,
    ) -> Justification:
        content = (content or "").strip()
        documents = tuple(d for d in documents if d)
        if not content and not documents:
            raise ValidationError("A justification needs a text or at least one document")

        current = await self._current_justification(session_id, ref)
        if current.status not in _OPEN_STATUSES:
            raise ValidationError(f"Justification already {current.status.name.lower()}")

        justification = Justification(
            content=content,
            documents=documents,
            submitted_at=now or self._clock(),
            status=JustificationStatus.SUBMITTED,
        )
        await self._store_justification(session_id, ref, justification)
        log.info("justification_submitted", session_id=session_id, matricule=ref.matricule)
        return justification

    async def review_justification(self, session_id: str, ref: EntryRef, *, approve: bool) -> Justification:
        current = await self._current_justification(session_id, ref)
        if current.status != JustificationStatus.SUBMITTED:
            raise ValidationError("Only submitted justifications can be reviewed")

        decided = replace(
            current,
            status=JustificationStatus.APPROVED if approve else JustificationStatus.REJECTED,
        )
        await self._store_justification(session_id, ref, decided)
        log.info("justification_reviewed", session_id=session_id, matricule=ref.matricule, status=decided.status.value)
        return decided
