from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Sequence

from ..attendance.model import AttendanceEntry, Justification, Notification
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import Clock, now_local
from ..common.keys import unique_id
from ..common.logging import get_logger
from ..core.constants import ABSENCE_MESSAGE, DEFAULT_SLOT_DELAY_SECONDS, DEFAULT_STUDENT_DELAY_SECONDS
from ..core.enums import AttendanceType, NotificationType, StudentOutcome
from ..core.exceptions import ValidationError
from ..schedules.model import ClassSchedule, Slot
from ..schedules.service import TimetableService
from ..sessions.model import Session
from ..sessions.repository import SessionRepository
from ..sessions.service import SessionService
from ..users.model import Student
from ..users.repository import StudentRepository
from ..users.service import RosterService
from .cache import NotificationCache
from .model import PassReport

log = get_logger(__name__)


class AbsenceReconciliationService:
    """Records an absence for every rostered student who did not check in
    to a class session that has already ended today.

    Safe to run repeatedly: sessions are created at most once, attendance
    entries are replaced by key, and the counter/notification pair is
    guarded by a same-day scan inside one store transaction.
    """

    def __init__(
        self,
        *,
        roster: RosterService,
        timetable: TimetableService,
        sessions: SessionService,
        session_repo: SessionRepository,
        students: StudentRepository,
        attendance: AttendanceRepository,
        cache: NotificationCache | None = None,
        clock: Clock = now_local,
        student_delay: float = DEFAULT_STUDENT_DELAY_SECONDS,
        slot_delay: float = DEFAULT_SLOT_DELAY_SECONDS,
    ):
        self._roster = roster
        self._timetable = timetable
        self._sessions = sessions
        self._session_repo = session_repo
        self._students = students
        self._attendance = attendance
        self._cache = cache or NotificationCache()
        self._clock = clock
        self._student_delay = float(student_delay)
        self._slot_delay = float(slot_delay)

    async def run_pass(self) -> PassReport:
        """One full pass over every class.

        Failures of a single class, slot or student are logged and skipped;
        a failure to load the roster propagates to the caller.
        """

        now = self._clock()
        report = PassReport(started_at=now)
        dropped = self._cache.prune(now.date())
        log.info("absence_pass_started", cache_pruned=dropped)

        roster = await self._roster.load_roster()
        if not roster:
            log.warning("empty_roster")

        for class_id, students in roster.items():
            report.classes += 1
            try:
                await self.process_class(class_id, students, now=now, report=report)
            except Exception:
                report.failed_classes += 1
                log.exception("class_processing_failed", class_id=class_id)

        report.finished_at = self._clock()
        log.info("absence_pass_finished", **report.to_dict())
        return report

    async def process_class(
        self,
        class_id: str,
        students: Sequence[Student],
        *,
        now: datetime,
        report: PassReport,
    ) -> None:
        schedules = await self._timetable.schedules_for_class(class_id)
        if not schedules:
            return

        class_label = await self._timetable.class_label(class_id)

        for schedule in schedules:
            for slot in schedule.slots:
                try:
                    due = self._sessions.is_due(slot, now)
                except ValidationError:
                    log.warning("malformed_slot_skipped", class_id=class_id, subject_id=slot.subject_id, end=slot.end)
                    continue
                if not due:
                    continue

                report.slots_due += 1
                try:
                    await self.process_slot(schedule, slot, students, class_label=class_label, now=now, report=report)
                except Exception:
                    report.failed_slots += 1
                    log.exception("slot_processing_failed", class_id=class_id, subject_id=slot.subject_id)
                await asyncio.sleep(self._slot_delay)

    async def process_slot(
        self,
        schedule: ClassSchedule,
        slot: Slot,
        students: Sequence[Student],
        *,
        class_label: str,
        now: datetime,
        report: PassReport,
    ) -> None:
        result = await self._sessions.establish(schedule, slot, class_label=class_label, now=now)
        if result.created:
            report.sessions_created += 1

        for student in students:
            outcome = await self.process_student(result.session, schedule, slot, student, now=now)
            report.record(outcome)
            await asyncio.sleep(self._student_delay)

    async def process_student(
        self,
        session: Session,
        schedule: ClassSchedule,
        slot: Slot,
        student: Student,
        *,
        now: datetime,
    ) -> StudentOutcome:
        try:
            user = await self._students.find_by_matricule(student.matricule)
            if user is None:
                log.warning("user_not_found", matricule=student.matricule, session_id=session.id)
                return StudentOutcome.USER_NOT_FOUND

            today = now.date()
            notify = not self._cache.was_sent(student.matricule, slot.subject_id, today)

            entry = AttendanceEntry(
                subject_id=slot.subject_id,
                subject_label=slot.subject_label,
                matricule=student.matricule,
                full_name=student.full_name,
                timestamp=now,
                type=AttendanceType.ABSENCE,
                start=slot.start,
                end=slot.end,
                date=today,
                teacher=slot.teacher,
                room=slot.room,
                year=schedule.year,
                semester=schedule.semester,
                justification=Justification(),
            )
            notification = None
            if notify:
                notification = Notification(
                    id=unique_id("absence"),
                    course_title=slot.subject_label,
                    subject_id=slot.subject_id,
                    timestamp=now,
                    date=today,
                    message=ABSENCE_MESSAGE.format(subject=slot.subject_label),
                    type=NotificationType.ABSENCE,
                )

            write = await self._attendance.record_absence(user_id=user.id, entry=entry, notification=notification)
            if write is None:
                log.warning("user_not_found", matricule=student.matricule, user_id=user.id)
                return StudentOutcome.USER_NOT_FOUND
            if write.present:
                return StudentOutcome.PRESENT

            if not await self._session_repo.upsert_entry(session.id, entry):
                log.warning("session_missing_for_entry", session_id=session.id, matricule=student.matricule)

            if notify:
                self._cache.mark_sent(student.matricule, slot.subject_id, today)

            if write.counted:
                log.info("absence_recorded", matricule=student.matricule, session_id=session.id)
                return StudentOutcome.ABSENCE_RECORDED
            return StudentOutcome.ALREADY_RECORDED
        except Exception:
            log.exception("student_processing_failed", matricule=student.matricule, session_id=session.id)
            return StudentOutcome.FAILED
