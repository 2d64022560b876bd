from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .absences.cache import NotificationCache
from .absences.scheduler import AbsenceScheduler
from .absences.service import AbsenceReconciliationService
from .attendance.document_attendance_repository import DocumentAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, make_clock
from .core import constants
from .core.enums import StoreBackend
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryDocumentStore
from .database.mysql_store import MySQLDocumentStore
from .database.store import DocumentStore
from .schedules.document_schedule_repository import DocumentScheduleRepository
from .schedules.service import TimetableService
from .sessions.document_session_repository import DocumentSessionRepository
from .sessions.service import SessionService
from .users.document_student_repository import DocumentStudentRepository
from .users.service import RosterService


@dataclass(frozen=True)
class ReconcilerOptions:
    interval_minutes: float = constants.DEFAULT_INTERVAL_MINUTES
    timezone: str = ""
    student_role: str = constants.DEFAULT_STUDENT_ROLE
    student_delay: float = constants.DEFAULT_STUDENT_DELAY_SECONDS
    slot_delay: float = constants.DEFAULT_SLOT_DELAY_SECONDS
    cache_max_entries: int = constants.DEFAULT_CACHE_MAX_ENTRIES

    @classmethod
    def from_settings(cls, settings) -> "ReconcilerOptions":
        return cls(
            interval_minutes=float(getattr(settings, "ABSENCE_INTERVAL_MINUTES", constants.DEFAULT_INTERVAL_MINUTES)),
            timezone=str(getattr(settings, "ABSENCE_TIMEZONE", "") or ""),
            student_role=str(getattr(settings, "STUDENT_ROLE", constants.DEFAULT_STUDENT_ROLE)),
            student_delay=float(getattr(settings, "STUDENT_DELAY_SECONDS", constants.DEFAULT_STUDENT_DELAY_SECONDS)),
            slot_delay=float(getattr(settings, "SLOT_DELAY_SECONDS", constants.DEFAULT_SLOT_DELAY_SECONDS)),
            cache_max_entries=int(
                getattr(settings, "NOTIFICATION_CACHE_MAX_ENTRIES", constants.DEFAULT_CACHE_MAX_ENTRIES)
            ),
        )


@dataclass(frozen=True)
class Container:
    store: DocumentStore
    clock: Clock

    students_repo: DocumentStudentRepository
    schedules_repo: DocumentScheduleRepository
    sessions_repo: DocumentSessionRepository
    attendance_repo: DocumentAttendanceRepository

    roster_service: RosterService
    timetable_service: TimetableService
    session_service: SessionService
    attendance_service: AttendanceService
    absence_service: AbsenceReconciliationService
    scheduler: AbsenceScheduler


def build_store(backend: str, *, db_config: Optional[dict] = None) -> DocumentStore:
    try:
        kind = StoreBackend(backend)
    except ValueError:
        raise ValidationError(f"Unknown store backend: {backend!r}")

    if kind is StoreBackend.MEMORY:
        return InMemoryDocumentStore()
    if not db_config:
        raise ValidationError("The mysql store backend needs DB_CONFIG")
    return MySQLDocumentStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))


def build_container(
    *,
    store: DocumentStore,
    options: Optional[ReconcilerOptions] = None,
    clock: Optional[Clock] = None,
    cache: Optional[NotificationCache] = None,
) -> Container:
    options = options or ReconcilerOptions()
    clock = clock or make_clock(options.timezone)

    students_repo = DocumentStudentRepository(store)
    schedules_repo = DocumentScheduleRepository(store)
    sessions_repo = DocumentSessionRepository(store)
    attendance_repo = DocumentAttendanceRepository(store)

    roster_service = RosterService(students_repo, student_role=options.student_role)
    timetable_service = TimetableService(schedules_repo)
    session_service = SessionService(sessions_repo)
    attendance_service = AttendanceService(attendance_repo, students_repo, sessions_repo, clock=clock)
    absence_service = AbsenceReconciliationService(
        roster=roster_service,
        timetable=timetable_service,
        sessions=session_service,
        session_repo=sessions_repo,
        students=students_repo,
        attendance=attendance_repo,
        cache=cache or NotificationCache(max_entries=options.cache_max_entries),
        clock=clock,
        student_delay=options.student_delay,
        slot_delay=options.slot_delay,
    )
    scheduler = AbsenceScheduler(absence_service, interval_minutes=options.interval_minutes)

    return Container(
        store=store,
        clock=clock,
        students_repo=students_repo,
        schedules_repo=schedules_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        roster_service=roster_service,
        timetable_service=timetable_service,
        session_service=session_service,
        attendance_service=attendance_service,
        absence_service=absence_service,
        scheduler=scheduler,
    )
