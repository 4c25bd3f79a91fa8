from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.gate import AttendanceGate
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .common.datetime_utils import Clock, SystemClock
from .common.locks import KeyedLocks
from .core.constants import LOW_ATTENDANCE_THRESHOLD
from .database.connection import DatabaseConnection, DBConfig
from .directory.memory_directory_repository import InMemoryDirectoryRepository
from .directory.mysql_directory_repository import MySQLDirectoryRepository
from .directory.repository import DirectoryRepository
from .notices.memory_notice_repository import InMemoryDismissalRepository, InMemoryNoticeRepository
from .notices.mysql_notice_repository import MySQLDismissalRepository, MySQLNoticeRepository
from .notices.pipeline import ChangeNotificationPipeline
from .notices.repository import DismissalRepository, NoticeRepository
from .reports.service import AggregationService
from .timetable.evaluator import SessionEvaluator
from .timetable.memory_timetable_repository import InMemoryTimetableRepository
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.repository import TimetableRepository
from .timetable.service import TimetableService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    directory_repo: DirectoryRepository
    timetable_repo: TimetableRepository
    attendance_repo: AttendanceRepository
    notices_repo: NoticeRepository
    dismissals_repo: DismissalRepository

    clock: Clock
    timetable_service: TimetableService
    session_evaluator: SessionEvaluator
    attendance_gate: AttendanceGate
    attendance_ledger: AttendanceLedger
    aggregation_service: AggregationService
    notification_pipeline: ChangeNotificationPipeline


def wire(
    *,
    directory_repo: DirectoryRepository,
    timetable_repo: TimetableRepository,
    attendance_repo: AttendanceRepository,
    notices_repo: NoticeRepository,
    dismissals_repo: DismissalRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Optional[Clock] = None,
    low_threshold: int = LOW_ATTENDANCE_THRESHOLD,
) -> Container:
    clock = clock or SystemClock()
    # Timetable edits and attendance commits of a class serialize on the same lock.
    locks = KeyedLocks()

    timetable_service = TimetableService(timetable_repo, directory_repo, locks=locks)
    session_evaluator = SessionEvaluator(timetable_repo, clock=clock)
    attendance_gate = AttendanceGate(session_evaluator, directory_repo)
    attendance_ledger = AttendanceLedger(attendance_repo, directory_repo, attendance_gate, locks=locks)
    aggregation_service = AggregationService(attendance_ledger, directory_repo, low_threshold=low_threshold)
    notification_pipeline = ChangeNotificationPipeline(
        notices_repo,
        dismissals_repo,
        attendance_ledger,
        aggregation_service,
        clock=clock,
    )
    timetable_service.subscribe(notification_pipeline.on_slot_event)

    return Container(
        conn=conn,
        directory_repo=directory_repo,
        timetable_repo=timetable_repo,
        attendance_repo=attendance_repo,
        notices_repo=notices_repo,
        dismissals_repo=dismissals_repo,
        clock=clock,
        timetable_service=timetable_service,
        session_evaluator=session_evaluator,
        attendance_gate=attendance_gate,
        attendance_ledger=attendance_ledger,
        aggregation_service=aggregation_service,
        notification_pipeline=notification_pipeline,
    )


def build_container(*, db_config: dict, low_threshold: int = LOW_ATTENDANCE_THRESHOLD) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        conn=conn,
        directory_repo=MySQLDirectoryRepository(conn),
        timetable_repo=MySQLTimetableRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notices_repo=MySQLNoticeRepository(conn),
        dismissals_repo=MySQLDismissalRepository(conn),
        low_threshold=low_threshold,
    )


def build_memory_container(
    *,
    directory: Optional[InMemoryDirectoryRepository] = None,
    clock: Optional[Clock] = None,
    low_threshold: int = LOW_ATTENDANCE_THRESHOLD,
) -> Container:
    return wire(
        directory_repo=directory or InMemoryDirectoryRepository(),
        timetable_repo=InMemoryTimetableRepository(),
        attendance_repo=InMemoryAttendanceRepository(),
        notices_repo=InMemoryNoticeRepository(),
        dismissals_repo=InMemoryDismissalRepository(),
        clock=clock,
        low_threshold=low_threshold,
    )
