from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Optional

from .attendance.classifier import SessionClassifier
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.reconciler import SessionReconciler
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceQueryService, ClockEventProcessor
from .attendance.store import AttendanceSessionStore
from .attendance.strategies.base import RemarkPolicy
from .audit.sink import AuditSink, LoggingAuditSink
from .common.datetime_utils import now_local
from .common.locks import KeyedLock
from .core.constants import DEFAULT_LATE_GRACE_MINUTES
from .database.connection import DBConfig, DatabaseConnection
from .eligibility.gate import EligibilityGate, StaticEligibilityGate
from .eligibility.mysql_requirement_gate import MySQLRequirementGate
from .practicums.memory_practicum_repository import InMemoryPracticumRepository
from .practicums.mysql_practicum_repository import MySQLPracticumRepository
from .practicums.repository import PracticumRepository
from .scheduler.absence import AbsenceScheduler


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    locks: KeyedLock
    clock: Callable

    attendance_repo: AttendanceRepository
    practicums_repo: PracticumRepository
    eligibility: EligibilityGate
    audit: AuditSink

    store: AttendanceSessionStore
    classifier: SessionClassifier
    reconciler: SessionReconciler
    clock_processor: ClockEventProcessor
    attendance_queries: AttendanceQueryService
    absence_scheduler: AbsenceScheduler


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def build_container(settings: Any, *, clock: Optional[Callable] = None) -> Container:
    """Wire repositories and services from a settings module."""
    backend = str(getattr(settings, "STORAGE_BACKEND", "mysql")).lower()
    tz_name = getattr(settings, "TIMEZONE", "") or None
    clock = clock or partial(now_local, tz_name)

    conn: Optional[DatabaseConnection] = None
    if backend == "memory":
        attendance_repo: AttendanceRepository = InMemoryAttendanceRepository()
        practicums_repo: PracticumRepository = InMemoryPracticumRepository()
        eligibility: EligibilityGate = StaticEligibilityGate()
    elif backend == "mysql":
        conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        attendance_repo = MySQLAttendanceRepository(conn)
        practicums_repo = MySQLPracticumRepository(conn)
        eligibility = MySQLRequirementGate(conn)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r}")

    locks = KeyedLock()
    audit = LoggingAuditSink()
    policy = RemarkPolicy(
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        early_arrival_minutes=_optional_int(getattr(settings, "EARLY_ARRIVAL_MINUTES", None)),
    )
    classifier = SessionClassifier(policy=policy)

    store = AttendanceSessionStore(attendance_repo)
    reconciler = SessionReconciler(store, locks=locks)
    clock_processor = ClockEventProcessor(
        store,
        practicums_repo,
        reconciler,
        classifier=classifier,
        eligibility=eligibility,
        audit=audit,
        locks=locks,
        clock=clock,
    )
    attendance_queries = AttendanceQueryService(attendance_repo)
    absence_scheduler = AbsenceScheduler(store, practicums_repo, locks=locks, clock=clock)

    return Container(
        conn=conn,
        locks=locks,
        clock=clock,
        attendance_repo=attendance_repo,
        practicums_repo=practicums_repo,
        eligibility=eligibility,
        audit=audit,
        store=store,
        classifier=classifier,
        reconciler=reconciler,
        clock_processor=clock_processor,
        attendance_queries=attendance_queries,
        absence_scheduler=absence_scheduler,
    )
