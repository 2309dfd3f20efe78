from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.practicum_attendance.practicum_attendance.agencies.model import Agency
from src.practicum_attendance.practicum_attendance.attendance.memory_attendance_repository import (
    InMemoryAttendanceRepository,
)
from src.practicum_attendance.practicum_attendance.attendance.reconciler import SessionReconciler
from src.practicum_attendance.practicum_attendance.attendance.service import ClockEventProcessor
from src.practicum_attendance.practicum_attendance.attendance.store import AttendanceSessionStore
from src.practicum_attendance.practicum_attendance.audit.sink import MemoryAuditSink
from src.practicum_attendance.practicum_attendance.common.locks import KeyedLock
from src.practicum_attendance.practicum_attendance.core.enums import PracticumStatus
from src.practicum_attendance.practicum_attendance.eligibility.gate import StaticEligibilityGate
from src.practicum_attendance.practicum_attendance.practicums.memory_practicum_repository import (
    InMemoryPracticumRepository,
)
from src.practicum_attendance.practicum_attendance.practicums.model import Practicum

# 2026-03-02 is a Monday.
MONDAY = date(2026, 3, 2)
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")


@pytest.fixture
def fixed_now() -> datetime:
    return datetime.combine(MONDAY, time(9, 0))


@pytest.fixture
def agency() -> Agency:
    return Agency(
        agency_id="ag-1",
        name="City Hall IT Office",
        address="Main St.",
        branch_type="main",
        opening_time=time(8, 0),
        closing_time=time(17, 0),
        lunch_start_time=time(12, 0),
        lunch_end_time=time(13, 0),
        operating_days=WEEKDAYS,
    )


@pytest.fixture
def practicum(agency) -> Practicum:
    return Practicum(
        practicum_id="pr-1",
        student_id="s-1",
        agency_id=agency.agency_id,
        status=PracticumStatus.ACTIVE,
        start_date=date(2026, 1, 5),
        end_date=date(2026, 6, 30),
        agency=agency,
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository()


@pytest.fixture
def practicums_repo(practicum) -> InMemoryPracticumRepository:
    return InMemoryPracticumRepository([practicum])


@pytest.fixture
def store(attendance_repo) -> AttendanceSessionStore:
    return AttendanceSessionStore(attendance_repo)


@pytest.fixture
def locks() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def audit() -> MemoryAuditSink:
    return MemoryAuditSink()


@pytest.fixture
def reconciler(store, locks) -> SessionReconciler:
    return SessionReconciler(store, locks=locks)


@pytest.fixture
def processor(store, practicums_repo, reconciler, audit, locks, fixed_now) -> ClockEventProcessor:
    return ClockEventProcessor(
        store,
        practicums_repo,
        reconciler,
        eligibility=StaticEligibilityGate(),
        audit=audit,
        locks=locks,
        clock=lambda: fixed_now,
    )
