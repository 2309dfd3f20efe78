from dataclasses import replace
from datetime import date, datetime, time

import pytest

from src.practicum_attendance.practicum_attendance.attendance.model import ClockEvent
from src.practicum_attendance.practicum_attendance.core.enums import (
    ApprovalStatus,
    AttendanceStatus,
    Remark,
    SessionKind,
    SessionState,
)
from src.practicum_attendance.practicum_attendance.core.exceptions import (
    BadRequestError,
    ConflictError,
    DuplicateRecordError,
)

MONDAY = date(2026, 3, 2)


def at(h: int, m: int = 0) -> datetime:
    return datetime.combine(MONDAY, time(h, m))


def test_find_or_create_returns_unsaved_draft(store, attendance_repo, agency):
    draft = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)

    assert draft.record_id is None
    assert draft.day == "Monday"
    assert draft.snapshot.agency_name == "City Hall IT Office"
    assert draft.snapshot.operating_days == "Monday,Tuesday,Wednesday,Thursday,Friday"
    assert attendance_repo.all() == []


def test_first_clock_in_persists_record(store, attendance_repo, agency):
    draft = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    saved = store.apply_clock_in(draft, SessionKind.MORNING, ClockEvent(at(8, 0), Remark.NORMAL), note="on site")

    assert saved.record_id is not None
    assert saved.version == 1
    assert saved.morning.state == SessionState.OPEN
    assert saved.time_in == at(8, 0)
    assert saved.session_type == SessionKind.MORNING
    assert saved.status == AttendanceStatus.PRESENT
    assert saved.approval_status == ApprovalStatus.APPROVED
    assert saved.remarks == "on site"
    assert store.find("s-1", "pr-1", MONDAY) == saved


def test_clock_out_recomputes_hours_and_lunch(store, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(9, 0), Remark.LATE))
    record = store.apply_clock_out(record, SessionKind.MORNING, ClockEvent(at(12, 0), Remark.NORMAL))
    assert record.hours == pytest.approx(3.0)

    record = store.apply_clock_in(record, SessionKind.AFTERNOON, ClockEvent(at(13, 0), Remark.NORMAL))
    record = store.apply_clock_out(record, SessionKind.AFTERNOON, ClockEvent(at(17, 0), Remark.NORMAL))

    assert record.hours == pytest.approx(7.0)
    assert record.lunch_hours == pytest.approx(1.0)
    assert record.time_out == at(17, 0)
    assert record.version == 4


def test_clock_out_keeps_excused_status(store, attendance_repo, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 0), Remark.NORMAL))
    record = attendance_repo.update(replace(record, status=AttendanceStatus.EXCUSED))

    record = store.apply_clock_out(record, SessionKind.MORNING, ClockEvent(at(12, 0), Remark.NORMAL))
    assert record.status == AttendanceStatus.EXCUSED


def test_clock_out_rewrites_legacy_late_to_present(store, attendance_repo, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 30), Remark.LATE))
    record = attendance_repo.update(replace(record, status=AttendanceStatus.LATE))

    record = store.apply_clock_out(record, SessionKind.MORNING, ClockEvent(at(12, 0), Remark.NORMAL))
    assert record.status == AttendanceStatus.PRESENT


def test_double_clock_in_leaves_record_unchanged(store, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 0), Remark.NORMAL))

    with pytest.raises(ConflictError):
        store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 20), Remark.LATE))

    assert store.find("s-1", "pr-1", MONDAY).morning.time_in == at(8, 0)


def test_stale_copy_loses_to_concurrent_writer(store, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 0), Remark.NORMAL))

    store.apply_clock_out(record, SessionKind.MORNING, ClockEvent(at(12, 0), Remark.NORMAL))
    with pytest.raises(ConflictError):
        store.apply_clock_out(record, SessionKind.MORNING, ClockEvent(at(12, 1), Remark.NORMAL))


def test_nullify_sessions_recomputes_hours(store, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 0), Remark.NORMAL))
    record = store.apply_clock_out(record, SessionKind.MORNING, ClockEvent(at(12, 0), Remark.NORMAL))
    record = store.apply_clock_in(record, SessionKind.AFTERNOON, ClockEvent(at(13, 0), Remark.NORMAL))

    record = store.nullify_session(record, SessionKind.AFTERNOON)

    assert record.afternoon.state == SessionState.NULLIFIED
    assert record.hours == pytest.approx(4.0)
    assert record.lunch_hours is None


def test_record_absence_refuses_existing_key(store, agency):
    absent = store.record_absence("s-1", "pr-1", MONDAY, agency=agency)

    assert absent.status == AttendanceStatus.ABSENT
    assert absent.approval_status == ApprovalStatus.PENDING
    assert absent.hours == 0.0
    assert absent.day == "Monday"
    with pytest.raises(DuplicateRecordError):
        store.record_absence("s-1", "pr-1", MONDAY)


def test_orphan_clock_out_creates_nothing(store, attendance_repo):
    draft = store.find_or_create("s-1", "pr-1", MONDAY)
    with pytest.raises(BadRequestError):
        store.apply_clock_out(draft, SessionKind.MORNING, ClockEvent(at(12, 0), Remark.NORMAL))
    assert attendance_repo.all() == []


def test_abandoned_session_is_nullified_in_same_write(store, attendance_repo, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(record, SessionKind.MORNING, ClockEvent(at(8, 0), Remark.NORMAL))

    record = store.apply_clock_in(
        record,
        SessionKind.AFTERNOON,
        ClockEvent(at(13, 10), Remark.LATE),
        abandon=[SessionKind.MORNING],
    )

    assert record.morning.state == SessionState.NULLIFIED
    assert record.morning.time_in is None
    assert record.afternoon.is_open
    assert record.hours == 0.0
    assert record.version == 2
    assert attendance_repo.all() == [record]


def test_overtime_needs_both_regular_sessions(store, attendance_repo, agency):
    draft = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)

    with pytest.raises(ConflictError, match="complete both morning and afternoon"):
        store.apply_clock_in(draft, SessionKind.OVERTIME, ClockEvent(at(17, 30), Remark.OVERTIME))
    assert attendance_repo.all() == []
