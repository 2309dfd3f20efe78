from datetime import date, datetime, time

import pytest

from src.practicum_attendance.practicum_attendance.attendance.model import ClockEvent, ClockRequest
from src.practicum_attendance.practicum_attendance.core.enums import Remark, SessionKind, SessionState
from src.practicum_attendance.practicum_attendance.core.exceptions import BadRequestError

MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)


def test_missing_record_is_a_no_op(reconciler):
    assert reconciler.nullify_incomplete_sessions("s-1", "pr-1", MONDAY) is None


def test_open_sessions_are_nullified_once(reconciler, store, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(
        record, SessionKind.MORNING, ClockEvent(datetime.combine(MONDAY, time(8, 0)), Remark.NORMAL)
    )

    first = reconciler.nullify_incomplete_sessions("s-1", "pr-1", MONDAY)
    second = reconciler.nullify_incomplete_sessions("s-1", "pr-1", MONDAY)

    assert first.morning.state == SessionState.NULLIFIED
    assert first.morning.time_in is None
    assert first.hours == 0.0
    assert second == first


def test_complete_sessions_are_untouched(reconciler, store, agency):
    record = store.find_or_create("s-1", "pr-1", MONDAY, agency=agency)
    record = store.apply_clock_in(
        record, SessionKind.MORNING, ClockEvent(datetime.combine(MONDAY, time(8, 0)), Remark.NORMAL)
    )
    record = store.apply_clock_out(
        record, SessionKind.MORNING, ClockEvent(datetime.combine(MONDAY, time(12, 0)), Remark.NORMAL)
    )

    assert reconciler.nullify_incomplete_sessions("s-1", "pr-1", MONDAY) == record


def test_clock_in_nullifies_yesterdays_open_session(processor, store):
    request = ClockRequest(student_id="s-1", practicum_id="pr-1")
    processor.clock_in(request, now=datetime.combine(MONDAY, time(9, 0)))

    processor.clock_in(request, now=datetime.combine(TUESDAY, time(8, 30)))

    monday = store.find("s-1", "pr-1", MONDAY)
    assert monday.morning.state == SessionState.NULLIFIED
    assert monday.hours == 0.0
    with pytest.raises(BadRequestError):
        store.apply_clock_out(
            monday, SessionKind.MORNING, ClockEvent(datetime.combine(MONDAY, time(12, 0)), Remark.NORMAL)
        )


def test_stale_session_cannot_be_completed_by_late_clock_out(processor, store):
    request = ClockRequest(student_id="s-1", practicum_id="pr-1")
    processor.clock_in(request, now=datetime.combine(MONDAY, time(9, 0)))
    processor.clock_in(request, now=datetime.combine(TUESDAY, time(8, 30)))

    with pytest.raises(BadRequestError):
        processor.clock_out(request, now=datetime.combine(MONDAY, time(17, 0)))
    assert store.find("s-1", "pr-1", MONDAY).hours == 0.0
