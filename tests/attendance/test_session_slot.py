from datetime import datetime

import pytest

from src.practicum_attendance.practicum_attendance.attendance.model import ClockMeta, SessionSlot
from src.practicum_attendance.practicum_attendance.core.enums import Remark, SessionKind, SessionState
from src.practicum_attendance.practicum_attendance.core.exceptions import BadRequestError, ConflictError


def at(h: int, m: int = 0) -> datetime:
    return datetime(2026, 3, 2, h, m)


def test_empty_open_complete_transitions():
    slot = SessionSlot.empty(SessionKind.MORNING)
    meta = ClockMeta(device_type="mobile", latitude=14.6)

    opened = slot.opened(at(8, 0), Remark.NORMAL, meta)
    assert opened.state == SessionState.OPEN
    assert opened.in_meta == meta
    assert slot.state == SessionState.EMPTY

    closed = opened.closed(at(12, 0), Remark.NORMAL)
    assert closed.is_complete
    assert closed.credited_hours() == pytest.approx(4.0)


def test_double_open_is_a_conflict():
    opened = SessionSlot.empty(SessionKind.MORNING).opened(at(8, 0), Remark.NORMAL)
    with pytest.raises(ConflictError, match="already clocked in"):
        opened.opened(at(8, 30), Remark.NORMAL)


def test_reopening_a_used_session_is_a_conflict():
    done = SessionSlot.empty(SessionKind.AFTERNOON).opened(at(13, 0), Remark.NORMAL).closed(at(17, 0), Remark.NORMAL)
    with pytest.raises(ConflictError):
        done.opened(at(17, 5), Remark.NORMAL)


def test_close_without_open_is_rejected():
    with pytest.raises(BadRequestError, match="must clock in"):
        SessionSlot.empty(SessionKind.MORNING).closed(at(12, 0), Remark.NORMAL)


def test_close_twice_is_rejected():
    done = SessionSlot.empty(SessionKind.MORNING).opened(at(8, 0), Remark.NORMAL).closed(at(12, 0), Remark.NORMAL)
    with pytest.raises(BadRequestError, match="already clocked out"):
        done.closed(at(12, 5), Remark.NORMAL)


def test_close_before_open_time_is_rejected():
    opened = SessionSlot.empty(SessionKind.MORNING).opened(at(9, 0), Remark.NORMAL)
    with pytest.raises(BadRequestError):
        opened.closed(at(8, 59), Remark.NORMAL)


def test_nullified_session_is_terminal():
    nullified = SessionSlot.empty(SessionKind.MORNING).opened(at(8, 0), Remark.NORMAL).nullified()

    assert nullified.state == SessionState.NULLIFIED
    assert nullified.time_in is None
    assert nullified.credited_hours() == 0.0
    with pytest.raises(BadRequestError):
        nullified.closed(at(12, 0), Remark.NORMAL)
    with pytest.raises(ConflictError):
        nullified.opened(at(13, 0), Remark.NORMAL)


def test_only_open_sessions_can_be_nullified():
    with pytest.raises(BadRequestError):
        SessionSlot.empty(SessionKind.MORNING).nullified()


def test_inconsistent_state_is_refused():
    with pytest.raises(ValueError):
        SessionSlot(kind=SessionKind.MORNING, state=SessionState.OPEN)
    with pytest.raises(ValueError):
        SessionSlot(kind=SessionKind.MORNING, state=SessionState.EMPTY, time_in=at(8, 0))
    with pytest.raises(ValueError):
        SessionSlot(kind=SessionKind.MORNING, state=SessionState.COMPLETE, time_in=at(9, 0), time_out=at(8, 0))


def test_credit_starts_no_earlier_than_given_time():
    done = SessionSlot.empty(SessionKind.MORNING).opened(at(7, 30), Remark.NORMAL).closed(at(12, 0), Remark.NORMAL)
    assert done.credited_hours() == pytest.approx(4.5)
    assert done.credited_hours(credit_from=at(8, 0).time()) == pytest.approx(4.0)
