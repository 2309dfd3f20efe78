from datetime import datetime, time

from src.practicum_attendance.practicum_attendance.agencies.calendar import TimeWindow
from src.practicum_attendance.practicum_attendance.attendance.factory import RemarkStrategyFactory
from src.practicum_attendance.practicum_attendance.attendance.strategies.afternoon_strategy import (
    AfternoonRemarkStrategy,
)
from src.practicum_attendance.practicum_attendance.attendance.strategies.base import RemarkPolicy
from src.practicum_attendance.practicum_attendance.attendance.strategies.morning_strategy import MorningRemarkStrategy
from src.practicum_attendance.practicum_attendance.attendance.strategies.overtime_strategy import (
    OvertimeRemarkStrategy,
)
from src.practicum_attendance.practicum_attendance.core.enums import Remark, SessionKind

OFFICE = TimeWindow(opening=time(8, 0), closing=time(17, 0), lunch_start=time(12, 0), lunch_end=time(13, 0))


def at(h: int, m: int = 0, s: int = 0) -> datetime:
    return datetime(2026, 3, 2, h, m, s)


def test_factory_picks_strategy_per_session():
    factory = RemarkStrategyFactory()
    assert isinstance(factory.for_session(SessionKind.MORNING), MorningRemarkStrategy)
    assert isinstance(factory.for_session(SessionKind.AFTERNOON), AfternoonRemarkStrategy)
    assert isinstance(factory.for_session(SessionKind.OVERTIME), OvertimeRemarkStrategy)


def test_morning_time_in_late_after_grace():
    strategy = MorningRemarkStrategy()
    policy = RemarkPolicy(grace_minutes=5)

    assert strategy.remark_time_in(at=at(8, 5), window=OFFICE, policy=policy) == Remark.NORMAL
    assert strategy.remark_time_in(at=at(8, 5, 1), window=OFFICE, policy=policy) == Remark.LATE


def test_early_arrival_only_when_enabled():
    strategy = MorningRemarkStrategy()

    assert strategy.remark_time_in(at=at(7, 30), window=OFFICE, policy=RemarkPolicy()) == Remark.NORMAL
    policy = RemarkPolicy(early_arrival_minutes=15)
    assert strategy.remark_time_in(at=at(7, 45), window=OFFICE, policy=policy) == Remark.EARLY
    assert strategy.remark_time_in(at=at(7, 50), window=OFFICE, policy=policy) == Remark.NORMAL


def test_morning_time_out_against_lunch_start():
    strategy = MorningRemarkStrategy()
    assert strategy.remark_time_out(at=at(11, 59), window=OFFICE) == Remark.EARLY_DEPARTURE
    assert strategy.remark_time_out(at=at(12, 0), window=OFFICE) == Remark.NORMAL
    assert strategy.remark_time_out(at=at(12, 5), window=OFFICE) == Remark.NORMAL


def test_afternoon_time_out_against_closing():
    strategy = AfternoonRemarkStrategy()
    assert strategy.remark_time_out(at=at(16, 59), window=OFFICE) == Remark.EARLY_DEPARTURE
    assert strategy.remark_time_out(at=at(17, 0), window=OFFICE) == Remark.NORMAL
    assert strategy.remark_time_out(at=at(17, 1), window=OFFICE) == Remark.OVERTIME


def test_afternoon_time_in_against_lunch_end():
    strategy = AfternoonRemarkStrategy()
    assert strategy.remark_time_in(at=at(13, 0), window=OFFICE, policy=RemarkPolicy()) == Remark.NORMAL
    assert strategy.remark_time_in(at=at(13, 10), window=OFFICE, policy=RemarkPolicy()) == Remark.LATE


def test_missing_reference_times_remark_normal():
    empty = TimeWindow()
    assert MorningRemarkStrategy().remark_time_in(at=at(11, 0), window=empty, policy=RemarkPolicy()) == Remark.NORMAL
    assert AfternoonRemarkStrategy().remark_time_out(at=at(14, 0), window=empty) == Remark.NORMAL


def test_overtime_is_overtime_both_ways():
    strategy = OvertimeRemarkStrategy()
    assert strategy.remark_time_in(at=at(17, 30), window=OFFICE, policy=RemarkPolicy()) == Remark.OVERTIME
    assert strategy.remark_time_out(at=at(19, 0), window=OFFICE) == Remark.OVERTIME
