"""Session classification.

Decides which session a clock event belongs to and how it is remarked, from the
server timestamp, the agency's parsed time window and the day's record so far.
Pure: no I/O, no hidden state, never raises for missing configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import List, Optional

from ..agencies.calendar import OperatingCalendar, TimeWindow
from ..common.datetime_utils import minutes_of_day
from ..core.constants import FALLBACK_MIDDAY
from ..core.enums import SESSION_ORDER, Remark, SessionKind, SessionState
from .factory import RemarkStrategyFactory
from .model import AttendanceRecord
from .strategies.base import RemarkPolicy

_DAY_MINUTES = 24 * 60


@dataclass(frozen=True)
class Classification:
    session: SessionKind
    remark: Remark


def session_for_time(window: TimeWindow, at: time) -> SessionKind:
    """Time-of-day session, ignoring what has already happened today.

    Lunch start divides morning from afternoon (a time inside the lunch break is
    afternoon); without lunch the midpoint of operating hours is used, and
    without hours, noon. At or after closing is overtime.
    """
    t = minutes_of_day(at)

    if window.has_hours and not window.spans_midnight and t >= minutes_of_day(window.closing):
        return SessionKind.OVERTIME

    if window.lunch_start is not None:
        lunch_start = minutes_of_day(window.lunch_start)
        lunch_end = minutes_of_day(window.lunch_end) if window.lunch_end is not None else None
        if lunch_end is not None and lunch_end < lunch_start:
            # Lunch break crosses midnight.
            return SessionKind.MORNING if lunch_end < t < lunch_start else SessionKind.AFTERNOON
        return SessionKind.MORNING if t < lunch_start else SessionKind.AFTERNOON

    if window.has_hours:
        opening = minutes_of_day(window.opening)
        closing = minutes_of_day(window.closing)
        if not window.spans_midnight:
            midpoint = opening + (closing - opening) / 2
            return SessionKind.MORNING if t < midpoint else SessionKind.AFTERNOON

        midpoint = opening + (_DAY_MINUTES - opening + closing) / 2
        if midpoint >= _DAY_MINUTES:
            wrapped = midpoint - _DAY_MINUTES
            return SessionKind.MORNING if t >= opening or t <= wrapped else SessionKind.AFTERNOON
        return SessionKind.MORNING if opening <= t < midpoint else SessionKind.AFTERNOON

    return SessionKind.MORNING if at < FALLBACK_MIDDAY else SessionKind.AFTERNOON


@dataclass
class SessionClassifier:
    policy: RemarkPolicy = field(default_factory=RemarkPolicy)
    strategies: RemarkStrategyFactory = field(default_factory=RemarkStrategyFactory)

    def session_for_clock_in(
        self, calendar: OperatingCalendar, at: datetime, record: Optional[AttendanceRecord]
    ) -> SessionKind:
        """Target session for a clock-in.

        An open session at or after the time-of-day session is returned as-is so
        the store can refuse the double clock-in; so is any open session when the
        time-of-day session is overtime. An open session earlier than the
        time-of-day regular session is left for the caller to nullify (see
        `stale_open_sessions`). Otherwise the time-of-day session is used,
        moving forward past sessions already used today; overtime is reached
        that way only once morning and afternoon are both complete.
        """
        by_time = session_for_time(calendar.window, at.time())
        if record is None:
            return by_time

        open_slot = record.open_session()
        if open_slot is not None:
            if by_time == SessionKind.OVERTIME or SESSION_ORDER.index(open_slot.kind) >= SESSION_ORDER.index(by_time):
                return open_slot.kind

        regular_done = record.morning.is_complete and record.afternoon.is_complete
        for kind in SESSION_ORDER[SESSION_ORDER.index(by_time):]:
            if record.session(kind).state != SessionState.EMPTY:
                continue
            if kind == SessionKind.OVERTIME and by_time != SessionKind.OVERTIME and not regular_done:
                break
            return kind
        return by_time

    def session_for_clock_out(
        self, calendar: OperatingCalendar, at: datetime, record: Optional[AttendanceRecord]
    ) -> SessionKind:
        if record is not None:
            open_slot = record.open_session()
            if open_slot is not None:
                return open_slot.kind
        return session_for_time(calendar.window, at.time())

    def classify(
        self,
        calendar: OperatingCalendar,
        at: datetime,
        record: Optional[AttendanceRecord] = None,
        *,
        clock_in: bool = True,
    ) -> Classification:
        if clock_in:
            session = self.session_for_clock_in(calendar, at, record)
            remark = self.strategies.for_session(session).remark_time_in(
                at=at, window=calendar.window, policy=self.policy
            )
        else:
            session = self.session_for_clock_out(calendar, at, record)
            remark = self.strategies.for_session(session).remark_time_out(at=at, window=calendar.window)
        return Classification(session=session, remark=remark)


def stale_open_sessions(record: AttendanceRecord, target: SessionKind) -> List[SessionKind]:
    """Open sessions earlier than `target`, abandoned by a later clock-in."""
    position = SESSION_ORDER.index(target)
    return [slot.kind for slot in record.sessions if slot.is_open and SESSION_ORDER.index(slot.kind) < position]
