"""Agency operating calendar.

Agency hours and operating days are parsed once into `OperatingCalendar`
(weekday set + `TimeWindow`); classifiers and the absence job only ever see the
parsed form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import FrozenSet, Iterable, Optional, Union

from ..core.constants import OPERATES_WHEN_NO_DAYS_CONFIGURED
from .model import Agency

logger = logging.getLogger(__name__)

_DAY_ALIASES = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1, "tues": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3, "thur": 3, "thurs": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def parse_operating_days(value: Union[None, str, Iterable[str]]) -> FrozenSet[int]:
    """Parse configured operating days into weekday indices (Monday=0).

    Accepts a comma separated string or an iterable of entries; full names and
    common abbreviations are matched case-insensitively. Unknown entries are
    ignored.
    """
    if value is None:
        return frozenset()
    if isinstance(value, str):
        entries = value.split(",")
    else:
        entries = list(value)

    days = set()
    for entry in entries:
        token = str(entry).strip().lower().rstrip(".")
        if not token:
            continue
        idx = _DAY_ALIASES.get(token)
        if idx is None:
            logger.debug("Ignoring unknown operating day entry %r", entry)
            continue
        days.add(idx)
    return frozenset(days)


@dataclass(frozen=True)
class TimeWindow:
    opening: Optional[time] = None
    closing: Optional[time] = None
    lunch_start: Optional[time] = None
    lunch_end: Optional[time] = None

    @property
    def has_hours(self) -> bool:
        return self.opening is not None and self.closing is not None

    @property
    def spans_midnight(self) -> bool:
        return self.has_hours and self.closing < self.opening

    @property
    def has_lunch(self) -> bool:
        return self.lunch_start is not None


@dataclass(frozen=True)
class OperatingCalendar:
    days: FrozenSet[int]
    window: TimeWindow

    @classmethod
    def from_agency(cls, agency: Optional[Agency]) -> "OperatingCalendar":
        if agency is None:
            return UNCONFIGURED
        return cls(
            days=parse_operating_days(agency.operating_days),
            window=TimeWindow(
                opening=agency.opening_time,
                closing=agency.closing_time,
                lunch_start=agency.lunch_start_time,
                lunch_end=agency.lunch_end_time,
            ),
        )

    @property
    def has_configured_days(self) -> bool:
        return bool(self.days)

    def is_operating_day(self, day: Union[date, datetime]) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        if not self.days:
            return OPERATES_WHEN_NO_DAYS_CONFIGURED
        return day.weekday() in self.days

    def describe_days(self) -> str:
        if not self.days:
            return "Not set"
        return ", ".join(WEEKDAY_NAMES[i] for i in sorted(self.days))


UNCONFIGURED = OperatingCalendar(days=frozenset(), window=TimeWindow())


def is_operating_day(agency: Union[Agency, OperatingCalendar, None], day: Union[date, datetime]) -> bool:
    """Is `day` an operating day for the agency?"""
    calendar = agency if isinstance(agency, OperatingCalendar) else OperatingCalendar.from_agency(agency)
    return calendar.is_operating_day(day)
