from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ...agencies.calendar import TimeWindow
from ...core.constants import DEFAULT_LATE_GRACE_MINUTES
from ...core.enums import Remark


@dataclass(frozen=True)
class RemarkPolicy:
    """Tunable thresholds for time-in remarks."""

    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    # None disables the Early remark for time-ins.
    early_arrival_minutes: Optional[int] = None


class RemarkStrategy(ABC):
    """Strategy Pattern: how a session's time-in/time-out is remarked."""

    @abstractmethod
    def remark_time_in(self, *, at: datetime, window: TimeWindow, policy: RemarkPolicy) -> Remark:
        raise NotImplementedError

    @abstractmethod
    def remark_time_out(self, *, at: datetime, window: TimeWindow) -> Remark:
        raise NotImplementedError


def _at(at: datetime, ref: time) -> datetime:
    return datetime.combine(at.date(), ref)


def arrival_remark(at: datetime, ref: Optional[time], policy: RemarkPolicy) -> Remark:
    """Late strictly after ref + grace; Early only when enabled and far enough ahead."""
    if ref is None:
        return Remark.NORMAL
    expected = _at(at, ref)
    if at > expected + timedelta(minutes=policy.grace_minutes):
        return Remark.LATE
    if policy.early_arrival_minutes is not None and at <= expected - timedelta(minutes=policy.early_arrival_minutes):
        return Remark.EARLY
    return Remark.NORMAL


def departure_remark(at: datetime, ref: Optional[time], *, overtime_after: bool = False) -> Remark:
    if ref is None:
        return Remark.NORMAL
    expected = _at(at, ref)
    if at < expected:
        return Remark.EARLY_DEPARTURE
    if overtime_after and at > expected:
        return Remark.OVERTIME
    return Remark.NORMAL
