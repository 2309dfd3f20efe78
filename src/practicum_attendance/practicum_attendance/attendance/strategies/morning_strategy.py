from __future__ import annotations

from datetime import datetime

from ...agencies.calendar import TimeWindow
from ...core.enums import Remark
from .base import RemarkPolicy, RemarkStrategy, arrival_remark, departure_remark


class MorningRemarkStrategy(RemarkStrategy):
    """Arrival against opening time, departure against lunch start."""

    def remark_time_in(self, *, at: datetime, window: TimeWindow, policy: RemarkPolicy) -> Remark:
        return arrival_remark(at, window.opening, policy)

    def remark_time_out(self, *, at: datetime, window: TimeWindow) -> Remark:
        return departure_remark(at, window.lunch_start)
