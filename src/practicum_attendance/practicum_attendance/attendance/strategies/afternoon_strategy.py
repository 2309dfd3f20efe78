from __future__ import annotations

from datetime import datetime

from ...agencies.calendar import TimeWindow
from ...core.enums import Remark
from .base import RemarkPolicy, RemarkStrategy, arrival_remark, departure_remark


class AfternoonRemarkStrategy(RemarkStrategy):
    """Arrival against lunch end, departure against closing time."""

    def remark_time_in(self, *, at: datetime, window: TimeWindow, policy: RemarkPolicy) -> Remark:
        return arrival_remark(at, window.lunch_end, policy)

    def remark_time_out(self, *, at: datetime, window: TimeWindow) -> Remark:
        return departure_remark(at, window.closing, overtime_after=True)
