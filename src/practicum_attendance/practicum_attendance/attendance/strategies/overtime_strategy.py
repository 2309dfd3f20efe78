from __future__ import annotations

from datetime import datetime

from ...agencies.calendar import TimeWindow
from ...core.enums import Remark
from .base import RemarkPolicy, RemarkStrategy


class OvertimeRemarkStrategy(RemarkStrategy):
    def remark_time_in(self, *, at: datetime, window: TimeWindow, policy: RemarkPolicy) -> Remark:
        return Remark.OVERTIME

    def remark_time_out(self, *, at: datetime, window: TimeWindow) -> Remark:
        return Remark.OVERTIME
