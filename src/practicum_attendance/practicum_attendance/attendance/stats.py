from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable

from ..core.constants import HOURS_DECIMALS
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord

# Legacy "late" rows count as attended.
_ATTENDED = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EXCUSED})


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    excused_days: int
    attendance_percentage: int
    current_streak: int
    longest_streak: int
    total_hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "lateDays": self.late_days,
            "excusedDays": self.excused_days,
            "attendancePercentage": self.attendance_percentage,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "totalHours": self.total_hours,
        }


def summarize_attendance(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    """Day counts, attendance percentage and attended-day streaks.

    Streaks follow date order; the current streak ends at the latest record.
    """
    ordered = sorted(records, key=lambda r: r.work_date)
    counts = {status: 0 for status in AttendanceStatus}
    for r in ordered:
        counts[r.status] += 1

    total = len(ordered)
    attended = sum(counts[s] for s in _ATTENDED)
    percentage = int(round(attended / total * 100)) if total else 0

    longest = run = 0
    for r in ordered:
        if r.status in _ATTENDED:
            run += 1
            longest = max(longest, run)
        else:
            run = 0

    current = 0
    for r in reversed(ordered):
        if r.status not in _ATTENDED:
            break
        current += 1

    return AttendanceSummary(
        total_days=total,
        present_days=counts[AttendanceStatus.PRESENT],
        absent_days=counts[AttendanceStatus.ABSENT],
        late_days=counts[AttendanceStatus.LATE],
        excused_days=counts[AttendanceStatus.EXCUSED],
        attendance_percentage=percentage,
        current_streak=current,
        longest_streak=longest,
        total_hours=round(sum(r.hours for r in ordered), HOURS_DECIMALS),
    )
