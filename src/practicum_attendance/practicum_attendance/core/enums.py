from __future__ import annotations

from enum import Enum


class SessionKind(str, Enum):
    """Sub-period of a day's attendance; each has its own time-in/time-out pair."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    OVERTIME = "overtime"


# Order used when a clock-in has to move past an already-used session.
SESSION_ORDER = (SessionKind.MORNING, SessionKind.AFTERNOON, SessionKind.OVERTIME)


class SessionState(str, Enum):
    """Explicit lifecycle of one session inside a daily record.

    EMPTY -> OPEN (time-in recorded) -> COMPLETE (time-out recorded).
    NULLIFIED is terminal and only reachable through reconciliation.
    """

    EMPTY = "EMPTY"
    OPEN = "OPEN"
    COMPLETE = "COMPLETE"
    NULLIFIED = "NULLIFIED"


class Remark(str, Enum):
    NORMAL = "Normal"
    LATE = "Late"
    EARLY = "Early"
    EARLY_DEPARTURE = "Early Departure"
    OVERTIME = "Overtime"


class AttendanceStatus(str, Enum):
    """Day-level status stored on the attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    # Legacy rows only; never written by this code.
    LATE = "late"
    EXCUSED = "excused"


class ApprovalStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DECLINED = "Declined"


class PracticumStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Role(str, Enum):
    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"
