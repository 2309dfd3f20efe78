from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Tuple

from ..agencies.model import Agency
from ..common.datetime_utils import hours_between, parse_iso_date
from ..common.validators import optional_float, optional_text, require_non_empty
from ..core.constants import HOURS_DECIMALS
from ..core.enums import (
    SESSION_ORDER,
    ApprovalStatus,
    AttendanceStatus,
    Remark,
    SessionKind,
    SessionState,
)
from ..core.exceptions import BadRequestError, ConflictError


@dataclass(frozen=True)
class ClockMeta:
    """Device and location details captured with one time-in or time-out."""

    location_type: Optional[str] = None
    device_type: Optional[str] = None
    device_unit: Optional[str] = None
    mac_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    photo_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "locationType": self.location_type,
            "deviceType": self.device_type,
            "deviceUnit": self.device_unit,
            "macAddress": self.mac_address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "photoUrl": self.photo_url,
        }


@dataclass(frozen=True)
class SessionSlot:
    """One session (morning/afternoon/overtime) of a daily record.

    The state is explicit; transitions return new slots and refuse anything
    outside EMPTY -> OPEN -> COMPLETE and OPEN -> NULLIFIED.
    """

    kind: SessionKind
    state: SessionState = SessionState.EMPTY
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    in_remark: Optional[Remark] = None
    out_remark: Optional[Remark] = None
    in_meta: Optional[ClockMeta] = None
    out_meta: Optional[ClockMeta] = None

    def __post_init__(self) -> None:
        has_in = self.time_in is not None
        has_out = self.time_out is not None
        expected = {
            SessionState.EMPTY: (False, False),
            SessionState.OPEN: (True, False),
            SessionState.COMPLETE: (True, True),
            SessionState.NULLIFIED: (False, False),
        }[self.state]
        if (has_in, has_out) != expected:
            raise ValueError(f"{self.kind.value} session in state {self.state.value} has inconsistent times")
        if has_in and has_out and self.time_out < self.time_in:
            raise ValueError(f"{self.kind.value} session ends before it starts")

    @classmethod
    def empty(cls, kind: SessionKind) -> "SessionSlot":
        return cls(kind=kind)

    @property
    def is_open(self) -> bool:
        return self.state == SessionState.OPEN

    @property
    def is_complete(self) -> bool:
        return self.state == SessionState.COMPLETE

    def opened(self, at: datetime, remark: Remark, meta: Optional[ClockMeta] = None) -> "SessionSlot":
        if self.state == SessionState.OPEN:
            raise ConflictError(
                f"You are already clocked in for the {self.kind.value} session. Please clock out first."
            )
        if self.state != SessionState.EMPTY:
            raise ConflictError(f"The {self.kind.value} session is already {self.state.value.lower()} for today.")
        return replace(self, state=SessionState.OPEN, time_in=at, in_remark=remark, in_meta=meta)

    def closed(self, at: datetime, remark: Remark, meta: Optional[ClockMeta] = None) -> "SessionSlot":
        if self.state == SessionState.COMPLETE:
            raise BadRequestError(f"You have already clocked out for the {self.kind.value} session")
        if self.state != SessionState.OPEN:
            raise BadRequestError(f"You must clock in for the {self.kind.value} session before clocking out")
        if at < self.time_in:
            raise BadRequestError(f"Clock-out time is before the {self.kind.value} clock-in")
        return replace(self, state=SessionState.COMPLETE, time_out=at, out_remark=remark, out_meta=meta)

    def nullified(self) -> "SessionSlot":
        if self.state != SessionState.OPEN:
            raise BadRequestError(f"Only an open {self.kind.value} session can be nullified")
        return SessionSlot(kind=self.kind, state=SessionState.NULLIFIED)

    def credited_hours(self, credit_from: Optional[time] = None) -> float:
        """Worked hours for a complete session; time before `credit_from` is not counted."""
        if not self.is_complete:
            return 0.0
        start = self.time_in
        if credit_from is not None:
            start = max(start, datetime.combine(start.date(), credit_from))
        return hours_between(start, self.time_out)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "timeIn": self.time_in.isoformat() if self.time_in else None,
            "timeOut": self.time_out.isoformat() if self.time_out else None,
            "timeInRemarks": self.in_remark.value if self.in_remark else None,
            "timeOutRemarks": self.out_remark.value if self.out_remark else None,
            "timeInMeta": self.in_meta.to_dict() if self.in_meta else None,
            "timeOutMeta": self.out_meta.to_dict() if self.out_meta else None,
        }


@dataclass(frozen=True)
class AgencySnapshot:
    """Agency details copied onto a record when it is first created."""

    agency_name: Optional[str] = None
    agency_location: Optional[str] = None
    branch_type: Optional[str] = None
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None
    lunch_start_time: Optional[time] = None
    lunch_end_time: Optional[time] = None
    operating_days: Optional[str] = None

    @classmethod
    def from_agency(cls, agency: Optional[Agency]) -> "AgencySnapshot":
        if agency is None:
            return cls()
        return cls(
            agency_name=agency.name,
            agency_location=agency.address,
            branch_type=agency.branch_type,
            opening_time=agency.opening_time,
            closing_time=agency.closing_time,
            lunch_start_time=agency.lunch_start_time,
            lunch_end_time=agency.lunch_end_time,
            operating_days=",".join(agency.operating_days) or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        def _t(value: Optional[time]) -> Optional[str]:
            return value.strftime("%H:%M:%S") if value else None

        return {
            "agencyName": self.agency_name,
            "agencyLocation": self.agency_location,
            "branchType": self.branch_type,
            "openingTime": _t(self.opening_time),
            "closingTime": _t(self.closing_time),
            "lunchStartTime": _t(self.lunch_start_time),
            "lunchEndTime": _t(self.lunch_end_time),
            "operatingDays": self.operating_days,
        }


@dataclass(frozen=True)
class AttendanceRecord:
    """One row per (student, practicum, calendar date)."""

    record_id: Optional[int]
    student_id: str
    practicum_id: str
    work_date: date
    day: str
    morning: SessionSlot = field(default_factory=lambda: SessionSlot.empty(SessionKind.MORNING))
    afternoon: SessionSlot = field(default_factory=lambda: SessionSlot.empty(SessionKind.AFTERNOON))
    overtime: SessionSlot = field(default_factory=lambda: SessionSlot.empty(SessionKind.OVERTIME))
    # Latest time-in/time-out of any session, kept for older readers.
    time_in: Optional[datetime] = None
    time_out: Optional[datetime] = None
    session_type: Optional[SessionKind] = None
    hours: float = 0.0
    lunch_hours: Optional[float] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    remarks: Optional[str] = None
    snapshot: AgencySnapshot = field(default_factory=AgencySnapshot)
    version: int = 0

    @property
    def key(self) -> Tuple[str, str, date]:
        return (self.student_id, self.practicum_id, self.work_date)

    @property
    def sessions(self) -> Tuple[SessionSlot, SessionSlot, SessionSlot]:
        return (self.morning, self.afternoon, self.overtime)

    def session(self, kind: SessionKind) -> SessionSlot:
        return {
            SessionKind.MORNING: self.morning,
            SessionKind.AFTERNOON: self.afternoon,
            SessionKind.OVERTIME: self.overtime,
        }[kind]

    def with_session(self, slot: SessionSlot) -> "AttendanceRecord":
        return replace(self, **{slot.kind.value: slot})

    def open_session(self) -> Optional[SessionSlot]:
        for kind in reversed(SESSION_ORDER):
            slot = self.session(kind)
            if slot.is_open:
                return slot
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.record_id,
            "studentId": self.student_id,
            "practicumId": self.practicum_id,
            "date": self.work_date.isoformat(),
            "day": self.day,
            "morning": self.morning.to_dict(),
            "afternoon": self.afternoon.to_dict(),
            "overtime": self.overtime.to_dict(),
            "timeIn": self.time_in.isoformat() if self.time_in else None,
            "timeOut": self.time_out.isoformat() if self.time_out else None,
            "sessionType": self.session_type.value if self.session_type else None,
            "hours": self.hours,
            "lunchHours": self.lunch_hours,
            "status": self.status.value,
            "approvalStatus": self.approval_status.value,
            "remarks": self.remarks,
            **self.snapshot.to_dict(),
        }


def compute_hours(record: AttendanceRecord) -> float:
    """Sum of completed session durations.

    Regular sessions are credited from the agency's opening time at the
    earliest; overtime is credited in full.
    """
    credit_from = record.snapshot.opening_time
    closing = record.snapshot.closing_time
    if credit_from is not None and closing is not None and closing < credit_from:
        credit_from = None

    total = record.morning.credited_hours(credit_from) + record.afternoon.credited_hours(credit_from)
    total += record.overtime.credited_hours()
    return round(total, HOURS_DECIMALS)


def compute_lunch_hours(record: AttendanceRecord) -> Optional[float]:
    """Gap between morning time-out and afternoon time-in, if both exist."""
    if record.morning.time_out is None or record.afternoon.time_in is None:
        return None
    return round(hours_between(record.morning.time_out, record.afternoon.time_in), HOURS_DECIMALS)


@dataclass(frozen=True)
class ClockRequest:
    """Clock-in/out input.

    `requested_date`, `session_hint` and `client_remarks` are advisory: they are
    never used to choose the day, the session or the remark.
    """

    student_id: str
    practicum_id: str
    requested_date: Optional[date] = None
    session_hint: Optional[str] = None
    client_remarks: Optional[str] = None
    meta: ClockMeta = field(default_factory=ClockMeta)

    @classmethod
    def from_payload(cls, student_id: Any, payload: Dict[str, Any]) -> "ClockRequest":
        student = require_non_empty(student_id, "Authenticated student")
        practicum_id = require_non_empty(payload.get("practicumId"), "practicumId")

        raw_date = optional_text(payload.get("date"))
        return cls(
            student_id=student,
            practicum_id=practicum_id,
            requested_date=parse_iso_date(raw_date) if raw_date else None,
            session_hint=optional_text(payload.get("sessionType")),
            client_remarks=optional_text(payload.get("remarks")),
            meta=ClockMeta(
                location_type=optional_text(payload.get("locationType")),
                device_type=optional_text(payload.get("deviceType")),
                device_unit=optional_text(payload.get("deviceUnit")),
                mac_address=optional_text(payload.get("macAddress")),
                latitude=optional_float(payload.get("latitude"), "latitude"),
                longitude=optional_float(payload.get("longitude"), "longitude"),
                address=optional_text(payload.get("address")),
                photo_url=optional_text(payload.get("photoUrl")),
            ),
        )


@dataclass(frozen=True)
class ClockResult:
    record: AttendanceRecord
    session: SessionKind
    remark: Remark

    def to_dict(self) -> Dict[str, Any]:
        data = self.record.to_dict()
        data["sessionType"] = self.session.value
        data["remark"] = self.remark.value
        return data


@dataclass(frozen=True)
class ClockEvent:
    """Server-resolved clock event applied to one session."""

    at: datetime
    remark: Remark
    meta: Optional[ClockMeta] = None
