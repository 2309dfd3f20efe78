from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Sequence

from ..agencies.calendar import OperatingCalendar
from ..agencies.model import Agency
from ..audit.sink import AuditEvent, AuditSink, LoggingAuditSink, record_quietly
from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..eligibility.gate import EligibilityGate, StaticEligibilityGate
from ..practicums.repository import PracticumRepository
from .classifier import SessionClassifier, stale_open_sessions
from .model import AttendanceRecord, ClockEvent, ClockRequest, ClockResult
from .reconciler import SessionReconciler
from .repository import AttendanceRepository
from .stats import AttendanceSummary, summarize_attendance
from .store import AttendanceSessionStore

logger = logging.getLogger(__name__)


class ClockEventProcessor:
    """Clock-in / clock-out orchestration.

    The server clock decides the day, the session and the remark; the request's
    date, session hint and remarks are advisory only.
    """

    def __init__(
        self,
        store: AttendanceSessionStore,
        practicums: PracticumRepository,
        reconciler: SessionReconciler,
        *,
        classifier: Optional[SessionClassifier] = None,
        eligibility: Optional[EligibilityGate] = None,
        audit: Optional[AuditSink] = None,
        locks: Optional[KeyedLock] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._practicums = practicums
        self._reconciler = reconciler
        self._classifier = classifier or SessionClassifier()
        self._eligibility = eligibility or StaticEligibilityGate()
        self._audit = audit or LoggingAuditSink()
        self._locks = locks or KeyedLock()
        self._clock = clock

    def _load_agency(self, request: ClockRequest) -> Optional[Agency]:
        try:
            practicum = self._practicums.get_by_id(request.practicum_id)
        except Exception:
            logger.warning(
                "Agency lookup failed for practicum %s; continuing without agency rules",
                request.practicum_id,
                exc_info=True,
            )
            return None

        if practicum is None:
            logger.warning("Practicum %s not found; continuing without agency rules", request.practicum_id)
            return None
        if str(practicum.student_id) != str(request.student_id):
            raise AuthorizationError("This practicum does not belong to you")
        return practicum.agency

    def clock_in(self, request: ClockRequest, *, now: Optional[datetime] = None) -> ClockResult:
        now = now or self._clock()
        today = now.date()

        self._eligibility.ensure_can_clock(request.student_id)
        agency = self._load_agency(request)
        calendar = OperatingCalendar.from_agency(agency)

        if calendar.has_configured_days and not calendar.is_operating_day(today):
            raise ValidationError(
                f"Today ({today.strftime('%A')}) is not an operating day. "
                f"Operating days: {calendar.describe_days()}"
            )

        # Runs before today's key is held; the two keys never nest.
        self._reconciler.nullify_incomplete_sessions(
            request.student_id, request.practicum_id, today - timedelta(days=1)
        )

        with self._locks.hold((request.student_id, request.practicum_id, today)):
            record = self._store.find_or_create(request.student_id, request.practicum_id, today, agency=agency)
            decision = self._classifier.classify(calendar, now, record, clock_in=True)
            abandoned = stale_open_sessions(record, decision.session)
            saved = self._store.apply_clock_in(
                record,
                decision.session,
                ClockEvent(at=now, remark=decision.remark, meta=request.meta),
                note=request.client_remarks,
                abandon=abandoned,
            )
            if abandoned:
                logger.info(
                    "Nullified open %s session(s) for student %s practicum %s on %s at %s clock-in",
                    ", ".join(kind.value for kind in abandoned),
                    request.student_id,
                    request.practicum_id,
                    today,
                    decision.session.value,
                )

        self._audit_success("attendance.clock_in", request, saved, now, decision.session.value, decision.remark.value)
        return ClockResult(record=saved, session=decision.session, remark=decision.remark)

    def clock_out(self, request: ClockRequest, *, now: Optional[datetime] = None) -> ClockResult:
        now = now or self._clock()
        today = now.date()

        self._eligibility.ensure_can_clock(request.student_id)
        agency = self._load_agency(request)
        calendar = OperatingCalendar.from_agency(agency)

        with self._locks.hold((request.student_id, request.practicum_id, today)):
            record = self._store.find(request.student_id, request.practicum_id, today)
            if record is None:
                raise NotFoundError("No attendance record found for today to clock out")

            decision = self._classifier.classify(calendar, now, record, clock_in=False)
            saved = self._store.apply_clock_out(
                record,
                decision.session,
                ClockEvent(at=now, remark=decision.remark, meta=request.meta),
                note=request.client_remarks,
            )

        self._audit_success("attendance.clock_out", request, saved, now, decision.session.value, decision.remark.value)
        return ClockResult(record=saved, session=decision.session, remark=decision.remark)

    def get_today_record(
        self, student_id: str, practicum_id: str, *, today: Optional[date] = None
    ) -> Optional[AttendanceRecord]:
        today = today or self._clock().date()
        return self._store.find(student_id, practicum_id, today)

    def _audit_success(
        self,
        action: str,
        request: ClockRequest,
        record: AttendanceRecord,
        at: datetime,
        session: str,
        remark: str,
    ) -> None:
        record_quietly(
            self._audit,
            AuditEvent(
                action=action,
                actor_id=request.student_id,
                target=f"attendance_record:{record.record_id}",
                at=at,
                details={"practicumId": request.practicum_id, "session": session, "remark": remark},
            ),
        )


class AttendanceQueryService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def history(
        self,
        student_id: str,
        *,
        practicum_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_student(
            student_id, practicum_id=practicum_id, start_date=start_date, end_date=end_date
        )

    def stats(self, student_id: str, *, practicum_id: Optional[str] = None) -> AttendanceSummary:
        records = self.history(student_id, practicum_id=practicum_id)
        return summarize_attendance(records)
