"""Absence backfill.

For a given day, every active placement on an operating day of its agency ends
up with an attendance record: students who never clocked in get an absent one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Optional

from ..agencies.calendar import OperatingCalendar
from ..attendance.store import AttendanceSessionStore
from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..core.exceptions import DuplicateRecordError
from ..practicums.model import Practicum
from ..practicums.repository import PracticumRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackfillResult:
    date: date
    created: int
    skipped: int
    total: int

    @property
    def failed(self) -> int:
        return self.total - self.created - self.skipped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "created": self.created,
            "skipped": self.skipped,
            "total": self.total,
        }


class AbsenceScheduler:
    def __init__(
        self,
        store: AttendanceSessionStore,
        practicums: PracticumRepository,
        *,
        locks: Optional[KeyedLock] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._store = store
        self._practicums = practicums
        self._locks = locks or KeyedLock()
        self._clock = clock

    def default_target_date(self) -> date:
        return self._clock().date() - timedelta(days=1)

    def create_absent_records_for_date(self, target_date: Optional[date] = None) -> BackfillResult:
        check_date = target_date or self.default_target_date()
        logger.info("Checking for absent records on %s, %s", check_date.strftime("%A"), check_date.isoformat())

        try:
            placements = list(self._practicums.list_active_on(check_date))
        except Exception:
            logger.exception("Could not load active placements for %s", check_date)
            raise

        created = 0
        skipped = 0
        for practicum in placements:
            try:
                if self._backfill_one(practicum, check_date):
                    created += 1
                else:
                    skipped += 1
            except Exception:
                logger.exception(
                    "Error creating absent record for practicum %s on %s", practicum.practicum_id, check_date
                )

        result = BackfillResult(date=check_date, created=created, skipped=skipped, total=len(placements))
        logger.info(
            "Absence backfill for %s completed: %d created, %d skipped, %d failed of %d",
            check_date,
            result.created,
            result.skipped,
            result.failed,
            result.total,
        )
        return result

    def _backfill_one(self, practicum: Practicum, check_date: date) -> bool:
        """True when an absent record was created, False when skipped."""
        calendar = OperatingCalendar.from_agency(practicum.agency)
        if not calendar.is_operating_day(check_date):
            logger.debug(
                "Skipping practicum %s (%s): %s is not an operating day",
                practicum.practicum_id,
                practicum.agency.name if practicum.agency else "Unknown",
                check_date.strftime("%A"),
            )
            return False

        with self._locks.hold((str(practicum.student_id), str(practicum.practicum_id), check_date)):
            if self._store.exists(practicum.student_id, practicum.practicum_id, check_date):
                logger.debug("Skipping practicum %s: record exists for %s", practicum.practicum_id, check_date)
                return False
            try:
                self._store.record_absence(
                    practicum.student_id, practicum.practicum_id, check_date, agency=practicum.agency
                )
            except DuplicateRecordError:
                # Written by another process between the check and the insert.
                logger.debug("Skipping practicum %s: record appeared for %s", practicum.practicum_id, check_date)
                return False

        logger.debug("Created absent record for practicum %s on %s", practicum.practicum_id, check_date)
        return True
