"""Example: drive the attendance services directly (no Flask).

Runs a full day against the in-memory backend: morning and afternoon sessions,
then the absence backfill for a day nobody clocked in.
"""

from datetime import date, datetime, time

import config.testing as settings

from src.practicum_attendance.practicum_attendance.agencies.model import Agency
from src.practicum_attendance.practicum_attendance.attendance.model import ClockRequest
from src.practicum_attendance.practicum_attendance.container import build_container
from src.practicum_attendance.practicum_attendance.core.enums import PracticumStatus
from src.practicum_attendance.practicum_attendance.practicums.model import Practicum


def main():
    container = build_container(settings)
    agency = Agency(
        agency_id="ag-1",
        name="City Hall IT Office",
        opening_time=time(8, 0),
        closing_time=time(17, 0),
        lunch_start_time=time(12, 0),
        lunch_end_time=time(13, 0),
        operating_days=("Monday", "Tuesday", "Wednesday", "Thursday", "Friday"),
    )
    container.practicums_repo.add(
        Practicum("pr-1", "s-1", "ag-1", PracticumStatus.ACTIVE, date(2026, 1, 5), date(2026, 12, 18), agency)
    )

    req = ClockRequest(student_id="s-1", practicum_id="pr-1")
    day = date(2026, 3, 2)
    processor = container.clock_processor
    processor.clock_in(req, now=datetime.combine(day, time(7, 55)))
    processor.clock_out(req, now=datetime.combine(day, time(12, 5)))
    processor.clock_in(req, now=datetime.combine(day, time(13, 10)))
    result = processor.clock_out(req, now=datetime.combine(day, time(17, 0)))
    print(result.to_dict())

    print(container.absence_scheduler.create_absent_records_for_date(date(2026, 3, 3)).to_dict())


if __name__ == "__main__":
    main()
