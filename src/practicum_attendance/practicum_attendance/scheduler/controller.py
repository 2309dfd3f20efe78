from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import ok, roles_required
from ..common.validators import optional_text
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/absences/backfill", methods=["POST"], endpoint="absence_backfill")
    @roles_required([Role.ADMIN])
    def backfill():
        data = request.get_json(silent=True) or {}
        raw = optional_text(data.get("date") if isinstance(data, dict) else None)
        target = parse_iso_date(raw) if raw else None

        result = container.absence_scheduler.create_absent_records_for_date(target)
        return ok(result.to_dict(), f"Absence backfill completed for {result.date.isoformat()}")
