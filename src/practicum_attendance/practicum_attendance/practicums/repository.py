from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Practicum


class PracticumRepository(Protocol):
    def get_by_id(self, practicum_id: str) -> Optional[Practicum]:
        """Placement with its agency profile attached (agency may be None)."""

        raise NotImplementedError

    def list_active_on(self, day: date) -> Sequence[Practicum]:
        """Placements with status=active whose [start_date, end_date] contains `day`."""

        raise NotImplementedError
