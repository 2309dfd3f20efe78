from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional, Sequence

from .model import Practicum
from .repository import PracticumRepository


class InMemoryPracticumRepository(PracticumRepository):
    def __init__(self, practicums: Iterable[Practicum] = ()):
        self._by_id: Dict[str, Practicum] = {p.practicum_id: p for p in practicums}

    def add(self, practicum: Practicum) -> None:
        self._by_id[practicum.practicum_id] = practicum

    def get_by_id(self, practicum_id: str) -> Optional[Practicum]:
        return self._by_id.get(str(practicum_id))

    def list_active_on(self, day: date) -> Sequence[Practicum]:
        return sorted(
            (p for p in self._by_id.values() if p.is_active_on(day)),
            key=lambda p: p.practicum_id,
        )
