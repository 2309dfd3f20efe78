from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional, Tuple


@dataclass(frozen=True)
class Agency:
    """Operating profile of a host agency (read-only here)."""

    agency_id: str
    name: str
    address: Optional[str] = None
    branch_type: Optional[str] = None
    opening_time: Optional[time] = None
    closing_time: Optional[time] = None
    lunch_start_time: Optional[time] = None
    lunch_end_time: Optional[time] = None
    # Raw day entries as configured, e.g. ("Monday", "Tuesday") or ("mon", "tue").
    operating_days: Tuple[str, ...] = field(default_factory=tuple)
