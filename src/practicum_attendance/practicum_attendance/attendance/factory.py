from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import SessionKind
from .strategies.afternoon_strategy import AfternoonRemarkStrategy
from .strategies.base import RemarkStrategy
from .strategies.morning_strategy import MorningRemarkStrategy
from .strategies.overtime_strategy import OvertimeRemarkStrategy


@dataclass
class RemarkStrategyFactory:
    """Factory Pattern: choose the remark strategy for a session."""

    def for_session(self, session: SessionKind) -> RemarkStrategy:
        if session == SessionKind.MORNING:
            return MorningRemarkStrategy()
        if session == SessionKind.AFTERNOON:
            return AfternoonRemarkStrategy()
        return OvertimeRemarkStrategy()
