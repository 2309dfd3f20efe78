from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ..core.exceptions import AuthorizationError

NOT_ELIGIBLE_MESSAGE = (
    "You must submit at least one requirement before you can clock in/out. "
    "Please contact your instructor for assistance."
)


class EligibilityGate(Protocol):
    def ensure_can_clock(self, student_id: str) -> None:
        """Raise AuthorizationError when the student may not clock in/out."""

        raise NotImplementedError


class StaticEligibilityGate:
    """Gate backed by a fixed allow-list; None allows every student."""

    def __init__(self, allowed: Optional[Iterable[str]] = None):
        self._allowed = None if allowed is None else {str(s) for s in allowed}

    def ensure_can_clock(self, student_id: str) -> None:
        if self._allowed is not None and str(student_id) not in self._allowed:
            raise AuthorizationError(NOT_ELIGIBLE_MESSAGE)
