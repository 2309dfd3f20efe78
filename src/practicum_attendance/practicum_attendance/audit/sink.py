from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEvent:
    action: str
    actor_id: str
    target: str
    at: datetime
    details: Dict[str, Any] = field(default_factory=dict)


class AuditSink(Protocol):
    def record(self, event: AuditEvent) -> None:
        raise NotImplementedError


class LoggingAuditSink:
    """Writes audit events to a logger, this module's by default."""

    def __init__(self, logger_name: Optional[str] = None):
        self._log = logging.getLogger(logger_name or __name__)

    def record(self, event: AuditEvent) -> None:
        self._log.info(
            "%s by %s on %s at %s %s",
            event.action,
            event.actor_id,
            event.target,
            event.at.isoformat(timespec="seconds"),
            event.details,
        )


class MemoryAuditSink:
    def __init__(self) -> None:
        self.events: List[AuditEvent] = []

    def record(self, event: AuditEvent) -> None:
        self.events.append(event)


def record_quietly(sink: AuditSink, event: AuditEvent) -> None:
    """Fire-and-forget: sink failures are logged, never raised."""
    try:
        sink.record(event)
    except Exception:
        logger.warning("Audit sink failed for %s on %s", event.action, event.target, exc_info=True)
