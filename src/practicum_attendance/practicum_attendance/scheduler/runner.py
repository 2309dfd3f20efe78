from __future__ import annotations

import logging
import threading
from datetime import datetime, time, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local

logger = logging.getLogger(__name__)


def seconds_until(now: datetime, run_at: time) -> float:
    """Seconds from `now` to the next occurrence of `run_at` (strictly in the future)."""
    target = datetime.combine(now.date(), run_at)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()


class DailyJobRunner:
    """Runs a job once a day at a wall-clock time on a daemon thread."""

    def __init__(
        self,
        job: Callable[[], object],
        *,
        run_at: time,
        clock: Callable[[], datetime] = now_local,
        name: str = "daily-job",
    ):
        self._job = job
        self._run_at = run_at
        self._clock = clock
        self._name = name
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.is_running:
                return
            self._stop.clear()
            self._thread = threading.Thread(target=self._loop, name=self._name, daemon=True)
            self._thread.start()
        logger.info("%s scheduled daily at %s", self._name, self._run_at.strftime("%H:%M"))

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)

    def run_once(self) -> None:
        try:
            self._job()
        except Exception:
            logger.exception("%s run failed", self._name)

    def _loop(self) -> None:
        while not self._stop.is_set():
            delay = seconds_until(self._clock(), self._run_at)
            if self._stop.wait(delay):
                break
            self.run_once()
