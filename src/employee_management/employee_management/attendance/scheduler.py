from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_AUTO_SIGN_OUT_INTERVAL_SECONDS
from .service import AttendanceService

logger = logging.getLogger(__name__)


class AutoSignOutSweeper:
    """Background thread that periodically runs ``AttendanceService.auto_sign_out``.

    Every tick recomputes what to close from the ledger, so sessions opened or closed
    between ticks need no timer bookkeeping.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        *,
        interval_seconds: float = DEFAULT_AUTO_SIGN_OUT_INTERVAL_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._attendance = attendance
        self._interval = float(interval_seconds)
        self._clock = clock
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> int:
        return len(self._attendance.auto_sign_out(self._clock()))

    def _run(self) -> None:
        logger.info("Auto sign-out sweeper started (every %ss)", self._interval)
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception:
                # Keep the loop alive; the next tick retries the same work.
                logger.exception("Auto sign-out sweep failed")
            self._stop.wait(self._interval)
        logger.info("Auto sign-out sweeper stopped")

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="auto-sign-out", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
