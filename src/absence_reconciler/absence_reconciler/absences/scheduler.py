from __future__ import annotations

import asyncio
from typing import Optional

from ..common.logging import get_logger
from ..core.constants import DEFAULT_INTERVAL_MINUTES
from .model import PassReport
from .service import AbsenceReconciliationService

log = get_logger(__name__)


class AbsenceScheduler:
    """Runs reconciliation passes on a fixed interval.

    ``start`` fires a pass immediately and then every interval; passes are
    launched independently of each other, so a slow pass can overlap the
    next one. ``stop`` only disarms the timer: passes already running are
    left to finish (see ``wait_idle``).
    """

    def __init__(self, service: AbsenceReconciliationService, *, interval_minutes: float = DEFAULT_INTERVAL_MINUTES):
        self._service = service
        self._interval_minutes = float(interval_minutes)
        self._timer: Optional[asyncio.Task] = None
        self._in_flight: set[asyncio.Task] = set()
        self.last_report: Optional[PassReport] = None

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def start(self, interval_minutes: Optional[float] = None) -> asyncio.Task:
        """Arm the timer (must be called from a running event loop).

        Only one timer exists per scheduler; starting again returns it.
        """

        if self.running:
            log.warning("absence_scheduler_already_running")
            return self._timer

        if interval_minutes is not None:
            self._interval_minutes = float(interval_minutes)
        if self._interval_minutes <= 0:
            raise ValueError("interval_minutes must be positive")

        self._timer = asyncio.get_running_loop().create_task(self._tick(self._interval_minutes * 60))
        log.info("absence_scheduler_started", interval_minutes=self._interval_minutes)
        return self._timer

    def stop(self, handle: Optional[asyncio.Task] = None) -> None:
        timer = handle or self._timer
        if timer is None:
            return
        timer.cancel()
        if timer is self._timer:
            self._timer = None
            log.info("absence_scheduler_stopped", in_flight=self.in_flight)

    async def wait_idle(self) -> None:
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def run_once(self) -> PassReport:
        """A single on-demand pass; errors reach the caller."""

        report = await self._service.run_pass()
        self.last_report = report
        return report

    async def _tick(self, interval_seconds: float) -> None:
        while True:
            self._launch_pass()
            await asyncio.sleep(interval_seconds)

    def _launch_pass(self) -> None:
        task = asyncio.get_running_loop().create_task(self._guarded_pass())
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _guarded_pass(self) -> None:
        # A failed cycle is logged; the timer stays armed for the next one.
        try:
            await self.run_once()
        except Exception:
            log.exception("absence_pass_failed")
