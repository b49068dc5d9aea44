"""Fixed-interval polling loop.

All cycles run on the thread that called run(). refresh() and stop() only
assign flags, which the loop notices within one tick while it sleeps. They take
no locks, so a signal handler can call them even while it interrupts the loop.
"""

from __future__ import annotations

import logging
import time

from reviewping_core.orchestrator import CycleOrchestrator, CycleResult, Trigger

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.5


class PollingScheduler:
    def __init__(
        self,
        orchestrator: CycleOrchestrator,
        interval_minutes: float = 3,
        on_result=None,
        max_cycles: int | None = None,
        tick_seconds: float = TICK_SECONDS,
    ):
        self._orchestrator = orchestrator
        self._interval = interval_minutes * 60
        self._on_result = on_result
        self._max_cycles = max_cycles
        self._tick = tick_seconds
        self._refresh_requested = False
        self._stopped = False
        self.cycles_run = 0

    def refresh(self) -> None:
        """Request an immediate cycle. Coalesces with any refresh already pending."""
        self._refresh_requested = True

    def stop(self) -> None:
        self._stopped = True

    def _fire(self, trigger: Trigger) -> CycleResult | None:
        result = self._orchestrator.run_cycle(trigger)
        self.cycles_run += 1
        if result is not None and self._on_result is not None:
            self._on_result(result)
        return result

    def _done(self) -> bool:
        return self._stopped or (self._max_cycles is not None and self.cycles_run >= self._max_cycles)

    def _sleep(self) -> None:
        """Sleep until the interval elapses, a refresh is requested, or stop() is called."""
        deadline = time.monotonic() + self._interval
        while not (self._stopped or self._refresh_requested):
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            time.sleep(min(self._tick, remaining))

    def run(self) -> None:
        logger.info("Polling every %.1f minute(s).", self._interval / 60)
        self._fire(Trigger.INSTALL)
        while not self._done():
            self._sleep()
            if self._stopped:
                break
            if self._refresh_requested:
                self._refresh_requested = False
                self._fire(Trigger.MANUAL_REFRESH)
            else:
                self._fire(Trigger.SCHEDULE)
        logger.info("Polling stopped after %d cycle(s).", self.cycles_run)
