"""
Fixed-rate tick scheduler.

Runs a tick callback on a dedicated daemon thread every ``period``
seconds. Ticks never overlap: a fire that arrives while a tick is still
running is dropped, not queued, and a tick that overruns its period
skips the slots it missed instead of catching up.

State machine: IDLE -> TICKING -> IDLE, strictly alternating.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class SchedulerState(str, Enum):
    IDLE = "IDLE"
    TICKING = "TICKING"


class TickScheduler:
    """
    Drives a tick callback on a fixed wall-clock period.

    Attributes:
        period: Seconds between scheduled fires
        completed_ticks: Ticks that ran to completion (including ones whose
            callback raised)
        dropped_fires: Fires skipped because a tick was in progress
    """

    def __init__(self, tick: Callable[[], object], period: float = 5.0, name: str = "twin-scheduler"):
        if period <= 0:
            raise ValueError("period must be positive")
        self._tick = tick
        self.period = period
        self.name = name

        self._tick_lock = threading.Lock()
        self._counter_lock = threading.Lock()
        self._state = SchedulerState.IDLE
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

        self.completed_ticks = 0
        self.dropped_fires = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def fire(self) -> bool:
        """
        Run one tick now unless one is already in progress.

        Returns:
            True if the tick ran, False if the fire was dropped
        """
        if not self._tick_lock.acquire(blocking=False):
            with self._counter_lock:
                self.dropped_fires += 1
            logger.debug("Tick still in progress, dropping fire")
            return False

        try:
            self._state = SchedulerState.TICKING
            try:
                self._tick()
            except Exception as e:
                # Log but don't crash the scheduler thread
                logger.error(f"Error in simulation step: {e}", exc_info=True)
            with self._counter_lock:
                self.completed_ticks += 1
        finally:
            self._state = SchedulerState.IDLE
            self._tick_lock.release()
        return True

    def start(self) -> None:
        """
        Start the scheduler thread. The first tick fires immediately.

        Raises:
            RuntimeError: If the scheduler is already running
        """
        if self.is_running:
            raise RuntimeError("Scheduler is already running")

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, name=self.name, daemon=True)
        self._thread.start()
        logger.info(f"Scheduler started (period {self.period}s)")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the scheduler, letting an in-progress tick finish."""
        if self._thread is None:
            return

        self._stop_event.set()
        self._thread.join(timeout=timeout)
        self._thread = None
        logger.info("Scheduler stopped")

    def _run_loop(self) -> None:
        next_fire = time.monotonic()
        while not self._stop_event.is_set():
            self.fire()

            next_fire += self.period
            now = time.monotonic()
            if now > next_fire:
                missed = int((now - next_fire) // self.period) + 1
                with self._counter_lock:
                    self.dropped_fires += missed
                logger.warning(f"Tick overran its period, skipped {missed} scheduled fire(s)")
                next_fire += missed * self.period

            if self._stop_event.wait(max(0.0, next_fire - time.monotonic())):
                break
