# fleet-dispatch-sim/fleetsim/clock.py
"""
Fixed-interval ticker that drives the simulation.

A single daemon thread calls the tick callback, so ticks run strictly one
after another and never overlap. ``stop()`` may be called any number of
times; once it returns, no further tick starts.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from . import config

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Periodic ticker owned by the simulation.

    Attributes:
        interval_seconds: Wall-clock time between the starts of two
            consecutive ticks (fixed rate; an overrunning tick delays the next)
        ticks_fired: Number of callbacks completed since construction
    """

    def __init__(self, callback: Callable[[], None], interval_seconds: float = None) -> None:
        if interval_seconds is None:
            interval_seconds = config.TICK_INTERVAL_SECONDS
        if interval_seconds <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval_seconds}")

        self.interval_seconds: float = interval_seconds
        self.ticks_fired: int = 0
        self._callback = callback
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        """Begin ticking. No-op if the clock is already running."""
        with self._lock:
            if self.is_running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="simulation-clock",
                daemon=True,
            )
            self._thread.start()
        logger.info("Simulation clock started (interval %.2fs)", self.interval_seconds)

    def stop(self) -> None:
        """Halt ticking and wait for an in-progress tick to finish. Safe to repeat."""
        with self._lock:
            thread = self._thread
            self._stop_event.set()
            self._thread = None

        if thread is None:
            return
        # A tick may stop its own clock; joining would deadlock
        if thread is not threading.current_thread():
            thread.join()
        logger.info("Simulation clock stopped after %d ticks", self.ticks_fired)

    def _run(self, stop_event: threading.Event) -> None:
        next_tick = time.monotonic() + self.interval_seconds
        while not stop_event.wait(max(0.0, next_tick - time.monotonic())):
            try:
                self._callback()
            except Exception:
                logger.exception("Tick failed; stopping the simulation clock")
                stop_event.set()
                break
            self.ticks_fired += 1
            # An overrunning tick shifts the schedule; missed ticks are not replayed
            next_tick = max(next_tick + self.interval_seconds, time.monotonic())
