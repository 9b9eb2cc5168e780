"""Periodic ticker driving the match clock."""

import logging
import threading
from typing import Callable, Optional

from ..utils.constants import TICK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class ClockTicker:
    """
    Calls ``callback`` once per interval until cancelled.

    Each tick schedules the next one, so at most one timer is pending at any
    time. Ticks missed while the process was busy are not replayed.

    Every ``start`` after a ``cancel`` opens a new generation; a tick only
    reschedules itself while its generation is still the current one, so a
    tick that was already running when the clock was paused and resumed
    dies out instead of running next to the new timer.
    """

    def __init__(self, callback: Callable[[], None], interval: float = TICK_INTERVAL_SECONDS):
        self.callback = callback
        self.interval = interval
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._active = False
        self._generation = 0

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Start ticking; does nothing if already active."""
        with self._lock:
            if self._active:
                return
            self._active = True
            self._kick()

    def cancel(self) -> None:
        """Stop ticking and drop the pending timer."""
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        self._active = False
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _is_current(self, generation: int) -> bool:
        return self._active and generation == self._generation

    def _kick(self) -> None:
        timer = threading.Timer(self.interval, self._tick, args=(self._generation,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _tick(self, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation):
                return
        try:
            self.callback()
        except Exception:
            logger.exception("Match clock tick failed; stopping ticker")
            with self._lock:
                if generation == self._generation:
                    self._cancel_locked()
            return
        with self._lock:
            if self._is_current(generation):
                self._kick()
