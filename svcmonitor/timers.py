"""Timer backends used by ServiceRunner to schedule its next tick.

A scheduler only has to arm a single delayed callback and hand back something
cancellable. Runners never keep more than one pending callback at a time.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class SchedulerShutdownError(RuntimeError):
    """Raised when a callback is submitted to a scheduler that was shut down."""


class ThreadingScheduler:
    """Arms one daemon ``threading.Timer`` per scheduled callback.

    Each ServiceRunner owns its own instance, so a slow check only delays its
    own service.
    """

    def __init__(self, name: str = "svcmonitor") -> None:
        self.name = name
        self._shutdown = False
        self._lock = threading.Lock()
        self._pending: threading.Timer | None = None

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        with self._lock:
            if self._shutdown:
                raise SchedulerShutdownError(f"Scheduler [{self.name}] is shut down")
            timer = threading.Timer(max(0.0, delay), callback)
            timer.daemon = True
            timer.name = f"{self.name}-tick"
            timer.start()
            self._pending = timer
        return timer

    def shutdown(self) -> None:
        """Refuse new callbacks and cancel the pending one, if any."""
        with self._lock:
            self._shutdown = True
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
        logger.debug("Scheduler [%s] shut down", self.name)
