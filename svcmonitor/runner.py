"""Per-service check loop — run, normalize, report, reschedule.

Each ServiceRunner owns one pending timer. The next tick is only armed once
the current tick has finished, so ticks for a service never overlap, and the
delay is compensated for however long the tick itself took.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from svcmonitor.status import Status, normalize_status
from svcmonitor.timers import ThreadingScheduler, TickScheduler, TimerHandle

if TYPE_CHECKING:
    from svcmonitor.sinks import ReportSink

logger = logging.getLogger(__name__)

Check = Callable[[], Status | None]


def next_delay(check_period: float, elapsed: float) -> float:
    """Delay before the next tick: the rest of the period, never negative."""
    return max(0.0, check_period - elapsed)


class ServiceRunner:
    """Runs one registered service's check every ``check_period`` seconds.

    Lifecycle:
        runner = ServiceRunner("disk-space", 60.0, check, sink)
        runner.start()
        ...
        runner.stop()
    """

    def __init__(
        self,
        service_name: str,
        check_period: float,
        check: Check,
        sink: ReportSink,
        scheduler: TickScheduler | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if check_period < 0:
            raise ValueError(f"check_period must be >= 0, got {check_period}")
        self.service_name = service_name
        self.check_period = float(check_period)
        self.check = check
        self.sink = sink
        self._own_scheduler = ThreadingScheduler(name=f"svcmonitor-{service_name}") if scheduler is None else None
        self._scheduler: TickScheduler = scheduler or self._own_scheduler
        self._clock = clock
        self._lock = threading.Lock()
        self._handle: TimerHandle | None = None
        self._started = False
        self._stopped = False

        # Introspection
        self.tick_count = 0
        self.last_status: Status | None = None
        self.last_checked: str | None = None
        self.failed = False
        self.failure: str | None = None

    # -- public API ------------------------------------------------------------

    def start(self) -> None:
        """Dispatch the first tick with no initial delay."""
        with self._lock:
            if self._started:
                return
            self._started = True
            self._schedule_locked(0.0)

    def stop(self) -> None:
        """Cancel the pending tick. An in-flight tick finishes but is not rescheduled."""
        with self._lock:
            self._stopped = True
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            if self._own_scheduler is not None:
                self._own_scheduler.shutdown()
        logger.info("Service [%s] stopped", self.service_name)

    @property
    def running(self) -> bool:
        return self._started and not self._stopped and not self.failed

    def run_once(self) -> Status:
        """Run the check, report the result and return the reported Status."""
        status = self._run_check()
        self.tick_count += 1
        self.last_status = status
        self.last_checked = datetime.now(timezone.utc).isoformat()
        self._report(status)
        return status

    def describe(self) -> dict[str, Any]:
        return {
            "service_name": self.service_name,
            "check_period": self.check_period,
            "running": self.running,
            "failed": self.failed,
            "failure": self.failure,
            "tick_count": self.tick_count,
            "last_status": self.last_status.to_dict() if self.last_status else None,
            "last_checked": self.last_checked,
        }

    # -- core loop -------------------------------------------------------------

    def _tick(self) -> None:
        started = self._clock()
        try:
            self.run_once()
        except Exception:
            logger.warning(
                "Service [%s] had completely unexpected exception somewhere",
                self.service_name, exc_info=True,
            )
        finally:
            self._schedule(next_delay(self.check_period, self._clock() - started))

    def _run_check(self) -> Status:
        try:
            result = self.check()
        except Exception as e:
            logger.warning("Service [%s] threw exception", self.service_name, exc_info=True)
            return normalize_status(None, e)

        if result is None:
            logger.warning("Service [%s] returned None", self.service_name)
        else:
            logger.debug("Service [%s] returned status [%s]", self.service_name, result)
        return normalize_status(result)

    def _report(self, status: Status) -> None:
        try:
            self.sink.send(self.service_name, status)
        except Exception:
            logger.warning(
                "Service [%s] failed sending status [%s]",
                self.service_name, status, exc_info=True,
            )

    def _schedule(self, delay: float) -> None:
        with self._lock:
            self._schedule_locked(delay)

    def _schedule_locked(self, delay: float) -> None:
        if self._stopped:
            return
        try:
            self._handle = self._scheduler.schedule(delay, self._tick)
        except Exception as e:
            self.failed = True
            self.failure = f"{type(e).__name__}: {e}"
            self._handle = None
            logger.error(
                "Service [%s] failed to reschedule; monitoring halted",
                self.service_name, exc_info=True,
            )

    def __repr__(self) -> str:
        return f"ServiceRunner({self.service_name!r}, check_period={self.check_period})"
