"""Monitor registry — single entry point for registering service checks.

Owns the name -> ServiceRunner mapping. Names are unique for the lifetime of
the registry; registering the same name twice is a programming error.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from svcmonitor.exporter import MetadataExporter, NullExporter
from svcmonitor.runner import Check, ServiceRunner
from svcmonitor.sinks import ReportSink
from svcmonitor.timers import TickScheduler

logger = logging.getLogger(__name__)

EXPORT_NAMESPACE = __package__ or "svcmonitor"


class DuplicateRegistrationError(ValueError):
    """Raised when a service name is registered twice."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        super().__init__(f"Service check [{service_name}] has already been registered")


def export_name(service_name: str) -> str:
    return f"{EXPORT_NAMESPACE}:name={service_name}"


class MonitorRegistry:
    """Registers checks and runs each one on the registry's check period."""

    def __init__(
        self,
        check_period: float,
        sink: ReportSink,
        exporter: MetadataExporter | None = None,
        scheduler_factory: Callable[[str], TickScheduler] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if check_period < 0:
            raise ValueError(f"check_period must be >= 0, got {check_period}")
        self.check_period = float(check_period)
        self.sink = sink
        self.exporter: MetadataExporter = exporter or NullExporter()
        self._scheduler_factory = scheduler_factory
        self._clock = clock
        self._services: dict[str, ServiceRunner] = {}
        self._lock = threading.Lock()
        self._closed = False

    def register(self, service_name: str, check: Check) -> ServiceRunner:
        """Start monitoring ``check`` under ``service_name``.

        Raises DuplicateRegistrationError if the name is taken; in that case
        no runner is created and the existing one is left alone.
        """
        if not isinstance(service_name, str) or not service_name:
            raise ValueError("service_name must be a non-empty string")

        with self._lock:
            if self._closed:
                raise RuntimeError("MonitorRegistry is closed")
            if service_name in self._services:
                raise DuplicateRegistrationError(service_name)
            scheduler = self._scheduler_factory(service_name) if self._scheduler_factory else None
            runner = ServiceRunner(
                service_name,
                self.check_period,
                check,
                self.sink,
                scheduler=scheduler,
                clock=self._clock,
            )
            self._services[service_name] = runner
            self.exporter.export(export_name(service_name), runner)

        logger.info("Added service [%s] with check rate of [%ss]", service_name, self.check_period)
        runner.start()
        return runner

    def get(self, service_name: str) -> ServiceRunner | None:
        with self._lock:
            return self._services.get(service_name)

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._services)

    def __contains__(self, service_name: object) -> bool:
        with self._lock:
            return service_name in self._services

    def __len__(self) -> int:
        with self._lock:
            return len(self._services)

    def close(self) -> None:
        """Stop every runner. Names stay reserved; no new registrations."""
        with self._lock:
            self._closed = True
            runners = list(self._services.values())
        for runner in runners:
            runner.stop()
            self.exporter.unexport(export_name(runner.service_name))
        logger.info("Monitor registry closed (%d services stopped)", len(runners))
