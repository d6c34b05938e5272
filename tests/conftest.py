"""Shared test fixtures — simulated time, manual scheduler, recording sink."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable

import pytest

from svcmonitor.exporter import InMemoryExporter
from svcmonitor.registry import MonitorRegistry
from svcmonitor.status import Status


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        """Simulate a check that takes ``seconds`` to run."""
        self.now += seconds


class ManualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Runs scheduled callbacks only when simulated time is advanced."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.delays: list[float] = []
        self._queue: list[tuple[float, int, ManualHandle, Callable[[], None]]] = []
        self._seq = itertools.count()

    def schedule(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        self.delays.append(delay)
        handle = ManualHandle()
        heapq.heappush(self._queue, (self.clock.now + delay, next(self._seq), handle, callback))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h, _ in self._queue if not h.cancelled)

    def advance_to(self, target: float) -> None:
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.clock.now = max(self.clock.now, due)
            callback()
        self.clock.now = max(self.clock.now, target)

    def advance(self, seconds: float) -> None:
        self.advance_to(self.clock.now + seconds)

    def run_pending(self) -> None:
        self.advance(0)


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Status]] = []

    def send(self, service_name: str, status: Status) -> None:
        self.calls.append((service_name, status))

    def statuses(self, service_name: str) -> list[Status]:
        return [s for name, s in self.calls if name == service_name]


class FailingSink:
    def __init__(self) -> None:
        self.attempts = 0

    def send(self, service_name: str, status: Status) -> None:
        self.attempts += 1
        raise ConnectionError("relay unreachable")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def exporter() -> InMemoryExporter:
    return InMemoryExporter()


@pytest.fixture
def registry(
    clock: FakeClock,
    scheduler: ManualScheduler,
    sink: RecordingSink,
    exporter: InMemoryExporter,
) -> MonitorRegistry:
    """Registry with a 1-second period running on simulated time."""
    return MonitorRegistry(
        check_period=1.0,
        sink=sink,
        exporter=exporter,
        scheduler_factory=lambda name: scheduler,
        clock=clock,
    )
