"""Report sinks — where each service's Status ends up.

A sink receives ``(service_name, status)`` once per tick. Sinks may raise;
the ServiceRunner logs and swallows anything a sink throws.

- ``LogSink``: development mode, logs what would have been reported
- ``WebhookSink``: POSTs the passive-check result to an HTTP relay
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from svcmonitor.status import Status

if TYPE_CHECKING:
    from svcmonitor.config import Settings

logger = logging.getLogger(__name__)


class ReportSink(Protocol):
    def send(self, service_name: str, status: Status) -> None: ...


class SinkError(Exception):
    """Raised when a sink's backend rejects a status."""


class LogSink:
    """Fakes the monitoring server by logging every status it would have sent."""

    def __init__(self, host_name: str = "") -> None:
        self.host_name = host_name

    def send(self, service_name: str, status: Status) -> None:
        logger.info("Service [%s] would have reported: %s", service_name, status)


def build_sink(settings: Settings) -> ReportSink:
    """Create the sink named by ``settings.sink``."""
    if settings.sink == "log":
        return LogSink(host_name=settings.host_name)
    if settings.sink == "webhook":
        from svcmonitor.sinks.webhook import WebhookSink

        if not settings.webhook_url:
            raise ValueError("sink=webhook requires SVCMONITOR_WEBHOOK_URL")
        return WebhookSink(
            url=settings.webhook_url,
            host_name=settings.host_name,
            timeout=settings.webhook_timeout_seconds,
        )
    raise ValueError(f"Unknown sink: {settings.sink!r} (expected 'log' or 'webhook')")
