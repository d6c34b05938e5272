"""HTTP relay sink — submits passive check results as JSON.

Payload fields mirror a passive service check submission:
target host, service name, severity level (name and numeric code), message.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from svcmonitor.sinks import SinkError
from svcmonitor.status import Status

logger = logging.getLogger(__name__)


class WebhookSink:
    """Synchronous httpx sender; one POST per reported status."""

    def __init__(
        self,
        url: str,
        host_name: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url
        self.host_name = host_name
        self._client = client or httpx.Client(timeout=timeout)

    def payload(self, service_name: str, status: Status) -> dict[str, Any]:
        return {
            "host": self.host_name,
            "service": service_name,
            "level": status.level.name,
            "code": int(status.level),
            "message": status.message,
        }

    def send(self, service_name: str, status: Status) -> None:
        resp = self._client.post(self.url, json=self.payload(service_name, status))
        if resp.status_code >= 300:
            raise SinkError(f"Relay returned {resp.status_code}: {resp.text[:200]}")
        logger.debug("Service [%s] reported %s to %s", service_name, status, self.url)

    def close(self) -> None:
        self._client.close()
