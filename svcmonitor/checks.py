"""Built-in checks and the YAML check file loader.

Supports: HTTP(S) status + latency, TCP connect, DNS resolve.
Each check is a callable returning a Status, so it can be handed straight to
``MonitorRegistry.register``.
"""

from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import yaml

from svcmonitor.runner import Check
from svcmonitor.status import Status

logger = logging.getLogger(__name__)

# Latency budget before a successful HTTP check degrades to WARNING
SLOW_RESPONSE_MS = 3000


# ── Checks ───────────────────────────────────────────────────────────────────


@dataclass
class HttpCheck:
    """HTTP(S) check — expected status code within the latency budget."""

    url: str
    method: str = "GET"
    expected_status: int = 200
    timeout_ms: int = 10_000

    def __call__(self) -> Status:
        t0 = time.perf_counter()
        try:
            with httpx.Client(timeout=self.timeout_ms / 1000, follow_redirects=True) as client:
                resp = client.request(self.method, self.url)
        except httpx.TimeoutException:
            return Status.critical("Timed out after %dms", self.timeout_ms)
        except httpx.HTTPError as e:
            return Status.critical("Connection error: %s", e)
        latency = (time.perf_counter() - t0) * 1000

        if resp.status_code != self.expected_status:
            return Status.critical("Expected %d, got %d", self.expected_status, resp.status_code)
        if latency > SLOW_RESPONSE_MS:
            return Status.warning("%d OK but slow (%.0fms)", resp.status_code, latency)
        return Status.ok("%d OK (%.0fms)", resp.status_code, latency)


@dataclass
class TcpCheck:
    """Raw TCP port connectivity check."""

    hostname: str
    port: int = 443
    timeout_ms: int = 5_000

    def __call__(self) -> Status:
        try:
            sock = socket.create_connection((self.hostname, self.port), timeout=self.timeout_ms / 1000)
            sock.close()
        except OSError as e:
            return Status.critical("TCP connect to %s:%d failed: %s", self.hostname, self.port, e)
        return Status.ok("Port %d open", self.port)


@dataclass
class DnsCheck:
    """DNS resolution check."""

    hostname: str

    def __call__(self) -> Status:
        try:
            addrs = socket.getaddrinfo(self.hostname, None)
        except socket.gaierror as e:
            return Status.critical("DNS resolution failed: %s", e)
        ips = sorted({a[4][0] for a in addrs})
        return Status.ok("Resolved to %s", ", ".join(ips[:3]))


# ── Check file ───────────────────────────────────────────────────────────────


def _parse_check(raw: dict[str, Any]) -> Check:
    check_type = raw.get("type", "http")
    if check_type == "http":
        return HttpCheck(
            url=raw["url"],
            method=raw.get("method", "GET"),
            expected_status=raw.get("expected_status", 200),
            timeout_ms=raw.get("timeout_ms", 10_000),
        )
    if check_type == "tcp":
        return TcpCheck(
            hostname=raw["hostname"],
            port=raw.get("port", 443),
            timeout_ms=raw.get("timeout_ms", 5_000),
        )
    if check_type == "dns":
        return DnsCheck(hostname=raw["hostname"])
    raise ValueError(f"Unknown check type: {check_type}")


def load_checks(path: Path) -> dict[str, Check]:
    """Parse a checks file into ``{service_name: check}``.

    Format::

        checks:
          - name: api
            type: http
            url: https://api.example.com/health
    """
    if not path.exists():
        logger.warning("Checks file not found: %s", path)
        return {}

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    checks: dict[str, Check] = {}
    for entry in raw.get("checks") or []:
        try:
            name = entry["name"]
            if not isinstance(name, str) or not name:
                raise ValueError(f"check name must be a non-empty string, got {name!r}")
            if name in checks:
                raise ValueError(f"duplicate check name {name!r}")
            checks[name] = _parse_check(entry)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed check entry: %s", e)

    logger.info("Loaded %d checks from %s", len(checks), path)
    return checks
