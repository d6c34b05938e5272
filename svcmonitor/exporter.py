"""Management metadata exporters.

The registry publishes each registered service under a namespaced name so
it can be inspected from outside (see ``svcmonitor.api``).
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class MetadataExporter(Protocol):
    def export(self, name: str, obj: Any) -> None: ...

    def unexport(self, name: str) -> None: ...


class NullExporter:
    """Default exporter: publishes nothing."""

    def export(self, name: str, obj: Any) -> None:
        pass

    def unexport(self, name: str) -> None:
        pass


class InMemoryExporter:
    """Keeps exported objects in a dict for the management API."""

    def __init__(self) -> None:
        self._objects: dict[str, Any] = {}
        self._lock = threading.Lock()

    def export(self, name: str, obj: Any) -> None:
        with self._lock:
            self._objects[name] = obj
        logger.debug("Exported %s", name)

    def unexport(self, name: str) -> None:
        with self._lock:
            self._objects.pop(name, None)

    def get(self, name: str) -> Any | None:
        with self._lock:
            return self._objects.get(name)

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Return ``describe()`` output (or repr) for every exported object."""
        with self._lock:
            items = list(self._objects.items())
        out: dict[str, dict[str, Any]] = {}
        for name, obj in items:
            describe = getattr(obj, "describe", None)
            out[name] = describe() if callable(describe) else {"repr": repr(obj)}
        return out
