"""Management API over the registry's exported services.

Endpoints:
  GET /healthz                 — overall scheduler health + halted services
  GET /api/services            — every exported service with its last status
  GET /api/services/{name}     — a single service
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, FastAPI, HTTPException, Request

from svcmonitor.exporter import InMemoryExporter
from svcmonitor.registry import MonitorRegistry, export_name

logger = logging.getLogger(__name__)

services_router = APIRouter()


@services_router.get("/healthz")
def healthz(request: Request) -> dict[str, Any]:
    registry: MonitorRegistry = request.app.state.registry
    failed = [
        name for name in registry.names()
        if (runner := registry.get(name)) is not None and runner.failed
    ]
    return {
        "status": "degraded" if failed else "ok",
        "services": len(registry),
        "failed": failed,
    }


@services_router.get("/api/services")
def list_services(request: Request) -> dict[str, Any]:
    exporter: InMemoryExporter = request.app.state.exporter
    snapshot = exporter.snapshot()
    return {"services": [snapshot[k] for k in sorted(snapshot)]}


@services_router.get("/api/services/{service_name}")
def get_service(service_name: str, request: Request) -> dict[str, Any]:
    exporter: InMemoryExporter = request.app.state.exporter
    entry = exporter.snapshot().get(export_name(service_name))
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Service '{service_name}' not registered")
    return entry


def create_app(registry: MonitorRegistry, exporter: InMemoryExporter) -> FastAPI:
    app = FastAPI(title="svcmonitor", version="0.1.0")
    app.state.registry = registry
    app.state.exporter = exporter
    app.include_router(services_router)
    return app
