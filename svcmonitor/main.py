"""Entry point for the svcmonitor scheduler."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from svcmonitor.api import create_app
from svcmonitor.checks import load_checks
from svcmonitor.config import settings
from svcmonitor.exporter import InMemoryExporter
from svcmonitor.registry import MonitorRegistry
from svcmonitor.sinks import build_sink
from svcmonitor.status import Status, StatusLevel, normalize_status

console = Console()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)

_LEVEL_STYLE = {
    StatusLevel.OK: "green",
    StatusLevel.WARNING: "yellow",
    StatusLevel.CRITICAL: "red",
    StatusLevel.UNKNOWN: "magenta",
}


def run_server(checks_file: Path) -> None:
    """Register every check from the checks file and serve the management API."""
    exporter = InMemoryExporter()
    sink = build_sink(settings)
    registry = MonitorRegistry(
        check_period=settings.check_period_seconds,
        sink=sink,
        exporter=exporter,
    )
    try:
        for name, check in load_checks(checks_file).items():
            registry.register(name, check)

        console.print(Panel(
            f"Monitoring {len(registry)} services every {settings.check_period_seconds}s "
            f"(sink={settings.sink})",
            title="svcmonitor", style="bold green",
        ))
        uvicorn.run(create_app(registry, exporter), host=settings.api_host, port=settings.api_port)
    finally:
        registry.close()
        close_sink = getattr(sink, "close", None)
        if callable(close_sink):
            close_sink()


def run_checks_once(checks_file: Path) -> int:
    """Run each check a single time and print the results. Returns the exit code."""
    checks = load_checks(checks_file)
    if not checks:
        console.print(f"[yellow]No checks found in {checks_file}[/yellow]")
        return 1

    table = Table(title="Service checks")
    table.add_column("Service")
    table.add_column("Level")
    table.add_column("Message")

    worst = StatusLevel.OK
    for name, check in checks.items():
        status: Status
        try:
            status = normalize_status(check())
        except Exception as e:
            status = normalize_status(None, e)
        worst = max(worst, status.level)
        style = _LEVEL_STYLE[status.level]
        table.add_row(name, f"[{style}]{status.level.name}[/{style}]", status.message)

    console.print(table)
    return int(worst)


def main() -> None:
    parser = argparse.ArgumentParser(description="svcmonitor health-check scheduler")
    parser.add_argument(
        "--checks-file",
        type=Path,
        default=Path(settings.checks_file),
        help="YAML file with check definitions",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="Schedule all checks and start the management API")
    sub.add_parser("check", help="Run all checks once and print the results")

    args = parser.parse_args()

    if args.command == "serve":
        run_server(args.checks_file)
    elif args.command == "check":
        sys.exit(run_checks_once(args.checks_file))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
