"""svcmonitor — embeddable health-check scheduler with pluggable report sinks."""

from .exporter import InMemoryExporter, MetadataExporter, NullExporter
from .registry import DuplicateRegistrationError, MonitorRegistry
from .runner import Check, ServiceRunner, next_delay
from .sinks import LogSink, ReportSink, SinkError
from .status import Status, StatusLevel, normalize_status
from .timers import SchedulerShutdownError, ThreadingScheduler, TickScheduler
