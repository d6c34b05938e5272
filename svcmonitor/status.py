"""Check outcome model — severity levels, Status values, normalization."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class StatusLevel(IntEnum):
    """Severity of a check outcome, ordered by increasing urgency.

    Values match the passive-check return codes (0-3), so sinks can forward
    ``int(level)`` directly.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3  # reserved for meta-failures (check raised / returned nothing)


@dataclass(frozen=True)
class Status:
    """Immutable (level, message) outcome of one check execution.

    Build through the level factories, e.g. ``Status.ok("42% used")`` or
    ``Status.warning("%d%% used", pct)``.
    """

    level: StatusLevel
    message: str

    def __post_init__(self) -> None:
        if not isinstance(self.level, StatusLevel):
            raise TypeError(f"level must be a StatusLevel, got {self.level!r}")
        if not isinstance(self.message, str):
            raise TypeError(f"message must be a str, got {type(self.message).__name__}")

    @classmethod
    def _make(cls, level: StatusLevel, message: str, args: tuple[Any, ...]) -> Status:
        if args:
            message = message % args
        return cls(level, message)

    @classmethod
    def ok(cls, message: str, *args: Any) -> Status:
        return cls._make(StatusLevel.OK, message, args)

    @classmethod
    def warning(cls, message: str, *args: Any) -> Status:
        return cls._make(StatusLevel.WARNING, message, args)

    @classmethod
    def critical(cls, message: str, *args: Any) -> Status:
        return cls._make(StatusLevel.CRITICAL, message, args)

    @classmethod
    def unknown(cls, message: str, *args: Any) -> Status:
        return cls._make(StatusLevel.UNKNOWN, message, args)

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.name, "code": int(self.level), "message": self.message}

    def __str__(self) -> str:
        return f"{self.level.name} {self.message}"


NULL_STATUS_MESSAGE = "Null status"
CHECK_EXCEPTION_PREFIX = "Check threw exception: "


def normalize_status(result: Status | None, error: BaseException | None = None) -> Status:
    """Turn a raw check outcome into a reportable Status.

    A raised error wins over any result; a missing result becomes UNKNOWN.
    """
    if error is not None:
        return Status.unknown(CHECK_EXCEPTION_PREFIX + str(error))
    if result is None:
        return Status.unknown(NULL_STATUS_MESSAGE)
    return result
