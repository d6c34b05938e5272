"""Tests for Status values and outcome normalization."""

from __future__ import annotations

import dataclasses

import pytest

from svcmonitor.status import Status, StatusLevel, normalize_status


# ── Status ───────────────────────────────────────────────────────────────────


class TestStatus:
    @pytest.mark.parametrize(
        "factory, level",
        [
            (Status.ok, StatusLevel.OK),
            (Status.warning, StatusLevel.WARNING),
            (Status.critical, StatusLevel.CRITICAL),
            (Status.unknown, StatusLevel.UNKNOWN),
        ],
    )
    def test_factories(self, factory, level) -> None:
        status = factory("message")
        assert status.level == level
        assert status.message == "message"

    def test_format_args(self) -> None:
        status = Status.warning("%d%% used on %s", 91, "/var")
        assert status.message == "91% used on /var"

    def test_literal_message_is_not_formatted(self) -> None:
        assert Status.ok("42% used").message == "42% used"

    def test_rendered_form(self) -> None:
        assert str(Status.critical("disk full")) == "CRITICAL disk full"

    def test_immutable(self) -> None:
        status = Status.ok("fine")
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.message = "changed"  # type: ignore[misc]

    def test_interchangeable_when_level_and_message_match(self) -> None:
        assert Status.ok("a") == Status.ok("a")
        assert Status.ok("a") != Status.warning("a")

    def test_to_dict(self) -> None:
        assert Status.unknown("x").to_dict() == {"level": "UNKNOWN", "code": 3, "message": "x"}

    def test_rejects_raw_level(self) -> None:
        with pytest.raises(TypeError, match="StatusLevel"):
            Status(0, "ok")  # type: ignore[arg-type]

    def test_rejects_non_string_message(self) -> None:
        with pytest.raises(TypeError, match="str"):
            Status(StatusLevel.OK, None)  # type: ignore[arg-type]

    def test_direct_construction_with_level(self) -> None:
        assert Status(StatusLevel.WARNING, "slow") == Status.warning("slow")


class TestStatusLevel:
    def test_ordered_by_urgency(self) -> None:
        assert StatusLevel.OK < StatusLevel.WARNING < StatusLevel.CRITICAL < StatusLevel.UNKNOWN

    def test_exactly_four_levels(self) -> None:
        assert [lvl.name for lvl in StatusLevel] == ["OK", "WARNING", "CRITICAL", "UNKNOWN"]


# ── normalize_status ─────────────────────────────────────────────────────────


class TestNormalizeStatus:
    @pytest.mark.parametrize(
        "status",
        [Status.ok("up"), Status.warning("slow"), Status.critical("down"), Status.unknown("?")],
    )
    def test_result_passes_through_unchanged(self, status: Status) -> None:
        assert normalize_status(status) is status

    def test_error_becomes_unknown(self) -> None:
        status = normalize_status(None, RuntimeError("connection refused"))
        assert status.level == StatusLevel.UNKNOWN
        assert status.message == "Check threw exception: connection refused"

    def test_error_wins_over_result(self) -> None:
        status = normalize_status(Status.ok("up"), ValueError("bad"))
        assert status.level == StatusLevel.UNKNOWN
        assert "bad" in status.message

    def test_none_becomes_null_status(self) -> None:
        status = normalize_status(None)
        assert status.level == StatusLevel.UNKNOWN
        assert status.message == "Null status"
