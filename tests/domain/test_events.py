from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest

from lib_log_ship.domain.events import LogEvent
from lib_log_ship.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_timestamps_are_normalised_to_utc() -> None:
    local = datetime(2025, 9, 23, 14, 0, tzinfo=timezone(timedelta(hours=2)))

    event = LogEvent(LogLevel.INFO, "m", local)

    assert event.timestamp == datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)
    assert event.timestamp.tzinfo is timezone.utc


def test_naive_timestamps_are_rejected() -> None:
    with pytest.raises(ValueError, match="timezone-aware"):
        LogEvent(LogLevel.INFO, "m", datetime(2025, 9, 23, 12, 0))


def test_metadata_is_copied_on_construction() -> None:
    source = {"app": "fw"}
    event = LogEvent(LogLevel.INFO, "m", datetime(2025, 1, 1, tzinfo=timezone.utc), source)

    source["app"] = "changed"

    assert event.metadata == {"app": "fw"}


def test_events_are_immutable() -> None:
    event = LogEvent(LogLevel.INFO, "m", datetime(2025, 1, 1, tzinfo=timezone.utc))
    with pytest.raises(FrozenInstanceError):
        event.message = "other"  # type: ignore[misc]


def test_select_metadata_keeps_requested_order() -> None:
    event = LogEvent(LogLevel.INFO, "m", datetime(2025, 1, 1, tzinfo=timezone.utc), {"a": 1, "b": 2, "c": 3})

    assert list(event.select_metadata(("c", "a"))) == ["c", "a"]
    assert event.select_metadata(()) == {}
    assert event.select_metadata("all") == {"a": 1, "b": 2, "c": 3}


def test_replace_returns_updated_copy() -> None:
    event = LogEvent(LogLevel.INFO, "m", datetime(2025, 1, 1, tzinfo=timezone.utc), logger_name="x")

    changed = event.replace(level=LogLevel.ERROR)

    assert changed.level is LogLevel.ERROR
    assert changed.logger_name == "x"
    assert event.level is LogLevel.INFO
