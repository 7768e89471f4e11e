from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from lib_log_ship.adapters.throttle import THROTTLE_SUMMARY_PREFIX, RepeatThrottle
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

T0 = datetime(2025, 9, 23, 12, 0, tzinfo=timezone.utc)


def at(seconds: float) -> datetime:
    return T0 + timedelta(seconds=seconds)


def test_repeats_beyond_limit_are_suppressed_within_window() -> None:
    throttle = RepeatThrottle(window=timedelta(minutes=1), max_repeats=2)

    decisions = [throttle.should_send("X", at(index)) for index in range(4)]

    assert decisions == [True, True, False, False]
    assert throttle.count("X") == 4


def test_distinct_texts_are_counted_separately() -> None:
    throttle = RepeatThrottle(max_repeats=1)

    assert throttle.should_send("a", T0)
    assert throttle.should_send("b", T0)
    assert not throttle.should_send("a", T0)
    assert len(throttle) == 2


def test_window_is_anchored_at_first_sighting() -> None:
    throttle = RepeatThrottle(window=timedelta(seconds=10), max_repeats=1)

    assert throttle.should_send("X", at(0))
    assert not throttle.should_send("X", at(9))
    assert not throttle.should_send("X", at(10))
    assert throttle.should_send("X", at(10.001))
    assert throttle.count("X") == 1


def test_expiry_drops_every_stale_entry_but_keeps_fresh_ones() -> None:
    throttle = RepeatThrottle(window=timedelta(seconds=10), max_repeats=5)
    throttle.should_send("old-1", at(0))
    throttle.should_send("old-2", at(1))
    throttle.should_send("fresh", at(8))

    throttle.should_send("new", at(15))

    assert throttle.count("old-1") == 0
    assert throttle.count("old-2") == 0
    assert throttle.count("fresh") == 1
    assert len(throttle) == 2


def test_summary_lines_are_never_throttled_or_tracked() -> None:
    throttle = RepeatThrottle(max_repeats=0)
    summary = f"{THROTTLE_SUMMARY_PREFIX} 'X' repeated 12 times"

    assert all(throttle.should_send(summary, T0) for _ in range(5))
    assert len(throttle) == 0


def test_disabled_throttle_sends_everything() -> None:
    throttle = RepeatThrottle(enabled=False, max_repeats=1)

    assert all(throttle.should_send("X", T0) for _ in range(10))
    assert len(throttle) == 0


def test_zero_repeats_suppresses_every_occurrence() -> None:
    throttle = RepeatThrottle(max_repeats=0)

    assert not throttle.should_send("X", T0)


def test_max_entries_evicts_oldest_text() -> None:
    throttle = RepeatThrottle(max_repeats=1, max_entries=2)
    throttle.should_send("a", at(0))
    throttle.should_send("b", at(1))

    throttle.should_send("c", at(2))

    assert throttle.count("a") == 0
    assert len(throttle) == 2
    assert throttle.should_send("a", at(3))


@pytest.mark.parametrize("max_repeats", [1, 3])
def test_configure_keeps_counters(max_repeats: int) -> None:
    throttle = RepeatThrottle(max_repeats=1)
    throttle.should_send("X", T0)

    throttle.configure(enabled=True, window=timedelta(minutes=1), max_repeats=max_repeats, max_entries=None)

    assert throttle.count("X") == 1
    assert throttle.should_send("X", T0) is (max_repeats > 1)


def test_reset_forgets_all_texts() -> None:
    throttle = RepeatThrottle(max_repeats=1)
    throttle.should_send("X", T0)

    throttle.reset()

    assert len(throttle) == 0
    assert throttle.should_send("X", T0)


def test_expiry_survives_backward_clock_step() -> None:
    throttle = RepeatThrottle(window=timedelta(seconds=60), max_repeats=1)
    assert throttle.should_send("A", at(100))
    assert throttle.should_send("B", at(50))

    assert throttle.should_send("B", at(115))
    assert throttle.count("B") == 1
    assert throttle.count("A") == 1
