"""Repeat throttle for identical log lines.

Implements the suppression policy of the shipping core: each distinct
rendered text may be shipped ``max_repeats`` times within ``window`` after it
was first seen; later repeats are dropped until the entry expires.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Tuple

from lib_log_ship.application.ports.throttle import ThrottlePort
from lib_log_ship.domain.settings import DEFAULT_THROTTLE_MAX_REPEATS, DEFAULT_THROTTLE_WINDOW


THROTTLE_SUMMARY_PREFIX = "[throttled]"
"""Lines starting with this prefix are summaries and are never throttled."""


class RepeatThrottle(ThrottlePort):
    """Count repeats per exact text inside a window anchored at first sight.

    Expiry checks every entry: a wall clock stepped backwards can leave an
    older entry behind a fresher one in first-seen order.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        window: timedelta = DEFAULT_THROTTLE_WINDOW,
        max_repeats: int = DEFAULT_THROTTLE_MAX_REPEATS,
        max_entries: int | None = None,
    ) -> None:
        """Initialise the throttle with its limits and an empty table."""
        self._entries: Dict[str, Tuple[int, datetime]] = {}
        self.configure(enabled=enabled, window=window, max_repeats=max_repeats, max_entries=max_entries)

    def configure(
        self,
        *,
        enabled: bool,
        window: timedelta,
        max_repeats: int,
        max_entries: int | None,
    ) -> None:
        """Apply new limits; tracked counters are kept."""
        self._enabled = enabled
        self._window = window
        self._max_repeats = max_repeats
        self._max_entries = max_entries

    def should_send(self, text: str, now: datetime) -> bool:
        """Return ``True`` when ``text`` may be shipped at ``now``."""
        if not self._enabled or text.startswith(THROTTLE_SUMMARY_PREFIX):
            return True
        self._expire(now)
        entry = self._entries.get(text)
        if entry is None:
            self._evict_overflow()
            count, first_seen = 1, now
        else:
            count, first_seen = entry[0] + 1, entry[1]
        self._entries[text] = (count, first_seen)
        return count <= self._max_repeats

    def reset(self) -> None:
        """Forget every tracked text."""
        self._entries.clear()

    def count(self, text: str) -> int:
        """Return the repeat counter currently recorded for ``text``."""
        entry = self._entries.get(text)
        return 0 if entry is None else entry[0]

    def __len__(self) -> int:
        return len(self._entries)

    def _expire(self, now: datetime) -> None:
        stale = [text for text, (_, first_seen) in self._entries.items() if now - first_seen > self._window]
        for text in stale:
            del self._entries[text]

    def _evict_overflow(self) -> None:
        if self._max_entries is None:
            return
        while len(self._entries) >= self._max_entries:
            del self._entries[next(iter(self._entries))]


__all__ = ["RepeatThrottle", "THROTTLE_SUMMARY_PREFIX"]
