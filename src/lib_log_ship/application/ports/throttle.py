"""Port for repeat-suppression filters protecting the sink."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol, runtime_checkable


@runtime_checkable
class ThrottlePort(Protocol):
    """Decide whether a rendered line may be shipped."""

    def should_send(self, text: str, now: datetime) -> bool:
        """Return ``True`` when ``text`` is within its repeat quota at ``now``."""

    def configure(
        self,
        *,
        enabled: bool,
        window: timedelta,
        max_repeats: int,
        max_entries: int | None,
    ) -> None:
        """Apply new limits while keeping tracked counters."""

    def reset(self) -> None:
        """Forget every tracked text."""

    def __len__(self) -> int:
        """Return the number of texts currently tracked."""


__all__ = ["ThrottlePort"]
