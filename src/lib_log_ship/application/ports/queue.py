"""Port describing the queue that serialises producers onto one worker."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_ship.domain.events import LogEvent


@runtime_checkable
class QueuePort(Protocol):
    """Bridge between producer threads and the single router worker."""

    def start(self) -> None:
        """Start the queue worker."""

    def stop(self, *, drain: bool = True) -> None:
        """Stop the queue worker, optionally draining queued items."""

    def put(self, event: LogEvent) -> bool:
        """Enqueue ``event`` for processing in delivery order."""

    def request_flush(self) -> bool:
        """Enqueue an explicit flush ordered after every earlier event."""


__all__ = ["QueuePort"]
