"""Shutdown orchestration for the shipping core.

Purpose
-------
Provide a unified shutdown routine that drains the event queue and then
ships whatever the batch buffers still hold.
"""

from __future__ import annotations

from typing import Callable

from lib_log_ship.application.ports.queue import QueuePort

from .process_event import EventRouter


def create_shutdown(
    *,
    queue: QueuePort | None,
    router: EventRouter,
) -> Callable[[], None]:
    """Return a callable performing the shutdown sequence."""

    def shutdown() -> None:
        """Drain queued events in order, then flush both buffers."""
        if queue is not None:
            queue.stop(drain=True)
        router.flush()

    return shutdown


__all__ = ["create_shutdown"]
