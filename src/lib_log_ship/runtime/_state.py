"""Runtime state container and access helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable

from lib_log_ship.adapters.queue import QueueAdapter
from lib_log_ship.application.ports import VerboseStorePort
from lib_log_ship.application.use_cases import EventRouter, ProcessResult
from lib_log_ship.domain import LogEvent


@dataclass(slots=True)
class ShippingRuntime:
    """Aggregate of live collaborators assembled by the composition root."""

    router: EventRouter
    process: Callable[[LogEvent], ProcessResult]
    request_flush: Callable[[], ProcessResult]
    shutdown: Callable[[], None]
    queue: QueueAdapter | None
    verbose_store: VerboseStorePort
    owns_verbose_store: bool
    options: dict[str, Any] = field(default_factory=dict)


_STATE: ShippingRuntime | None = None
_STATE_LOCK = RLock()


def set_runtime(runtime: ShippingRuntime) -> None:
    """Install ``runtime`` as the active singleton."""

    with _STATE_LOCK:
        global _STATE
        _STATE = runtime


def clear_runtime() -> None:
    """Remove the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        _STATE = None


def current_runtime() -> ShippingRuntime:
    """Return the active runtime or raise when uninitialised."""

    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("lib_log_ship.init() must be called before using the shipping API")
        return _STATE


def is_initialised() -> bool:
    """Return ``True`` when :func:`lib_log_ship.init` has been called."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "ShippingRuntime",
    "_STATE_LOCK",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
