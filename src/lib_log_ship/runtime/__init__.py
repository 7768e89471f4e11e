"""Runtime façade that wires the shipping core.

Purpose
-------
Expose a stable entry point (``init``, ``configure``, ``set_verbose``,
``handle``, ``flush``, ``attach``, ``shutdown``) that host applications use
instead of importing the inner layers directly. The module translates
configuration inputs into a composed runtime built from domain entities,
application use cases, and adapters.

Contents
--------
* ``init`` – composition root for assembling the pipeline.
* ``configure`` / ``set_verbose`` – synchronous reconfiguration.
* ``handle`` / ``flush`` – event feed and explicit flush signal.
* ``attach`` / :class:`ShipperHandler` – stdlib logging integration.
* ``inspect_runtime`` – read-only snapshot for diagnostics and the CLI.
* ``shutdown`` – deterministic teardown.

System Role
-----------
Forms the outer shell: high-level policy depends only on abstractions;
adapters are hidden behind this interface.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from lib_log_ship.adapters import FileVerboseStore
from lib_log_ship.application.ports import ClockPort, FormatterPort, IdProvider, VerboseStorePort
from lib_log_ship.application.use_cases import ProcessResult
from lib_log_ship.config import coerce_options, env_overrides
from lib_log_ship.domain import Destination, LogEvent, ShipperSettings

from ._composition import build_runtime
from ._handler import ShipperHandler, event_from_record
from ._state import _STATE_LOCK, ShippingRuntime, clear_runtime, current_runtime, is_initialised, set_runtime


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active shipping runtime."""

    verbose: bool
    pending_application: int
    pending_system: int
    tracked_texts: int
    queue_present: bool
    sink_present: bool
    settings: ShipperSettings


__all__ = [
    "RuntimeSnapshot",
    "ShipperHandler",
    "ShippingRuntime",
    "attach",
    "configure",
    "event_from_record",
    "flush",
    "handle",
    "init",
    "inspect_runtime",
    "is_initialised",
    "set_verbose",
    "shutdown",
]


def init(
    *,
    queue_enabled: bool = False,
    queue_maxsize: int = 2048,
    queue_full_policy: str = "block",
    queue_put_timeout: float | None = 1.0,
    verbose: bool | None = None,
    verbose_store: VerboseStorePort | None = None,
    formatter: FormatterPort | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProvider | None = None,
    diagnostic_hook: Callable[[str, dict[str, Any]], None] | None = None,
    use_environment: bool = True,
    **options: Any,
) -> ShippingRuntime:
    """Compose the shipping runtime according to configuration inputs.

    Why
    ---
    Hosts call ``init`` once during start-up. Centralising the composition
    here keeps host code independent of the inner layers.

    Inputs
    ------
    queue_enabled:
        Process events on a dedicated worker thread; producers only enqueue.
        When ``False`` events are processed inline under the router's lock.
    queue_maxsize, queue_full_policy, queue_put_timeout:
        Queue capacity and behaviour when full (``"block"`` or ``"drop"``).
    verbose:
        Explicit initial verbose flag; ``None`` reads the persisted flag once.
    verbose_store, formatter, clock, id_provider:
        Optional port implementations replacing the defaults (file store,
        template formatter, UTC system clock, short random ids).
    diagnostic_hook:
        Callback receiving pipeline milestones; exceptions are swallowed.
    use_environment:
        Merge ``LOG_SHIP_*`` variables under the explicit ``options``.
    **options:
        Shipping options (``sink``, ``buffer_size``, ``max_message_bytes``,
        ``throttle_*``, ``exclude_message_containing``, ...). Malformed values
        fall back to defaults.

    Side Effects
    ------------
    Raises :class:`RuntimeError` if called while a runtime is already active.
    Starts the queue worker thread when ``queue_enabled`` is ``True``.
    """

    with _STATE_LOCK:
        if is_initialised():
            raise RuntimeError(
                "lib_log_ship.init() cannot be called twice without shutdown(); call lib_log_ship.shutdown() first",
            )
        merged = {**(env_overrides() if use_environment else {}), **options}
        runtime = build_runtime(
            coerce_options(merged),
            options=merged,
            queue_enabled=queue_enabled,
            queue_maxsize=queue_maxsize,
            queue_full_policy=queue_full_policy,
            queue_put_timeout=queue_put_timeout,
            verbose=verbose,
            verbose_store=verbose_store,
            formatter=formatter,
            clock=clock,
            id_provider=id_provider,
            diagnostic=diagnostic_hook,
        )
        set_runtime(runtime)
        return runtime


def configure(**options: Any) -> ShipperSettings:
    """Merge ``options`` over the stored ones and reconfigure the router.

    Queued events are processed under the previous configuration before the
    change is applied, so a new sink only sees events handed in afterwards.
    """

    runtime = current_runtime()
    if runtime.queue is not None:
        runtime.queue.wait_until_idle()
    runtime.options = {**runtime.options, **options}
    settings = coerce_options(runtime.options)
    store: VerboseStorePort | None = None
    if runtime.owns_verbose_store and settings.verbose_file != runtime.router.settings.verbose_file:
        store = FileVerboseStore(settings.verbose_file)
        runtime.verbose_store = store
    runtime.router.reconfigure(settings, verbose_store=store)
    return settings


def set_verbose(verbose: bool) -> None:
    """Toggle verbose mode and persist the flag (best effort)."""

    runtime = current_runtime()
    if runtime.queue is not None:
        runtime.queue.wait_until_idle()
    runtime.router.set_verbose(verbose)


def handle(event: LogEvent) -> ProcessResult:
    """Feed one event into the pipeline."""

    return current_runtime().process(event)


def flush() -> ProcessResult:
    """Request an explicit flush ordered after every event handed in so far."""

    return current_runtime().request_flush()


def attach(logger: logging.Logger | str | None = None, *, level: int = logging.NOTSET) -> ShipperHandler:
    """Install a :class:`ShipperHandler` on ``logger`` (root by default)."""

    target = logger if isinstance(logger, logging.Logger) else logging.getLogger(logger)
    handler = ShipperHandler(level)
    target.addHandler(handler)
    return handler


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    router = runtime.router
    return RuntimeSnapshot(
        verbose=router.verbose,
        pending_application=len(router.pending(Destination.APPLICATION)),
        pending_system=len(router.pending(Destination.SYSTEM)),
        tracked_texts=router.tracked_texts(),
        queue_present=runtime.queue is not None,
        sink_present=router.settings.sink is not None,
        settings=router.settings,
    )


def shutdown() -> None:
    """Drain the queue, flush both buffers, and clear the runtime."""

    with _STATE_LOCK:
        runtime = current_runtime()
        try:
            runtime.shutdown()
        finally:
            clear_runtime()
