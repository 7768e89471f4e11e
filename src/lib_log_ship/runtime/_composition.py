"""Runtime composition helpers wiring domain, application, and adapters.

Purpose
-------
Translate resolved :class:`ShipperSettings` into the live
:class:`ShippingRuntime` singleton. The helpers here keep wiring small,
declarative, and testable.

Contents
--------
* :func:`build_runtime` – composition root.
* Inline and queued dispatch constructors.
"""

from __future__ import annotations

from typing import Any, Callable

from lib_log_ship.adapters import FLUSH, QueueAdapter, TemplateFormatter
from lib_log_ship.adapters.queue import QueueItem
from lib_log_ship.application.ports import ClockPort, FormatterPort, IdProvider, VerboseStorePort
from lib_log_ship.application.use_cases import EventRouter, ProcessResult, create_event_router, create_shutdown
from lib_log_ship.domain import LogEvent, ShipperSettings

from ._factories import ShortIdProvider, SystemClock, create_throttle, create_verbose_store
from ._state import ShippingRuntime


__all__ = ["build_runtime"]


def build_runtime(
    settings: ShipperSettings,
    *,
    options: dict[str, Any],
    queue_enabled: bool = False,
    queue_maxsize: int = 2048,
    queue_full_policy: str = "block",
    queue_put_timeout: float | None = 1.0,
    verbose: bool | None = None,
    verbose_store: VerboseStorePort | None = None,
    formatter: FormatterPort | None = None,
    clock: ClockPort | None = None,
    id_provider: IdProvider | None = None,
    diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
) -> ShippingRuntime:
    """Assemble the shipping runtime from resolved settings."""

    owns_store = verbose_store is None
    store = verbose_store if verbose_store is not None else create_verbose_store(settings)
    router = create_event_router(
        settings=settings,
        formatter=formatter if formatter is not None else TemplateFormatter(),
        throttle=create_throttle(settings),
        clock=clock if clock is not None else SystemClock(),
        id_provider=id_provider if id_provider is not None else ShortIdProvider(),
        verbose_store=store,
        verbose=verbose,
        diagnostic=diagnostic,
    )

    queue: QueueAdapter | None = None
    if queue_enabled:
        queue = QueueAdapter(
            worker=_queue_worker(router),
            maxsize=queue_maxsize,
            drop_policy=queue_full_policy,
            timeout=queue_put_timeout,
            diagnostic=diagnostic,
        )
        queue.start()
        process, request_flush = _queued_dispatch(queue)
    else:
        process, request_flush = router.handle, router.flush

    return ShippingRuntime(
        router=router,
        process=process,
        request_flush=request_flush,
        shutdown=create_shutdown(queue=queue, router=router),
        queue=queue,
        verbose_store=store,
        owns_verbose_store=owns_store,
        options=dict(options),
    )


def _queue_worker(router: EventRouter) -> Callable[[QueueItem], None]:
    def worker(item: QueueItem) -> None:
        if item is FLUSH:
            router.flush()
        elif isinstance(item, LogEvent):
            router.handle(item)

    return worker


def _queued_dispatch(
    queue: QueueAdapter,
) -> tuple[Callable[[LogEvent], ProcessResult], Callable[[], ProcessResult]]:
    def process(event: LogEvent) -> ProcessResult:
        if queue.put(event):
            return {"ok": True, "outcome": "queued"}
        return {"ok": False, "outcome": "queue_full"}

    def request_flush() -> ProcessResult:
        if queue.request_flush():
            return {"ok": True, "outcome": "queued"}
        return {"ok": False, "outcome": "queue_full"}

    return process, request_flush
