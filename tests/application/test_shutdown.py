from __future__ import annotations

from lib_log_ship.adapters import FLUSH, QueueAdapter, RepeatThrottle
from lib_log_ship.adapters.queue import QueueItem
from lib_log_ship.application.use_cases import create_event_router, create_shutdown
from lib_log_ship.domain import LogEvent, LogLevel, ShipperSettings
from tests.fakes import BASE_TIME, CountingIds, ManualClock, MemoryVerboseStore, RecordingSink, message_only
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def _router(sink: RecordingSink):  # noqa: ANN202
    return create_event_router(
        settings=ShipperSettings(sink=sink, buffer_size=10),
        formatter=message_only,
        throttle=RepeatThrottle(),
        clock=ManualClock(),
        id_provider=CountingIds(),
        verbose_store=MemoryVerboseStore(),
    )


def test_shutdown_without_queue_flushes_pending_lines(sink: RecordingSink) -> None:
    router = _router(sink)
    router.handle(LogEvent(LogLevel.INFO, "pending", BASE_TIME))

    create_shutdown(queue=None, router=router)()

    assert sink.calls == [("system", "pending")]


def test_shutdown_drains_queue_before_final_flush(sink: RecordingSink) -> None:
    router = _router(sink)

    def worker(item: QueueItem) -> None:
        if item is FLUSH:
            router.flush()
        else:
            router.handle(item)  # type: ignore[arg-type]

    queue = QueueAdapter(worker=worker)
    queue.start()
    queue.put(LogEvent(LogLevel.INFO, "a", BASE_TIME))
    queue.request_flush()
    queue.put(LogEvent(LogLevel.INFO, "b", BASE_TIME))
    queue.put(LogEvent(LogLevel.INFO, "c", BASE_TIME))

    create_shutdown(queue=queue, router=router)()

    assert sink.calls == [("system", "a"), ("system", "b\nc")]
