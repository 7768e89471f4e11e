"""Single-consumer queue in front of the event router.

Purpose
-------
Host applications may log from many threads. The router must see events one
at a time, in delivery order, with explicit flush requests ordered relative to
the events around them. This adapter funnels everything through one FIFO and
one consumer thread.

Contents
--------
* :data:`FLUSH` - marker item requesting an explicit buffer flush.
* :class:`QueueAdapter` - consumer thread implementing :class:`QueuePort`.

System Role
-----------
Optional; when disabled the runtime processes events inline under the
router's lock instead. Reconfiguration waits on :meth:`QueueAdapter.wait_until_idle`
so queued events are routed under the settings they were produced with.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any, Union

from lib_log_ship.application.ports.queue import QueuePort
from lib_log_ship.domain.events import LogEvent


LOGGER = logging.getLogger(__name__)


class FlushRequest:
    """Queue item asking the consumer to flush both buffers."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "FLUSH"


class _StopSignal:
    __slots__ = ()


FLUSH = FlushRequest()
_STOP = _StopSignal()

QueueItem = Union[LogEvent, FlushRequest]


class QueueAdapter(QueuePort):
    """Deliver queued items to one consumer callable on a background thread.

    Producers never run router code; they only enqueue. Every accepted item is
    counted until the consumer is done with it, which is what
    :meth:`wait_until_idle` observes.

    Examples
    --------
    >>> processed = []
    >>> adapter = QueueAdapter(worker=processed.append)
    >>> adapter.start()
    >>> from datetime import datetime, timezone
    >>> from lib_log_ship.domain.levels import LogLevel
    >>> event = LogEvent(LogLevel.INFO, 'msg', datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc))
    >>> adapter.put(event), adapter.request_flush()
    (True, True)
    >>> adapter.wait_until_idle(timeout=5.0)
    True
    >>> adapter.stop()
    >>> processed[0].message, processed[1]
    ('msg', FLUSH)
    """

    def __init__(
        self,
        *,
        worker: Callable[[QueueItem], None] | None = None,
        maxsize: int = 2048,
        drop_policy: str = "block",
        timeout: float | None = 1.0,
        stop_timeout: float | None = 5.0,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        """Create the queue; nothing runs until :meth:`start`.

        Parameters
        ----------
        worker:
            Consumer invoked for each item; items are discarded while ``None``.
        maxsize:
            Capacity before ``drop_policy`` applies.
        drop_policy:
            ``"block"`` (producers wait up to ``timeout``) or ``"drop"``
            (items are rejected at once when the queue is full).
        timeout:
            Producer wait under the blocking policy; ``None`` waits forever.
        stop_timeout:
            Default deadline for :meth:`stop`.
        diagnostic:
            Optional hook receiving ``queue_*`` milestones.
        """
        policy = drop_policy.lower()
        if policy not in {"block", "drop"}:
            raise ValueError("drop_policy must be 'block' or 'drop'")
        self._drop_policy = policy
        self._worker = worker
        self._timeout = timeout
        self._stop_timeout = stop_timeout
        self._diagnostic = diagnostic
        self._items: queue.Queue[QueueItem | _StopSignal] = queue.Queue(maxsize=maxsize)
        self._idle = threading.Condition()
        self._outstanding = 0
        self._discard = False
        self._worker_failed = False
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def worker_failed(self) -> bool:
        """``True`` once the consumer raised since the last :meth:`start`."""
        return self._worker_failed

    def start(self) -> None:
        if self.running:
            return
        self._discard = False
        self._worker_failed = False
        self._thread = threading.Thread(target=self._consume, name="lib_log_ship-queue", daemon=True)
        self._thread.start()

    def stop(self, *, drain: bool = True, timeout: float | None = None) -> None:
        """Stop the consumer after it processed (or discarded) what is queued.

        With ``drain=False`` pending items are reported as ``queue_dropped``
        instead of reaching the consumer. Raises :class:`RuntimeError` when the thread does not
        finish within the deadline.
        """
        thread = self._thread
        if thread is None:
            return
        limit = self._stop_timeout if timeout is None else timeout
        if not drain:
            self._discard = True
            self._discard_pending()
        try:
            self._items.put(_STOP, timeout=limit)
        except queue.Full:
            self._discard = True
            self._discard_pending()
            self._items.put_nowait(_STOP)
        thread.join(limit)
        if thread.is_alive():
            self._emit_diagnostic("queue_shutdown_timeout", {"timeout": limit})
            raise RuntimeError("Queue worker failed to stop within the allotted timeout")
        self._thread = None

    def put(self, event: LogEvent) -> bool:
        """Enqueue ``event``; ``False`` when the drop policy rejected it."""
        return self._offer(event)

    def request_flush(self) -> bool:
        """Enqueue a flush that runs after every item already queued."""
        return self._offer(FLUSH)

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until every accepted item was consumed; ``False`` on timeout."""
        with self._idle:
            return self._idle.wait_for(lambda: self._outstanding == 0, timeout)

    def _offer(self, item: QueueItem) -> bool:
        self._track(1)
        try:
            if self._drop_policy == "drop":
                self._items.put_nowait(item)
            else:
                self._items.put(item, timeout=self._timeout)
        except queue.Full:
            self._track(-1)
            self._reject(item)
            return False
        return True

    def _track(self, delta: int) -> None:
        with self._idle:
            self._outstanding += delta
            if self._outstanding == 0:
                self._idle.notify_all()

    def _consume(self) -> None:
        while True:
            item = self._items.get()
            if isinstance(item, _StopSignal):
                return
            worker = self._worker
            try:
                if self._discard:
                    self._reject(item)
                elif worker is not None:
                    self._deliver(worker, item)
            finally:
                self._track(-1)

    def _deliver(self, worker: Callable[[QueueItem], None], item: QueueItem) -> None:
        try:
            worker(item)
        except Exception as exc:  # noqa: BLE001
            self._worker_failed = True
            LOGGER.error("Queue worker raised on %r; continuing with the next item", item, exc_info=exc)
            self._emit_diagnostic("queue_worker_error", {"item": repr(item), "exception": repr(exc)})

    def _discard_pending(self) -> None:
        while True:
            try:
                item = self._items.get_nowait()
            except queue.Empty:
                return
            if isinstance(item, _StopSignal):
                continue
            self._reject(item)
            self._track(-1)

    def _reject(self, item: QueueItem) -> None:
        self._emit_diagnostic("queue_dropped", {"item": repr(item)})

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Queue diagnostic hook raised while reporting %s", name, exc_info=exc)


__all__ = ["FLUSH", "FlushRequest", "QueueAdapter", "QueueItem"]
