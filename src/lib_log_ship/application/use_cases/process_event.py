"""Use case routing a single log event to drop, immediate send, or a batch.

Purpose
-------
Tie together classification, repeat throttling, verbose passthrough and the
per-destination batch buffers so every event takes exactly one path: dropped,
suppressed, sent at once, or buffered until a threshold or explicit flush.

Contents
--------
* :func:`build_diagnostic_emitter` – guarded wrapper around the diagnostic hook.
* :class:`EventRouter` – the stateful router owning buffers, throttle, settings.
* :func:`create_event_router` – factory used by the composition root.

System Role
-----------
Application-layer orchestrator invoked by :mod:`lib_log_ship.runtime`. It is
the only place that mutates buffers, throttle state, and the verbose flag, and
it serialises all of that behind one re-entrant lock.

Alignment Notes
---------------
Outcome labels returned by :meth:`EventRouter.handle` match the diagnostic
event names so hooks and return values stay traceable.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any

from lib_log_ship.application.ports import (
    ClockPort,
    FormatterPort,
    IdProvider,
    ThrottlePort,
    VerboseStorePort,
    supports_system_logs,
)
from lib_log_ship.domain import (
    BatchBuffer,
    Destination,
    LogEvent,
    ShipperSettings,
    classify,
    metadata_matches,
    truncate_payload,
)

logger = logging.getLogger(__name__)

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
ProcessResult = dict[str, Any]


def build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Callable[[str, dict[str, Any]], None]:
    """Return an emitter that never lets hook failures escape.

    Examples
    --------
    >>> seen = []
    >>> emit = build_diagnostic_emitter(lambda name, payload: seen.append(name))
    >>> emit('sent', {})
    >>> seen
    ['sent']
    >>> build_diagnostic_emitter(None)('sent', {}) is None
    True
    """

    if diagnostic is None:

        def _noop(name: str, payload: dict[str, Any]) -> None:
            return None

        return _noop

    def _emit(name: str, payload: dict[str, Any]) -> None:
        try:
            diagnostic(name, payload)
        except Exception as exc:  # noqa: BLE001
            logger.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)

    return _emit


def _result(outcome: str, *, ok: bool = True, **extra: Any) -> ProcessResult:
    return {"ok": ok, "outcome": outcome, **extra}


class EventRouter:
    """Route rendered log lines to the sink, one event at a time.

    Every public method takes the same lock, so reconfiguration, verbose
    toggles, and explicit flushes interleave with event processing but never
    overlap it.
    """

    def __init__(
        self,
        *,
        settings: ShipperSettings,
        formatter: FormatterPort,
        throttle: ThrottlePort,
        clock: ClockPort,
        id_provider: IdProvider,
        verbose_store: VerboseStorePort,
        verbose: bool,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._lock = threading.RLock()
        self._settings = settings
        self._formatter = formatter
        self._throttle = throttle
        self._clock = clock
        self._id_provider = id_provider
        self._verbose_store = verbose_store
        self._verbose = verbose
        self._emit = build_diagnostic_emitter(diagnostic)
        self._buffers = {
            Destination.APPLICATION: BatchBuffer(threshold=settings.buffer_size),
            Destination.SYSTEM: BatchBuffer(threshold=settings.buffer_size),
        }

    @property
    def settings(self) -> ShipperSettings:
        return self._settings

    @property
    def verbose(self) -> bool:
        return self._verbose

    def pending(self, destination: Destination) -> list[str]:
        """Return the lines currently buffered for ``destination``."""

        with self._lock:
            return self._buffers[destination].snapshot()

    def tracked_texts(self) -> int:
        """Return how many distinct texts the throttle is tracking."""

        with self._lock:
            return len(self._throttle)

    def handle(self, event: LogEvent) -> ProcessResult:
        """Process ``event``; never raises.

        Returns
        -------
        dict
            ``{"ok": bool, "outcome": str}`` where ``outcome`` is one of
            ``rejected``, ``excluded``, ``throttled``, ``immediate``,
            ``verbose``, ``buffered``, ``flushed`` or ``failed``.
        """

        with self._lock:
            try:
                return self._process(event)
            except Exception as exc:  # noqa: BLE001
                logger.error("Log event processing failed; dropping event", exc_info=exc)
                self._emit("failed", {"logger": event.logger_name, "exception": repr(exc)})
                return _result("failed", ok=False)

    def flush(self) -> ProcessResult:
        """Drain both buffers unconditionally; empty buffers send nothing."""

        with self._lock:
            shipped = 0
            for destination, buffer in self._buffers.items():
                payload = buffer.drain()
                if payload is None:
                    continue
                self._ship(destination, payload, reason="explicit")
                shipped += 1
            return _result("flushed", payloads=shipped)

    def reconfigure(self, settings: ShipperSettings, *, verbose_store: VerboseStorePort | None = None) -> None:
        """Swap in ``settings``; pending lines and throttle counters survive."""

        with self._lock:
            self._settings = settings
            for buffer in self._buffers.values():
                buffer.threshold = settings.buffer_size
            self._throttle.configure(
                enabled=settings.throttle_enabled,
                window=settings.throttle_window,
                max_repeats=settings.throttle_max_repeats,
                max_entries=settings.throttle_max_entries,
            )
            if verbose_store is not None:
                self._verbose_store = verbose_store

    def set_verbose(self, verbose: bool) -> None:
        """Toggle verbose mode and persist it; persistence is best effort."""

        with self._lock:
            self._verbose = bool(verbose)
            try:
                written = self._verbose_store.write(self._verbose)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Verbose flag store raised while writing", exc_info=exc)
                written = False
            if not written:
                logger.warning("Verbose flag could not be persisted; keeping in-memory value %s", self._verbose)

    def _process(self, event: LogEvent) -> ProcessResult:
        settings = self._settings
        if not self._accepts(event, settings):
            self._emit("rejected", {"logger": event.logger_name, "level": event.level.severity})
            return _result("rejected")

        text = self._render(event, settings)
        classification = classify(
            text,
            exclude=settings.exclude_message_containing,
            immediate=settings.immediate_send_containing,
            application_marker=settings.application_marker,
        )
        if classification.excluded:
            self._emit("excluded", {"logger": event.logger_name})
            return _result("excluded")

        if classification.immediate:
            self._send(Destination.APPLICATION, text)
            return _result("immediate")

        if not self._throttle.should_send(text, self._clock.now()):
            self._emit("throttled", {"logger": event.logger_name})
            return _result("throttled")

        if self._verbose:
            self._send(classification.destination, text)
            return _result("verbose")

        payload = self._buffers[classification.destination].append(text)
        if payload is None:
            self._emit("buffered", {"destination": classification.destination.value})
            return _result("buffered")
        self._ship(classification.destination, payload, reason="threshold")
        return _result("flushed", payloads=1)

    @staticmethod
    def _accepts(event: LogEvent, settings: ShipperSettings) -> bool:
        if not event.level.at_least(settings.level):
            return False
        if not metadata_matches(event.metadata, settings.metadata_filter):
            return False
        if settings.metadata_reject and metadata_matches(event.metadata, settings.metadata_reject):
            return False
        return True

    def _render(self, event: LogEvent, settings: ShipperSettings) -> str:
        return self._formatter(
            settings.format,
            event.level,
            event.message,
            event.timestamp,
            event.select_metadata(settings.metadata),
        )

    def _ship(self, destination: Destination, payload: str, *, reason: str) -> None:
        combined = truncate_payload(payload, self._settings.max_message_bytes)
        self._emit(
            "flushed",
            {"destination": destination.value, "reason": reason, "truncated": combined != payload},
        )
        self._send(destination, combined)

    def _send(self, destination: Destination, text: str) -> bool:
        sink = self._settings.sink
        if sink is None:
            return False
        try:
            if destination is Destination.APPLICATION:
                sink.send_application_log(text, self._id_provider())
            elif supports_system_logs(sink):
                sink.send_system_log(text)
            else:
                self._emit("system_sink_missing", {"bytes": len(text.encode("utf-8"))})
                return False
        except Exception as exc:  # noqa: BLE001
            logger.warning("Sink raised while sending %s payload; dropping it", destination.value, exc_info=exc)
            self._emit("sink_error", {"destination": destination.value, "exception": repr(exc)})
            return False
        self._emit("sent", {"destination": destination.value})
        return True


def create_event_router(
    *,
    settings: ShipperSettings,
    formatter: FormatterPort,
    throttle: ThrottlePort,
    clock: ClockPort,
    id_provider: IdProvider,
    verbose_store: VerboseStorePort,
    verbose: bool | None = None,
    diagnostic: DiagnosticHook = None,
) -> EventRouter:
    """Build the router, reading the persisted verbose flag once.

    Parameters
    ----------
    settings:
        Initial :class:`ShipperSettings`.
    formatter:
        Callable rendering events into text.
    throttle:
        Adapter implementing :class:`ThrottlePort`.
    clock:
        Time source used for throttle windows.
    id_provider:
        Generator of correlation identifiers for application sends.
    verbose_store:
        Durable store of the verbose flag.
    verbose:
        Explicit initial flag; ``None`` reads it from ``verbose_store``.
    diagnostic:
        Optional callback receiving pipeline milestones.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_ship.domain import LogLevel
    >>> class Sink:
    ...     def __init__(self):
    ...         self.sent = []
    ...     def send_application_log(self, text, correlation_id):
    ...         self.sent.append(text)
    ...     def send_system_log(self, text):
    ...         self.sent.append(text)
    >>> class Store:
    ...     def read(self):
    ...         return False
    ...     def write(self, value):
    ...         return True
    >>> class Throttle:
    ...     def should_send(self, text, now):
    ...         return True
    ...     def configure(self, **limits):
    ...         pass
    ...     def reset(self):
    ...         pass
    ...     def __len__(self):
    ...         return 0
    >>> class Clock:
    ...     def now(self):
    ...         return datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> sink = Sink()
    >>> router = create_event_router(
    ...     settings=ShipperSettings(sink=sink, buffer_size=2),
    ...     formatter=lambda template, level, message, timestamp, metadata: message,
    ...     throttle=Throttle(),
    ...     clock=Clock(),
    ...     id_provider=lambda: 'id',
    ...     verbose_store=Store(),
    ... )
    >>> ts = datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> router.handle(LogEvent(LogLevel.INFO, 'a', ts))['outcome']
    'buffered'
    >>> router.handle(LogEvent(LogLevel.INFO, 'b', ts))['outcome']
    'flushed'
    >>> sink.sent
    ['a\\nb']
    """

    if verbose is None:
        try:
            verbose = bool(verbose_store.read())
        except Exception as exc:  # noqa: BLE001
            logger.warning("Verbose flag store raised while reading; defaulting to False", exc_info=exc)
            verbose = False
    throttle.configure(
        enabled=settings.throttle_enabled,
        window=settings.throttle_window,
        max_repeats=settings.throttle_max_repeats,
        max_entries=settings.throttle_max_entries,
    )
    return EventRouter(
        settings=settings,
        formatter=formatter,
        throttle=throttle,
        clock=clock,
        id_provider=id_provider,
        verbose_store=verbose_store,
        verbose=verbose,
        diagnostic=diagnostic,
    )


__all__ = ["EventRouter", "ProcessResult", "build_diagnostic_emitter", "create_event_router"]
