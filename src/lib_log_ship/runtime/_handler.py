"""Stdlib :mod:`logging` integration.

Purpose
-------
Plug the shipping core into the host logging framework as a regular
:class:`logging.Handler`. The handler only translates records into
:class:`LogEvent` values and forwards them; every decision lives in the
router.

Contents
--------
* :func:`event_from_record` – ``LogRecord`` → :class:`LogEvent`.
* :class:`ShipperHandler` – the handler itself.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable

from lib_log_ship.domain import LogEvent, LogLevel

_OWN_LOGGER_PREFIX = "lib_log_ship"
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}
_EXCEPTION_FORMATTER = logging.Formatter()


def event_from_record(record: logging.LogRecord) -> LogEvent:
    """Build a :class:`LogEvent` from ``record``.

    Standard call-site fields are exposed as metadata (``logger``,
    ``module``, ``function``, ``line``, ``pid``, ``thread``) alongside every
    ``extra=`` attribute the caller attached. Exception tracebacks are appended
    to the message body.
    """

    message = record.getMessage()
    if record.exc_info:
        message = f"{message}\n{_EXCEPTION_FORMATTER.formatException(record.exc_info)}"
    metadata: dict[str, Any] = {
        "logger": record.name,
        "module": record.module,
        "function": record.funcName,
        "line": record.lineno,
        "pid": record.process,
        "thread": record.threadName,
    }
    for key, value in record.__dict__.items():
        if key not in _RESERVED_ATTRS and not key.startswith("_"):
            metadata[key] = value
    return LogEvent(
        level=LogLevel.from_python_level(record.levelno),
        message=message,
        timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc),
        metadata=metadata,
        logger_name=record.name,
    )


def _default_dispatch(event: LogEvent) -> None:
    from ._state import current_runtime, is_initialised

    if is_initialised():
        current_runtime().process(event)


def _default_flush() -> None:
    from ._state import current_runtime, is_initialised

    if is_initialised():
        current_runtime().request_flush()


class ShipperHandler(logging.Handler):
    """Forward log records to the shipping runtime.

    Records emitted by this package's own loggers are skipped so internal
    warnings (sink failures, bad configuration) never feed back into the
    pipeline that produced them.
    """

    def __init__(
        self,
        level: int = logging.NOTSET,
        *,
        dispatch: Callable[[LogEvent], Any] | None = None,
        flush_request: Callable[[], Any] | None = None,
    ) -> None:
        super().__init__(level)
        self._dispatch = dispatch or _default_dispatch
        self._flush_request = flush_request or _default_flush

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return
        try:
            self._dispatch(event_from_record(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)

    def flush(self) -> None:
        """Ship whatever the buffers hold (explicit flush)."""
        try:
            self._flush_request()
        except Exception:  # noqa: BLE001
            logging.getLogger(__name__).warning("Explicit flush failed", exc_info=True)


__all__ = ["ShipperHandler", "event_from_record"]
