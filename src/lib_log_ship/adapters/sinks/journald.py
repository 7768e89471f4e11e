"""Journald sink shipping payloads to systemd-journald.

Purpose
-------
On devices whose collector tails the local journal, send batched payloads
there as structured entries tagged with their destination category.

Contents
--------
* :class:`JournaldSink` - implements both sink capabilities.
"""

from __future__ import annotations

from typing import Any, Callable

from lib_log_ship.application.ports.sink import SinkPort, SystemSinkPort

Sender = Callable[..., None]

_PRIORITY_INFO = 6


def _default_sender(**fields: Any) -> None:  # pragma: no cover - depends on systemd
    """Proxy to :func:`systemd.journal.send`, raising if unavailable."""
    try:
        from systemd import journal
    except ImportError as exc:  # pragma: no cover - executed only when systemd missing
        raise RuntimeError("systemd.journal is not available") from exc
    journal.send(**fields)


class JournaldSink(SinkPort, SystemSinkPort):
    """Emit payloads via ``systemd.journal.send`` (or a supplied sender).

    Examples
    --------
    >>> sent = []
    >>> sink = JournaldSink(sender=lambda **fields: sent.append(fields))
    >>> sink.send_application_log('boot ok', 'abc')
    >>> sent[0]['MESSAGE'], sent[0]['CORRELATION_ID'], sent[0]['DESTINATION']
    ('boot ok', 'abc', 'application')
    """

    def __init__(self, *, sender: Sender | None = None, identifier: str = "lib_log_ship") -> None:
        self._sender = sender or _default_sender
        self._identifier = identifier

    def send_application_log(self, text: str, correlation_id: str) -> None:
        self._sender(**self._build_fields(text, "application", CORRELATION_ID=correlation_id))

    def send_system_log(self, text: str) -> None:
        self._sender(**self._build_fields(text, "system"))

    def _build_fields(self, text: str, destination: str, **extra: Any) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "MESSAGE": text,
            "PRIORITY": _PRIORITY_INFO,
            "SYSLOG_IDENTIFIER": self._identifier,
            "DESTINATION": destination,
            "LINES": text.count("\n") + 1,
        }
        fields.update(extra)
        return fields


__all__ = ["JournaldSink"]
