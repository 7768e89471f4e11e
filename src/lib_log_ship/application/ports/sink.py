"""Sink ports describing the outbound transport boundary.

Purpose
-------
Let the router hand finished payloads to whatever object moves bytes off the
device without knowing how it does so.

Contents
--------
* :class:`SinkPort` – required application-log capability.
* :class:`SystemSinkPort` – optional system-log capability.
* :func:`supports_system_logs` – capability probe used at send time.

System Role
-----------
Sinks are resolved once at configuration time and stored in
:class:`~lib_log_ship.domain.settings.ShipperSettings`; the router never looks
them up per call.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SinkPort(Protocol):
    """Deliver application-origin payloads to the remote collector."""

    def send_application_log(self, text: str, correlation_id: str) -> None:
        """Ship ``text`` tagged with the short ``correlation_id``."""


@runtime_checkable
class SystemSinkPort(Protocol):
    """Optional capability for system-origin payloads."""

    def send_system_log(self, text: str) -> None:
        """Ship a system-origin ``text`` payload."""


def supports_system_logs(sink: Any) -> bool:
    """Return ``True`` when ``sink`` implements ``send_system_log``.

    Examples
    --------
    >>> class AppOnly:
    ...     def send_application_log(self, text, correlation_id):
    ...         pass
    >>> supports_system_logs(AppOnly())
    False
    >>> supports_system_logs(None)
    False
    """

    return sink is not None and callable(getattr(sink, "send_system_log", None))


__all__ = ["SinkPort", "SystemSinkPort", "supports_system_logs"]
