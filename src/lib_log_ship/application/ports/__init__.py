"""Application-layer ports (Protocols) implemented by adapters."""

from __future__ import annotations

from .formatter import FormatterPort
from .queue import QueuePort
from .sink import SinkPort, SystemSinkPort, supports_system_logs
from .throttle import ThrottlePort
from .time import ClockPort, IdProvider
from .verbose_store import VerboseStorePort

__all__ = [
    "ClockPort",
    "FormatterPort",
    "IdProvider",
    "QueuePort",
    "SinkPort",
    "SystemSinkPort",
    "ThrottlePort",
    "VerboseStorePort",
    "supports_system_logs",
]
