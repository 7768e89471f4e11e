"""Domain entities and value objects used by the shipping core."""

from __future__ import annotations

from .batch_buffer import TRUNCATION_MARKER, BatchBuffer, truncate_payload
from .classification import Classification, Destination, classify
from .events import LogEvent
from .levels import LogLevel
from .settings import ShipperSettings, metadata_matches

__all__ = [
    "BatchBuffer",
    "Classification",
    "Destination",
    "LogEvent",
    "LogLevel",
    "ShipperSettings",
    "TRUNCATION_MARKER",
    "classify",
    "metadata_matches",
    "truncate_payload",
]
