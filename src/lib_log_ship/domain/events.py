"""Domain event describing a single log line produced on the device.

Purpose
-------
Provide an immutable representation of the host framework's log record so
the router never depends on :class:`logging.LogRecord` internals.

Contents
--------
* :class:`LogEvent` dataclass.
* Utility function ``_ensure_aware`` for timestamp validation.

System Role
-----------
Sits in the domain layer; built once by the host adapter and consumed once by
the router, which renders it through the configured formatter.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

from .levels import LogLevel


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


@dataclass(slots=True, frozen=True)
class LogEvent:
    """Immutable log event handed from the host framework to the router.

    Attributes
    ----------
    level:
        :class:`LogLevel` severity associated with the event.
    message:
        Message body as produced by the caller (not yet rendered).
    timestamp:
        Time of the event in timezone-aware UTC.
    metadata:
        Shallow copy of the key/value pairs attached by the host framework.
    logger_name:
        Logical logger emitting the event; informational only.
    """

    level: LogLevel
    message: str
    timestamp: datetime
    metadata: dict[str, Any] = field(default_factory=dict)
    logger_name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        object.__setattr__(self, "metadata", dict(self.metadata))

    def select_metadata(self, keys: str | tuple[str, ...] | list[str]) -> dict[str, Any]:
        """Return the metadata subset that the formatter should render.

        ``"all"`` keeps every entry; otherwise only the listed keys that are
        present are returned, in the listed order.

        Examples
        --------
        >>> from datetime import datetime, timezone
        >>> event = LogEvent(LogLevel.INFO, 'm', datetime(2025, 1, 1, tzinfo=timezone.utc), {'a': 1, 'b': 2})
        >>> event.select_metadata(['b', 'missing', 'a'])
        {'b': 2, 'a': 1}
        >>> event.select_metadata('all') == {'a': 1, 'b': 2}
        True
        """

        if keys == "all":
            return dict(self.metadata)
        return {key: self.metadata[key] for key in keys if key in self.metadata}

    def replace(self, **changes: Any) -> "LogEvent":
        """Return a copied event with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogEvent"]
