"""Configuration state owned by the router.

Purpose
-------
Hold every tunable of the shipping pipeline in one explicit value object so
reconfiguration is a single swap rather than scattered global mutation.

Contents
--------
* Default constants mirrored by :mod:`lib_log_ship.config`.
* :class:`ShipperSettings` dataclass.
* :func:`metadata_matches` evaluating include/exclude metadata rules.

System Role
-----------
Created by the composition root from defaults, environment overrides and
caller options; read by the router on every event.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any

from .classification import DEFAULT_APPLICATION_MARKER
from .levels import LogLevel


DEFAULT_FORMAT = "{date} {time} [{level}] {metadata} {message}"
DEFAULT_BUFFER_SIZE = 8
DEFAULT_MAX_MESSAGE_BYTES = 8 * 1024
DEFAULT_THROTTLE_WINDOW = timedelta(seconds=60)
DEFAULT_THROTTLE_MAX_REPEATS = 3
DEFAULT_VERBOSE_FILE = "/root/verbose.txt"
DEFAULT_EXCLUDE_CONTAINING: tuple[str, ...] = ("SQUASHFS error",)
DEFAULT_IMMEDIATE_CONTAINING: tuple[str, ...] = ("MAIN_SERVICES_CONNECTIONS_SOCKET_HEALTH",)

MetadataRules = Mapping[str, Any]


@dataclass(slots=True, frozen=True)
class ShipperSettings:
    """Immutable snapshot of every pipeline tunable.

    Attributes
    ----------
    level:
        Minimum severity; ``None`` lets everything through.
    format:
        ``str.format`` template handed to the formatter.
    metadata:
        ``"all"`` or the ordered metadata keys rendered into each line.
    metadata_filter / metadata_reject:
        Include/exclude rules evaluated by :func:`metadata_matches`.
    sink:
        Resolved sink object; ``None`` turns every send into a no-op.
    buffer_size:
        Line count that triggers an automatic buffer flush.
    max_message_bytes:
        Byte budget of one combined payload.
    throttle_enabled / throttle_window / throttle_max_repeats:
        Repeat suppression policy.
    throttle_max_entries:
        Optional bound on distinct texts tracked by the throttle.
    verbose_file:
        Location of the persisted verbose flag.
    exclude_message_containing / immediate_send_containing:
        Substring lists driving the classifier.
    application_marker:
        Substring identifying application-origin lines.
    """

    level: LogLevel | None = None
    format: str = DEFAULT_FORMAT
    metadata: str | tuple[str, ...] = ()
    metadata_filter: MetadataRules | None = None
    metadata_reject: MetadataRules | None = None
    sink: Any = None
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_message_bytes: int = DEFAULT_MAX_MESSAGE_BYTES
    throttle_enabled: bool = True
    throttle_window: timedelta = DEFAULT_THROTTLE_WINDOW
    throttle_max_repeats: int = DEFAULT_THROTTLE_MAX_REPEATS
    throttle_max_entries: int | None = None
    verbose_file: str = DEFAULT_VERBOSE_FILE
    exclude_message_containing: tuple[str, ...] = DEFAULT_EXCLUDE_CONTAINING
    immediate_send_containing: tuple[str, ...] = DEFAULT_IMMEDIATE_CONTAINING
    application_marker: str = DEFAULT_APPLICATION_MARKER

    def __post_init__(self) -> None:
        if self.buffer_size < 0 or self.max_message_bytes < 0 or self.throttle_max_repeats < 0:
            raise ValueError("buffer_size, max_message_bytes and throttle_max_repeats must be non-negative")
        if self.throttle_window < timedelta(0):
            raise ValueError("throttle_window must be non-negative")
        if self.throttle_max_entries is not None and self.throttle_max_entries < 1:
            raise ValueError("throttle_max_entries must be positive when set")

    def replace(self, **changes: Any) -> "ShipperSettings":
        """Return a copy with ``changes`` applied."""

        return replace(self, **changes)


def metadata_matches(metadata: Mapping[str, Any], rules: MetadataRules | None) -> bool:
    """Return ``True`` when ``metadata`` satisfies every rule in ``rules``.

    A rule value that is a non-empty list/tuple/set matches when the metadata
    value is one of its members; any other rule value requires equality.
    Missing keys never match.

    Examples
    --------
    >>> metadata_matches({'app': 'fw'}, None)
    True
    >>> metadata_matches({'app': 'fw', 'pid': 3}, {'app': ['fw', 'ui'], 'pid': 3})
    True
    >>> metadata_matches({'pid': 3}, {'app': 'fw'})
    False
    """

    if not rules:
        return True
    for key, expected in rules.items():
        if key not in metadata:
            return False
        actual = metadata[key]
        if isinstance(expected, (list, tuple, set, frozenset)) and expected:
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True


def metadata_selection(value: str | Sequence[str]) -> str | tuple[str, ...]:
    """Normalise the ``metadata`` option into ``"all"`` or a key tuple."""

    if value == "all":
        return "all"
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_EXCLUDE_CONTAINING",
    "DEFAULT_FORMAT",
    "DEFAULT_IMMEDIATE_CONTAINING",
    "DEFAULT_MAX_MESSAGE_BYTES",
    "DEFAULT_THROTTLE_MAX_REPEATS",
    "DEFAULT_THROTTLE_WINDOW",
    "DEFAULT_VERBOSE_FILE",
    "MetadataRules",
    "ShipperSettings",
    "metadata_matches",
    "metadata_selection",
]
