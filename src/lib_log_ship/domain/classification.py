"""Classification of rendered log lines.

Purpose
-------
Decide, from the rendered text alone, whether a line is dropped, shipped
immediately, and which destination buffer it belongs to.

Contents
--------
* :class:`Destination` enum (application vs system origin).
* :class:`Classification` result value.
* :func:`classify` and :func:`contains_any` helpers.

System Role
-----------
First decision point of the router; an excluded line never reaches the
throttle or the batch buffers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


DEFAULT_APPLICATION_MARKER = "In2Firmware"
"""Substring identifying lines written by the device firmware itself."""


class Destination(Enum):
    """Destination category of a shipped line."""

    APPLICATION = "application"
    SYSTEM = "system"


@dataclass(slots=True, frozen=True)
class Classification:
    """Outcome of :func:`classify` for one rendered line."""

    excluded: bool
    immediate: bool
    destination: Destination


def contains_any(text: str, patterns: Iterable[str] | None) -> bool:
    """Return ``True`` when ``text`` contains any non-empty entry of ``patterns``.

    Examples
    --------
    >>> contains_any('disk SQUASHFS error', ['SQUASHFS error'])
    True
    >>> contains_any('all good', ['', 'boom'])
    False
    >>> contains_any('anything', None)
    False
    """

    if not patterns:
        return False
    return any(pattern and pattern in text for pattern in patterns)


def classify(
    text: str,
    *,
    exclude: Iterable[str] | None,
    immediate: Iterable[str] | None,
    application_marker: str = DEFAULT_APPLICATION_MARKER,
) -> Classification:
    """Classify ``text`` against the exclude/immediate substring lists.

    Examples
    --------
    >>> result = classify('In2Firmware boot', exclude=['SQUASHFS'], immediate=['HEALTH'])
    >>> result.excluded, result.immediate, result.destination.value
    (False, False, 'application')
    >>> classify('kernel HEALTH ping', exclude=[], immediate=['HEALTH']).immediate
    True
    """

    destination = Destination.APPLICATION if application_marker and application_marker in text else Destination.SYSTEM
    return Classification(
        excluded=contains_any(text, exclude),
        immediate=contains_any(text, immediate),
        destination=destination,
    )


__all__ = [
    "Classification",
    "DEFAULT_APPLICATION_MARKER",
    "Destination",
    "classify",
    "contains_any",
]
