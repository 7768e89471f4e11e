"""Count-bounded batch buffer and byte-budget truncation.

Purpose
-------
Accumulate rendered lines for one destination category and turn them into a
single newline-joined payload that never exceeds the configured byte budget.

Contents
--------
* :class:`BatchBuffer` with threshold-triggered and explicit draining.
* :func:`truncate_payload` keeping the newest bytes on UTF-8 boundaries.
* :data:`TRUNCATION_MARKER` appended whenever bytes were discarded.

System Role
-----------
The router owns one buffer per :class:`~lib_log_ship.domain.classification.Destination`
and hands the drained payload to the sink matching that category.
"""

from __future__ import annotations

from typing import Iterator


TRUNCATION_MARKER = "...[truncated]"
LINE_SEPARATOR = "\n"


def _is_continuation_byte(value: int) -> bool:
    return value & 0xC0 == 0x80


def truncate_payload(text: str, max_bytes: int, marker: str = TRUNCATION_MARKER) -> str:
    """Bound ``text`` to ``max_bytes`` UTF-8 bytes, discarding the oldest bytes.

    The kept portion is a suffix of ``text`` followed by ``marker``. The cut
    point is moved forward to the next character boundary so no multi-byte
    character is split. When the budget cannot even hold the marker, the
    longest marker prefix that fits is returned.

    Examples
    --------
    >>> truncate_payload('short', 100)
    'short'
    >>> truncate_payload('0123456789abcdefghij', 18)
    'ghij...[truncated]'
    >>> out = truncate_payload('é' * 10, 17)
    >>> out, len(out.encode('utf-8')) <= 17
    ('é...[truncated]', True)
    """

    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    marker_bytes = marker.encode("utf-8")
    keep = max_bytes - len(marker_bytes)
    if keep <= 0:
        return marker_bytes[: max(max_bytes, 0)].decode("utf-8", errors="ignore")
    tail = encoded[len(encoded) - keep :]
    start = 0
    while start < len(tail) and _is_continuation_byte(tail[start]):
        start += 1
    return tail[start:].decode("utf-8") + marker


class BatchBuffer:
    """Ordered list of pending lines flushed once ``threshold`` is reached.

    Examples
    --------
    >>> buffer = BatchBuffer(threshold=3)
    >>> buffer.append('one') is None, buffer.append('two') is None
    (True, True)
    >>> buffer.append('three')
    'one\\ntwo\\nthree'
    >>> len(buffer), buffer.drain()
    (0, None)
    """

    def __init__(self, *, threshold: int) -> None:
        self._lines: list[str] = []
        self._threshold = 1
        self.threshold = threshold

    @property
    def threshold(self) -> int:
        """Return the line count that triggers an automatic drain."""

        return self._threshold

    @threshold.setter
    def threshold(self, value: int) -> None:
        self._threshold = max(1, int(value))

    def append(self, line: str) -> str | None:
        """Queue ``line``; return the joined payload when the threshold is hit."""

        self._lines.append(line)
        if len(self._lines) >= self._threshold:
            return self.drain()
        return None

    def drain(self) -> str | None:
        """Join and clear pending lines; ``None`` when nothing is pending."""

        if not self._lines:
            return None
        pending, self._lines = self._lines, []
        return LINE_SEPARATOR.join(pending)

    def snapshot(self) -> list[str]:
        """Return a copy of the pending lines in arrival order."""

        return list(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._lines))

    def __len__(self) -> int:
        return len(self._lines)


__all__ = ["BatchBuffer", "LINE_SEPARATOR", "TRUNCATION_MARKER", "truncate_payload"]
