"""Template formatter rendering log events into shipped lines.

Why
---
The router treats rendering as an external pure function. This adapter is the
default implementation: it exposes one set of ``str.format`` placeholders so
the configured template, the CLI replay command, and the tests all rely on
the same data contract.

Contents
--------
* :func:`build_format_payload` – placeholder values for one event.
* :func:`render_metadata` – ``key=value`` rendering of selected metadata.
* :class:`TemplateFormatter` – callable implementing :class:`FormatterPort`.

System Role
-----------
Bridges the domain model with the text payload format. Lines are plain text;
the newline separating batched lines is added by the batch buffer, not here.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from lib_log_ship.application.ports.formatter import FormatterPort
from lib_log_ship.domain.levels import LogLevel
from lib_log_ship.domain.settings import DEFAULT_FORMAT


LOGGER = logging.getLogger(__name__)


def render_metadata(metadata: Mapping[str, Any]) -> str:
    """Render ``metadata`` as space-separated ``key=value`` pairs.

    Examples
    --------
    >>> render_metadata({'pid': 12, 'app': 'fw'})
    'pid=12 app=fw'
    >>> render_metadata({})
    ''
    """

    return " ".join(f"{key}={value}" for key, value in metadata.items())


def build_format_payload(
    level: LogLevel,
    message: str,
    timestamp: datetime,
    metadata: Mapping[str, Any],
) -> dict[str, Any]:
    """Return the mapping of placeholders exposed to format templates."""

    millis = timestamp.microsecond // 1000
    return {
        "timestamp": timestamp.isoformat(),
        "date": f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d}",
        "time": f"{timestamp.hour:02d}:{timestamp.minute:02d}:{timestamp.second:02d}.{millis:03d}",
        "level": level.severity,
        "LEVEL": level.severity.upper(),
        "message": message,
        "metadata": render_metadata(metadata),
    }


class TemplateFormatter(FormatterPort):
    """Render events through ``str.format`` templates.

    Templates that reference unknown placeholders or are otherwise malformed
    fall back to :data:`DEFAULT_FORMAT`, so a bad template degrades the output
    rather than dropping every line.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> fmt = TemplateFormatter()
    >>> ts = datetime(2025, 9, 30, 12, 0, 1, tzinfo=timezone.utc)
    >>> fmt('{date} {time} [{level}] {metadata} {message}', LogLevel.INFO, 'ready', ts, {'app': 'fw'})
    '2025-09-30 12:00:01.000 [info] app=fw ready'
    >>> fmt('{nope}', LogLevel.ERROR, 'boom', ts, {})
    '2025-09-30 12:00:01.000 [error]  boom'
    """

    def __call__(
        self,
        template: str,
        level: LogLevel,
        message: str,
        timestamp: datetime,
        metadata: Mapping[str, Any],
    ) -> str:
        payload = build_format_payload(level, message, timestamp, metadata)
        try:
            return template.format(**payload)
        except (KeyError, IndexError, ValueError, AttributeError) as exc:
            LOGGER.warning("Invalid log template %r; using the default template", template, exc_info=exc)
            return DEFAULT_FORMAT.format(**payload)


__all__ = ["TemplateFormatter", "build_format_payload", "render_metadata"]
