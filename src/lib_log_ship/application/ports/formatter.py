"""Port for rendering log events into shipped text."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from lib_log_ship.domain.levels import LogLevel


@runtime_checkable
class FormatterPort(Protocol):
    """Pure function turning event fields into a single rendered line."""

    def __call__(
        self,
        template: str,
        level: LogLevel,
        message: str,
        timestamp: datetime,
        metadata: Mapping[str, Any],
    ) -> str: ...


__all__ = ["FormatterPort"]
