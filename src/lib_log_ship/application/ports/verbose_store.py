"""Port for the persisted verbose flag."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class VerboseStorePort(Protocol):
    """Read and write the boolean verbose flag kept on durable storage."""

    def read(self) -> bool:
        """Return the stored flag; absence or read failure yields ``False``."""

    def write(self, value: bool) -> bool:
        """Persist ``value``; return ``False`` when the write failed."""


__all__ = ["VerboseStorePort"]
