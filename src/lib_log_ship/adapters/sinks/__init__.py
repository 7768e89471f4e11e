"""Concrete sink adapters."""

from __future__ import annotations

from .console import RichConsoleSink
from .journald import JournaldSink

__all__ = ["JournaldSink", "RichConsoleSink"]
