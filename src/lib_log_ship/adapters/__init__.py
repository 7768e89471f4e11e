"""Adapter implementations for the shipping core ports."""

from __future__ import annotations

from .formatter import TemplateFormatter
from .queue import FLUSH, FlushRequest, QueueAdapter
from .sinks import JournaldSink, RichConsoleSink
from .throttle import THROTTLE_SUMMARY_PREFIX, RepeatThrottle
from .verbose_file import FileVerboseStore

__all__ = [
    "FLUSH",
    "FileVerboseStore",
    "FlushRequest",
    "JournaldSink",
    "QueueAdapter",
    "RepeatThrottle",
    "RichConsoleSink",
    "THROTTLE_SUMMARY_PREFIX",
    "TemplateFormatter",
]
