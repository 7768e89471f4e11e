"""Application use cases orchestrating the shipping pipeline."""

from __future__ import annotations

from .process_event import EventRouter, ProcessResult, build_diagnostic_emitter, create_event_router
from .shutdown import create_shutdown

__all__ = ["EventRouter", "ProcessResult", "build_diagnostic_emitter", "create_event_router", "create_shutdown"]
