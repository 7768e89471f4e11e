"""Public package surface of the log shipping core.

Hosts normally only need :func:`init`, :func:`attach` and :func:`flush`;
the remaining names are exported for tests, custom hosts, and the CLI.
"""

from __future__ import annotations

from .domain import Destination, LogEvent, LogLevel, ShipperSettings
from .runtime import (
    RuntimeSnapshot,
    ShipperHandler,
    attach,
    configure,
    flush,
    handle,
    init,
    inspect_runtime,
    is_initialised,
    set_verbose,
    shutdown,
)

__all__ = [
    "Destination",
    "LogEvent",
    "LogLevel",
    "RuntimeSnapshot",
    "ShipperHandler",
    "ShipperSettings",
    "attach",
    "configure",
    "flush",
    "handle",
    "init",
    "inspect_runtime",
    "is_initialised",
    "set_verbose",
    "shutdown",
]
