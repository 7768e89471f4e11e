"""Rich-powered console sink.

Purpose
-------
Show shipped payloads on a terminal instead of a remote collector, used by
the ``replay`` CLI command and handy when bringing up a device by hand.

Contents
--------
* :data:`_STYLE_MAP` - default destination-to-style mapping.
* :class:`RichConsoleSink` - implements both sink capabilities.
"""

from __future__ import annotations

from typing import Mapping

from rich.console import Console

from lib_log_ship.application.ports.sink import SinkPort, SystemSinkPort
from lib_log_ship.domain.classification import Destination


_STYLE_MAP: Mapping[Destination, str] = {
    Destination.APPLICATION: "cyan",
    Destination.SYSTEM: "dim",
}


class RichConsoleSink(SinkPort, SystemSinkPort):
    """Print application and system payloads with Rich.

    Examples
    --------
    >>> from io import StringIO
    >>> console = Console(file=StringIO(), record=True, width=120)
    >>> sink = RichConsoleSink(console=console, colorize=False)
    >>> sink.send_application_log('boot ok', 'abc')
    >>> sink.send_system_log('kernel up')
    >>> text = console.export_text()
    >>> 'application abc' in text and 'kernel up' in text
    True
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        colorize: bool = True,
        styles: Mapping[Destination, str] | None = None,
    ) -> None:
        self._console = console if console is not None else Console(no_color=not colorize)
        self._colorize = colorize
        self._styles = {**_STYLE_MAP, **(styles or {})}
        self.payloads = 0

    def send_application_log(self, text: str, correlation_id: str) -> None:
        self._print(Destination.APPLICATION, f"application {correlation_id}", text)

    def send_system_log(self, text: str) -> None:
        self._print(Destination.SYSTEM, "system", text)

    def _print(self, destination: Destination, header: str, text: str) -> None:
        self.payloads += 1
        style = self._styles[destination] if self._colorize else ""
        self._console.print(f"--- {header} ---", style="bold" if self._colorize else "", highlight=False)
        self._console.print(text, style=style, highlight=False, markup=False)


__all__ = ["RichConsoleSink"]
