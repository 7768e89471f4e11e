"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

import sys
from typing import Callable

name = "lib_log_ship"
title = "Filter, throttle and batch device log lines before shipping them"
version = "0.1.0"
shell_command = "lib_log_ship"


def print_info(writer: Callable[[str], object] | None = None) -> None:
    """Emit the metadata banner one line at a time through ``writer`` (stdout by default)."""

    if writer is None:
        writer = sys.stdout.write

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    writer(f"Info for {name}:\n\n")
    for label, value in fields:
        writer(f"    {label:<{pad}} = {value}\n")


def summary_info() -> str:
    """Return the metadata banner as one string ending with a newline."""

    lines: list[str] = []
    print_info(writer=lines.append)
    return "".join(lines)


__all__ = ["print_info", "summary_info"]
