"""Log level abstraction shared by the host adapter and the router.

Purpose
-------
Offer a domain-specific representation of log severities that maps cleanly to
the stdlib :mod:`logging` integers so minimum-level filtering stays a simple
numeric comparison.

Contents
--------
* :class:`LogLevel` enum with conversion helpers.

System Role
-----------
Used by :class:`lib_log_ship.runtime.ShipperHandler` to evaluate the
configured minimum level and by the formatter to render the ``[level]``
field of each shipped line.
"""

from __future__ import annotations

import logging
from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels used throughout the system."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50

    @property
    def severity(self) -> str:
        """Return the lowercase severity name used in rendered lines."""

        return self.name.lower()

    def to_python_level(self) -> int:
        """Return the :mod:`logging` constant matching this level."""

        return getattr(logging, self.name)

    def at_least(self, threshold: "LogLevel | None") -> bool:
        """Return ``True`` when this level passes ``threshold``.

        Examples
        --------
        >>> LogLevel.ERROR.at_least(LogLevel.WARNING)
        True
        >>> LogLevel.DEBUG.at_least(None)
        True
        """

        return threshold is None or self.value >= threshold.value

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging level integer into :class:`LogLevel`.

        Custom levels between the named constants round down to the nearest
        known severity so third-party levels (e.g. ``NOTICE=25``) still pass
        through the minimum-level check.
        """
        for candidate in reversed(list(cls)):
            if level >= candidate.value:
                return candidate
        return cls.DEBUG

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` corresponding to ``level`` exactly."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc


__all__ = ["LogLevel"]
