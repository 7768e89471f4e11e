"""File-backed store for the persisted verbose flag.

Purpose
-------
Keep the verbose toggle across restarts as the literal text ``true`` or
``false`` in a single file, matching what device tooling writes by hand.

Contents
--------
* :class:`FileVerboseStore` – concrete :class:`VerboseStorePort`.

System Role
-----------
Read once by the composition root at start-up and written on every toggle.
Failures never propagate: reads fall back to ``False`` and writes report
``False``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from lib_log_ship.application.ports.verbose_store import VerboseStorePort


LOGGER = logging.getLogger(__name__)


class FileVerboseStore(VerboseStorePort):
    """Persist the verbose flag in a text file.

    Examples
    --------
    >>> import tempfile, pathlib
    >>> target = pathlib.Path(tempfile.mkdtemp()) / 'verbose.txt'
    >>> store = FileVerboseStore(target)
    >>> store.read()
    False
    >>> store.write(True)
    True
    >>> target.read_text()
    'true'
    >>> store.read()
    True
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> bool:
        """Return ``True`` only when the file holds ``true`` (whitespace ignored)."""
        try:
            content = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return False
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("Could not read verbose flag from %s", self._path, exc_info=exc)
            return False
        return content.strip() == "true"

    def write(self, value: bool) -> bool:
        """Write ``true``/``false``; return ``False`` when the file is unwritable."""
        try:
            self._path.write_text("true" if value else "false", encoding="utf-8")
        except OSError as exc:
            LOGGER.warning("Could not persist verbose flag to %s", self._path, exc_info=exc)
            return False
        return True


__all__ = ["FileVerboseStore"]
