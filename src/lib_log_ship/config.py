"""Configuration helpers: option coercion, environment overrides, ``.env``.

Purpose
-------
Translate loosely typed caller options (keyword arguments, environment
variables, a nearby ``.env`` file) into a validated
:class:`~lib_log_ship.domain.settings.ShipperSettings`.

Contents
--------
* :func:`coerce_options` – options mapping → settings, never raising.
* :func:`env_overrides` – ``LOG_SHIP_*`` variables → options mapping.
* :func:`resolve_sink` – sink strategy resolution (object, class, import path).
* :func:`enable_dotenv` / :func:`should_use_dotenv` – python-dotenv support.

System Role
-----------
Malformed or missing values fall back to documented defaults with a warning,
so a bad configuration degrades the pipeline instead of stopping it.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import timedelta
from importlib import import_module
from pathlib import Path
from typing import Any, Callable

from dotenv import find_dotenv, load_dotenv

from lib_log_ship.domain.levels import LogLevel
from lib_log_ship.domain.settings import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_EXCLUDE_CONTAINING,
    DEFAULT_FORMAT,
    DEFAULT_IMMEDIATE_CONTAINING,
    DEFAULT_MAX_MESSAGE_BYTES,
    DEFAULT_THROTTLE_MAX_REPEATS,
    DEFAULT_THROTTLE_WINDOW,
    DEFAULT_VERBOSE_FILE,
    ShipperSettings,
    metadata_selection,
)
from lib_log_ship.domain.classification import DEFAULT_APPLICATION_MARKER

LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "LIB_LOG_SHIP_USE_DOTENV"
ENV_PREFIX = "LOG_SHIP_"
_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOADED: Path | None = None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is enabled; an explicit flag wins.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value='1')
    True
    >>> should_use_dotenv(explicit=False, env_value='1')
    False
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` file without overriding existing variables.

    Returns the resolved path of the loaded file, or ``None`` when no file was
    found. Subsequent calls return the cached path.
    """

    global _DOTENV_LOADED
    if _DOTENV_LOADED is not None:
        return _DOTENV_LOADED
    if search_from is not None:
        candidate = _search_upwards(search_from)
    else:
        found = find_dotenv(filename=".env", usecwd=True)
        candidate = Path(found) if found else None
    if candidate is None:
        return None
    load_dotenv(candidate, override=False)
    _DOTENV_LOADED = candidate.resolve()
    return _DOTENV_LOADED


def _search_upwards(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED
    _DOTENV_LOADED = None


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in _TRUTHY:
        return True
    if text in _FALSY:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _parse_non_negative_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("booleans are not counts")
    number = int(value)
    if number < 0:
        raise ValueError(f"must be non-negative: {value!r}")
    return number


def _parse_positive_int_or_none(value: Any) -> int | None:
    if value is None:
        return None
    number = _parse_non_negative_int(value)
    if number == 0:
        raise ValueError("must be positive")
    return number


def _parse_window(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, bool):
        raise ValueError("booleans are not durations")
    else:
        seconds = float(value)
    if seconds < 0:
        raise ValueError(f"must be non-negative: {value!r}")
    return timedelta(seconds=seconds)


def _parse_level(value: Any) -> LogLevel | None:
    if value is None or isinstance(value, LogLevel):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return LogLevel.from_python_level(value)
    return LogLevel.from_name(str(value))


def _parse_string_list(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    return tuple(str(item) for item in value)


def _parse_rules(value: Any) -> Mapping[str, Any] | None:
    if value is None:
        return None
    return dict(value)


def _parse_metadata(value: Any) -> str | tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) and value != "all" and "," in value:
        return _parse_string_list(value)
    return metadata_selection(value)


def _parse_format(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("format must be a string")
    return value


def resolve_sink(value: Any) -> Any:
    """Resolve the configured sink once, at configuration time.

    Accepts ``None``, a sink object, a sink class (instantiated without
    arguments), or a ``"package.module:attribute"`` import path to either.

    Examples
    --------
    >>> resolve_sink(None) is None
    True
    >>> type(resolve_sink('lib_log_ship.adapters.sinks.console:RichConsoleSink')).__name__
    'RichConsoleSink'
    """

    if value is None:
        return None
    if isinstance(value, str):
        module_name, _, attribute = value.partition(":")
        if not module_name or not attribute:
            raise ValueError(f"sink import path must look like 'package.module:attr', got {value!r}")
        value = getattr(import_module(module_name), attribute)
    if isinstance(value, type):
        value = value()
    if not callable(getattr(value, "send_application_log", None)):
        raise ValueError(f"sink {value!r} does not implement send_application_log")
    return value


_FIELD_PARSERS: dict[str, tuple[str, Callable[[Any], Any], Any]] = {
    "level": ("level", _parse_level, None),
    "format": ("format", _parse_format, DEFAULT_FORMAT),
    "metadata": ("metadata", _parse_metadata, ()),
    "metadata_filter": ("metadata_filter", _parse_rules, None),
    "metadata_reject": ("metadata_reject", _parse_rules, None),
    "sink": ("sink", resolve_sink, None),
    "buffer_size": ("buffer_size", _parse_non_negative_int, DEFAULT_BUFFER_SIZE),
    "max_message_bytes": ("max_message_bytes", _parse_non_negative_int, DEFAULT_MAX_MESSAGE_BYTES),
    "throttle_enabled": ("throttle_enabled", _parse_bool, True),
    "throttle_window_sec": ("throttle_window", _parse_window, DEFAULT_THROTTLE_WINDOW),
    "throttle_max_repeats": ("throttle_max_repeats", _parse_non_negative_int, DEFAULT_THROTTLE_MAX_REPEATS),
    "throttle_max_entries": ("throttle_max_entries", _parse_positive_int_or_none, None),
    "verbose_file": ("verbose_file", str, DEFAULT_VERBOSE_FILE),
    "exclude_message_containing": ("exclude_message_containing", _parse_string_list, DEFAULT_EXCLUDE_CONTAINING),
    "immediate_send_containing": ("immediate_send_containing", _parse_string_list, DEFAULT_IMMEDIATE_CONTAINING),
    "application_marker": ("application_marker", str, DEFAULT_APPLICATION_MARKER),
}
"""Option name → (settings field, parser, default)."""


def coerce_options(options: Mapping[str, Any]) -> ShipperSettings:
    """Build :class:`ShipperSettings` from ``options``; never raises.

    Unknown keys are ignored and malformed values fall back to their default,
    both with a warning.

    Examples
    --------
    >>> settings = coerce_options({'buffer_size': '3', 'throttle_window_sec': 5, 'max_message_bytes': -1})
    >>> settings.buffer_size, settings.throttle_window.total_seconds(), settings.max_message_bytes
    (3, 5.0, 8192)
    """

    fields: dict[str, Any] = {}
    for key, value in options.items():
        entry = _FIELD_PARSERS.get(key)
        if entry is None:
            LOGGER.warning("Ignoring unknown log shipping option %r", key)
            continue
        field_name, parser, default = entry
        try:
            fields[field_name] = parser(value)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Invalid value %r for option %r; using default %r", value, key, default, exc_info=exc)
            fields[field_name] = default
    return ShipperSettings(**fields)


_ENV_FIELDS: dict[str, str] = {
    "LEVEL": "level",
    "FORMAT": "format",
    "METADATA": "metadata",
    "SINK": "sink",
    "BUFFER_SIZE": "buffer_size",
    "MAX_MESSAGE_BYTES": "max_message_bytes",
    "THROTTLE_ENABLED": "throttle_enabled",
    "THROTTLE_WINDOW_SEC": "throttle_window_sec",
    "THROTTLE_MAX_REPEATS": "throttle_max_repeats",
    "THROTTLE_MAX_ENTRIES": "throttle_max_entries",
    "VERBOSE_FILE": "verbose_file",
    "EXCLUDE": "exclude_message_containing",
    "IMMEDIATE": "immediate_send_containing",
    "APPLICATION_MARKER": "application_marker",
}


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Return options found in ``LOG_SHIP_*`` environment variables.

    Examples
    --------
    >>> env_overrides({'LOG_SHIP_BUFFER_SIZE': '4', 'LOG_SHIP_EXCLUDE': 'a, b', 'OTHER': 'x'})
    {'buffer_size': '4', 'exclude_message_containing': 'a, b'}
    """

    source = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for suffix, option in _ENV_FIELDS.items():
        value = source.get(ENV_PREFIX + suffix)
        if value is not None and value != "":
            overrides[option] = value
    return overrides


__all__ = [
    "DOTENV_ENV_VAR",
    "ENV_PREFIX",
    "coerce_options",
    "enable_dotenv",
    "env_overrides",
    "resolve_sink",
    "should_use_dotenv",
]
