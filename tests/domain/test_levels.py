from __future__ import annotations

import logging

import pytest

from lib_log_ship.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


@pytest.mark.parametrize(
    "level, expected",
    [
        (LogLevel.DEBUG, "debug"),
        (LogLevel.INFO, "info"),
        (LogLevel.WARNING, "warning"),
        (LogLevel.ERROR, "error"),
        (LogLevel.CRITICAL, "critical"),
    ],
)
def test_severity_is_lowercase_name(level: LogLevel, expected: str) -> None:
    assert level.severity == expected


def test_python_levels_round_trip() -> None:
    for level in LogLevel:
        assert LogLevel.from_python_level(level.to_python_level()) is level


def test_custom_python_levels_round_down() -> None:
    assert LogLevel.from_python_level(25) is LogLevel.INFO
    assert LogLevel.from_python_level(5) is LogLevel.DEBUG
    assert LogLevel.from_python_level(logging.CRITICAL + 10) is LogLevel.CRITICAL


def test_from_name_accepts_aliases_and_whitespace() -> None:
    assert LogLevel.from_name(" warn ") is LogLevel.WARNING
    assert LogLevel.from_name("Error") is LogLevel.ERROR


def test_from_name_rejects_unknown_levels() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        LogLevel.from_name("verbose")


def test_from_numeric_requires_exact_value() -> None:
    assert LogLevel.from_numeric(40) is LogLevel.ERROR
    with pytest.raises(ValueError):
        LogLevel.from_numeric(41)


def test_at_least_compares_numeric_values() -> None:
    assert LogLevel.WARNING.at_least(LogLevel.WARNING)
    assert not LogLevel.INFO.at_least(LogLevel.WARNING)
    assert LogLevel.DEBUG.at_least(None)
