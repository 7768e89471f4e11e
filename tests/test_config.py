from __future__ import annotations

import logging
import os
from datetime import timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner

from lib_log_ship import cli as cli_module
from lib_log_ship import config as log_config
from lib_log_ship.domain import LogLevel
from tests.fakes import ApplicationOnlySink, RecordingSink
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_coerce_options_parses_loose_values() -> None:
    settings = log_config.coerce_options(
        {
            "level": "warn",
            "buffer_size": "4",
            "throttle_enabled": "off",
            "throttle_window_sec": "2.5",
            "throttle_max_entries": "100",
            "exclude_message_containing": "a, b,,c",
            "immediate_send_containing": ["HEALTH"],
            "metadata": "app,pid",
        },
    )

    assert settings.level is LogLevel.WARNING
    assert settings.buffer_size == 4
    assert settings.throttle_enabled is False
    assert settings.throttle_window == timedelta(seconds=2.5)
    assert settings.throttle_max_entries == 100
    assert settings.exclude_message_containing == ("a", "b", "c")
    assert settings.immediate_send_containing == ("HEALTH",)
    assert settings.metadata == ("app", "pid")


@pytest.mark.parametrize(
    "key, value, field, default",
    [
        ("buffer_size", -3, "buffer_size", 8),
        ("buffer_size", True, "buffer_size", 8),
        ("max_message_bytes", "big", "max_message_bytes", 8192),
        ("throttle_window_sec", -1, "throttle_window", timedelta(seconds=60)),
        ("throttle_enabled", "maybe", "throttle_enabled", True),
        ("throttle_max_entries", 0, "throttle_max_entries", None),
        ("level", "chatty", "level", None),
        ("format", 42, "format", "{date} {time} [{level}] {metadata} {message}"),
    ],
)
def test_malformed_values_fall_back_to_defaults(
    key: str,
    value: object,
    field: str,
    default: object,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="lib_log_ship.config"):
        settings = log_config.coerce_options({key: value})

    assert getattr(settings, field) == default
    assert any(key in record.getMessage() for record in caplog.records)


def test_unknown_options_are_ignored_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="lib_log_ship.config"):
        settings = log_config.coerce_options({"colour": "blue", "buffer_size": 2})

    assert settings.buffer_size == 2
    assert "colour" in caplog.text


def test_env_overrides_reads_prefixed_variables() -> None:
    environ = {
        "LOG_SHIP_LEVEL": "error",
        "LOG_SHIP_THROTTLE_WINDOW_SEC": "5",
        "LOG_SHIP_IMMEDIATE": "HEALTH,PANIC",
        "LOG_SHIP_VERBOSE_FILE": "",
        "UNRELATED": "1",
    }

    assert log_config.env_overrides(environ) == {
        "level": "error",
        "throttle_window_sec": "5",
        "immediate_send_containing": "HEALTH,PANIC",
    }


def test_env_overrides_default_to_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_SHIP_BUFFER_SIZE", "16")

    assert log_config.coerce_options(log_config.env_overrides()).buffer_size == 16


def test_resolve_sink_accepts_objects_classes_and_import_paths() -> None:
    instance = RecordingSink()

    assert log_config.resolve_sink(instance) is instance
    assert isinstance(log_config.resolve_sink(ApplicationOnlySink), ApplicationOnlySink)
    assert isinstance(log_config.resolve_sink("tests.fakes:RecordingSink"), RecordingSink)


@pytest.mark.parametrize("value", ["tests.fakes", "tests.fakes:Missing", object()])
def test_resolve_sink_rejects_invalid_values(value: object) -> None:
    with pytest.raises((ValueError, AttributeError)):
        log_config.resolve_sink(value)


def test_invalid_sink_option_degrades_to_no_sink() -> None:
    assert log_config.coerce_options({"sink": "nowhere"}).sink is None


@pytest.mark.parametrize(
    "explicit, env_value, expected",
    [
        (None, None, False),
        (None, "yes", True),
        (None, "0", False),
        (True, "0", True),
        (False, "1", False),
    ],
)
def test_should_use_dotenv_precedence(explicit: bool | None, env_value: str | None, expected: bool) -> None:
    assert log_config.should_use_dotenv(explicit=explicit, env_value=env_value) is expected


def test_enable_dotenv_populates_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Loading the nearest .env injects values from a parent directory."""

    nested = tmp_path / "nested"
    nested.mkdir()
    env_file = tmp_path / ".env"
    env_file.write_text("LOG_SHIP_BUFFER_SIZE=5\n")
    monkeypatch.chdir(nested)

    loaded = log_config.enable_dotenv()

    assert loaded == env_file.resolve()
    assert os.environ["LOG_SHIP_BUFFER_SIZE"] == "5"
    assert log_config.enable_dotenv() == loaded

    os.environ.pop("LOG_SHIP_BUFFER_SIZE", None)


def test_enable_dotenv_respects_existing_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Existing environment variables keep precedence over .env entries."""

    (tmp_path / ".env").write_text("LOG_SHIP_LEVEL=debug\n")
    monkeypatch.setenv("LOG_SHIP_LEVEL", "error")

    result = log_config.enable_dotenv(search_from=tmp_path)

    assert result is not None
    assert os.environ["LOG_SHIP_LEVEL"] == "error"


def test_cli_dotenv_toggle_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    """CLI flag wins over environment toggle when deciding whether to load .env."""

    runner = CliRunner()
    calls: list[dict[str, object]] = []

    def record_enable(**kwargs: object) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(log_config, "enable_dotenv", record_enable)

    result = runner.invoke(cli_module.cli, ["--use-dotenv", "info"])
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["info"], env={log_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert len(calls) == 1

    calls.clear()
    result = runner.invoke(cli_module.cli, ["--no-use-dotenv", "info"], env={log_config.DOTENV_ENV_VAR: "1"})
    assert result.exit_code == 0
    assert calls == []
