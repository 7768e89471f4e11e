from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from lib_log_ship.config import _reset_dotenv_state_for_testing
from lib_log_ship.runtime._state import clear_runtime, current_runtime, is_initialised
from tests.fakes import ManualClock, RecordingSink


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep ``LOG_SHIP_*`` variables and runtime state from leaking between tests."""

    for key in list(os.environ):
        if key.startswith("LOG_SHIP_") or key == "LIB_LOG_SHIP_USE_DOTENV":
            monkeypatch.delenv(key, raising=False)
    _reset_dotenv_state_for_testing()
    yield
    if is_initialised():
        runtime = current_runtime()
        if runtime.queue is not None:
            runtime.queue.stop(drain=False)
        clear_runtime()
    _reset_dotenv_state_for_testing()
