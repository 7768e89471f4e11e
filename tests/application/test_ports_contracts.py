from __future__ import annotations

from datetime import timedelta
from io import StringIO
from pathlib import Path

from rich.console import Console

from lib_log_ship.adapters import FileVerboseStore, JournaldSink, QueueAdapter, RepeatThrottle, RichConsoleSink, TemplateFormatter
from lib_log_ship.application.ports import (
    ClockPort,
    FormatterPort,
    IdProvider,
    QueuePort,
    SinkPort,
    SystemSinkPort,
    ThrottlePort,
    VerboseStorePort,
    supports_system_logs,
)
from lib_log_ship.runtime._factories import ShortIdProvider, SystemClock
from tests.fakes import ApplicationOnlySink, RecordingSink
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_adapters_satisfy_their_ports(tmp_path: Path) -> None:
    assert isinstance(RepeatThrottle(), ThrottlePort)
    assert isinstance(FileVerboseStore(tmp_path / "v.txt"), VerboseStorePort)
    assert isinstance(TemplateFormatter(), FormatterPort)
    assert isinstance(QueueAdapter(), QueuePort)
    assert isinstance(SystemClock(), ClockPort)
    assert isinstance(ShortIdProvider(), IdProvider)


def test_sinks_satisfy_both_capabilities() -> None:
    for sink in (RichConsoleSink(console=Console(file=StringIO())), JournaldSink(sender=lambda **_: None), RecordingSink()):
        assert isinstance(sink, SinkPort)
        assert isinstance(sink, SystemSinkPort)
        assert supports_system_logs(sink)


def test_application_only_sink_lacks_system_capability() -> None:
    sink = ApplicationOnlySink()

    assert isinstance(sink, SinkPort)
    assert not supports_system_logs(sink)


def test_system_clock_is_timezone_aware() -> None:
    assert SystemClock().now().utcoffset() == timedelta(0)


def test_short_ids_are_unique_and_compact() -> None:
    provider = ShortIdProvider()
    ids = {provider() for _ in range(50)}

    assert len(ids) == 50
    assert all(len(value) <= 8 for value in ids)
