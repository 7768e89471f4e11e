from __future__ import annotations

import pytest

from lib_log_ship.domain.classification import Destination, classify, contains_any
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]

EXCLUDE = ("SQUASHFS error",)
IMMEDIATE = ("MAIN_SERVICES_CONNECTIONS_SOCKET_HEALTH",)


@pytest.mark.parametrize(
    "text, destination",
    [
        ("In2Firmware: started", Destination.APPLICATION),
        ("[In2Firmware] x", Destination.APPLICATION),
        ("kernel: usb attached", Destination.SYSTEM),
        ("in2firmware lowercase", Destination.SYSTEM),
    ],
)
def test_destination_follows_application_marker(text: str, destination: Destination) -> None:
    assert classify(text, exclude=EXCLUDE, immediate=IMMEDIATE).destination is destination


def test_exclusion_matches_substring_case_sensitively() -> None:
    assert classify("mount: SQUASHFS error: x", exclude=EXCLUDE, immediate=IMMEDIATE).excluded
    assert not classify("mount: squashfs error: x", exclude=EXCLUDE, immediate=IMMEDIATE).excluded


def test_immediate_and_exclusion_are_reported_independently() -> None:
    result = classify("SQUASHFS error MAIN_SERVICES_CONNECTIONS_SOCKET_HEALTH", exclude=EXCLUDE, immediate=IMMEDIATE)

    assert result.excluded
    assert result.immediate


def test_empty_patterns_never_match() -> None:
    assert not contains_any("anything", [""])
    assert not contains_any("anything", [])
    assert not classify("anything", exclude=[""], immediate=None).excluded


def test_custom_application_marker() -> None:
    assert classify("MyApp ok", exclude=(), immediate=(), application_marker="MyApp").destination is Destination.APPLICATION
    assert classify("In2Firmware ok", exclude=(), immediate=(), application_marker="").destination is Destination.SYSTEM
