"""Factories for the concrete collaborators wired by the composition root."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone

from lib_log_ship.adapters import FileVerboseStore, RepeatThrottle
from lib_log_ship.application.ports import ClockPort, IdProvider, ThrottlePort, VerboseStorePort
from lib_log_ship.domain import ShipperSettings


class SystemClock(ClockPort):
    """Concrete clock port returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ShortIdProvider(IdProvider):
    """Generate short URL-safe correlation identifiers (5 random bytes)."""

    def __call__(self) -> str:
        return secrets.token_urlsafe(5)


def create_throttle(settings: ShipperSettings) -> ThrottlePort:
    return RepeatThrottle(
        enabled=settings.throttle_enabled,
        window=settings.throttle_window,
        max_repeats=settings.throttle_max_repeats,
        max_entries=settings.throttle_max_entries,
    )


def create_verbose_store(settings: ShipperSettings) -> VerboseStorePort:
    return FileVerboseStore(settings.verbose_file)


__all__ = ["ShortIdProvider", "SystemClock", "create_throttle", "create_verbose_store"]
