import asyncio
from dataclasses import replace
from datetime import datetime

import pytest

from ordergate.monitor.service import AvailabilityMonitor, build_snapshot
from ordergate.settings.models import RestaurantSettings


class Clock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def settings(restaurant_config):
    return RestaurantSettings.from_config(restaurant_config)


def test_snapshot_applies_admin_override(settings):
    closed_at_night = datetime(2024, 6, 3, 23, 0)
    assert build_snapshot(settings, closed_at_night).effective_open is False
    forced = replace(settings, is_open_override=True)
    snapshot = build_snapshot(forced, closed_at_night)
    assert snapshot.effective_open is True
    assert snapshot.result.is_open is False


@pytest.mark.asyncio
async def test_check_now_reports_changes_only(settings):
    clock = Clock(datetime(2024, 6, 3, 9, 0))
    changes = []

    async def provider():
        return settings

    async def on_change(previous, snapshot):
        changes.append((previous, snapshot))

    monitor = AvailabilityMonitor(provider, on_change=on_change, clock=clock)
    first = await monitor.check_now()
    assert first.effective_open is False
    await monitor.check_now()
    assert len(changes) == 1
    assert changes[0][0] is None

    clock.now = datetime(2024, 6, 3, 10, 0)
    opened = await monitor.check_now()
    assert opened.effective_open is True
    assert len(changes) == 2
    assert changes[1][0] is first
    assert monitor.last is opened


@pytest.mark.asyncio
async def test_busy_flag_counts_as_change(settings):
    current = {"settings": settings}

    async def provider():
        return current["settings"]

    changes = []

    async def on_change(previous, snapshot):
        changes.append(snapshot.is_busy)

    monitor = AvailabilityMonitor(
        provider, on_change=on_change, clock=Clock(datetime(2024, 6, 3, 12, 0))
    )
    await monitor.check_now()
    current["settings"] = replace(settings, is_busy=True)
    await monitor.check_now()
    assert changes == [False, True]


@pytest.mark.asyncio
async def test_polling_task_starts_and_stops(settings):
    calls = 0

    async def provider():
        nonlocal calls
        calls += 1
        return settings

    monitor = AvailabilityMonitor(provider, interval=0.01)
    monitor.start()
    assert monitor.running
    await asyncio.sleep(0.05)
    await monitor.stop()
    assert not monitor.running
    seen = calls
    assert seen >= 2
    await asyncio.sleep(0.03)
    assert calls == seen


@pytest.mark.asyncio
async def test_polling_survives_provider_errors(settings):
    attempts = 0

    async def provider():
        nonlocal attempts
        attempts += 1
        if attempts == 1:
            raise RuntimeError("settings store unavailable")
        return settings

    monitor = AvailabilityMonitor(provider, interval=0.01)
    monitor.start()
    await asyncio.sleep(0.05)
    await monitor.stop()
    assert attempts >= 2
    assert monitor.last is not None


def test_interval_must_be_positive(settings):
    async def provider():
        return settings

    with pytest.raises(ValueError):
        AvailabilityMonitor(provider, interval=0)
