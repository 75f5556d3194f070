"""Run the availability monitor with APScheduler and follow live settings updates.

Usage:
    python tools/status_monitor.py [--settings restaurant.json]
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from loguru import logger
from redis.asyncio import Redis

from ordergate.__main__ import load_settings
from ordergate.config import load_app_config
from ordergate.localization import format_next_opening, gettext
from ordergate.monitor.service import AvailabilityMonitor, StatusSnapshot
from ordergate.settings.broadcast import SettingsBroadcaster
from ordergate.settings.models import RestaurantSettings


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch restaurant availability.")
    parser.add_argument("--settings", type=Path, help="Restaurant configuration JSON file.")
    return parser.parse_args()


async def main() -> None:
    args = parse_args()
    config = load_app_config()
    locale = config.restaurant.locale
    redis = Redis.from_url(config.redis.url)
    broadcaster = SettingsBroadcaster(
        redis, config.redis.settings_channel, config.redis.settings_cache_key
    )
    current: dict[str, RestaurantSettings] = {
        "settings": await broadcaster.latest() or await load_settings(config, args.settings)
    }

    async def provider() -> RestaurantSettings:
        return current["settings"]

    async def on_change(previous: StatusSnapshot | None, snapshot: StatusSnapshot) -> None:
        state = gettext("status.open" if snapshot.effective_open else "status.closed", locale)
        if snapshot.effective_open:
            logger.info("{}", state)
        else:
            logger.info("{} ({})", state, format_next_opening(snapshot.result.next_opening, locale))

    monitor = AvailabilityMonitor(
        provider,
        interval=config.monitor.poll_interval_sec,
        on_change=on_change,
        tz=config.restaurant.timezone,
    )
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        monitor.check_now,
        "interval",
        seconds=config.monitor.poll_interval_sec,
        id="availability",
        replace_existing=True,
    )
    await monitor.check_now()
    scheduler.start()
    logger.info("Availability monitor started, every {} s", config.monitor.poll_interval_sec)
    try:
        async for settings in broadcaster.listen():
            current["settings"] = settings
            await monitor.check_now()
    finally:
        scheduler.shutdown(wait=False)
        await redis.close()


if __name__ == "__main__":
    asyncio.run(main())
