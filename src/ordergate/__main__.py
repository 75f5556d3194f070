"""Command line access to the availability and delivery fee evaluator.

Usage:
    python -m ordergate status [--settings restaurant.json] [--at 2025-06-02T10:00]
    python -m ordergate fee --distance 4.2 [--settings restaurant.json]
    python -m ordergate publish [--settings restaurant.json]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

from loguru import logger
from redis.asyncio import Redis

from ordergate.config import AppConfig, load_app_config
from ordergate.delivery.fees import InvalidInputError, describe_zone, quote_delivery
from ordergate.delivery.models import OUTSIDE_SERVICE_AREA
from ordergate.hours.models import ConfigurationError
from ordergate.localization import format_money, format_next_opening, format_zone, gettext
from ordergate.monitor.service import build_snapshot
from ordergate.settings.broadcast import SettingsBroadcaster
from ordergate.settings.models import RestaurantSettings, load_settings_file
from ordergate.settings.repository import SettingsRepository
from ordergate.sheets.client import SheetsClient

EXIT_BAD_INPUT = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="ordergate", description="Restaurant ordering gate.")
    parser.add_argument("--settings", type=Path, help="Restaurant configuration JSON file.")
    parser.add_argument("--locale", help="Label language (fi, en).")
    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Show opening and ordering status.")
    status.add_argument("--at", type=datetime.fromisoformat, help="Evaluate at this ISO time.")
    status.add_argument("--json", action="store_true", help="Print raw JSON.")

    fee = sub.add_parser("fee", help="Show the delivery fee for a distance.")
    fee.add_argument("--distance", type=float, required=True, help="Distance in kilometers.")

    sub.add_parser("publish", help="Push the settings to running consumers via Redis.")
    return parser.parse_args(argv)


async def load_settings(config: AppConfig, override: Path | None) -> RestaurantSettings:
    path = override or config.restaurant.settings_file
    base = load_settings_file(path) if path else None
    if config.google is None:
        if base is None:
            raise ConfigurationError(
                "No settings source: pass --settings, set RESTAURANT_SETTINGS_FILE "
                "or configure GOOGLE_SHEETS_ID"
            )
        return base
    sheets = SheetsClient(
        spreadsheet_id=config.google.sheets_id,
        service_account_file=config.google.service_account_json,
    )
    return await SettingsRepository(sheets, base=base).get()


def _print_status(settings: RestaurantSettings, args: argparse.Namespace, tz: str) -> None:
    snapshot = build_snapshot(settings, args.at, tz)
    if args.json:
        payload = snapshot.result.to_dict()
        payload["effective_open"] = snapshot.effective_open
        payload["is_busy"] = snapshot.is_busy
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return
    result = snapshot.result
    locale = args.locale
    print(gettext("status.open" if snapshot.effective_open else "status.closed", locale))
    if not snapshot.effective_open:
        print(format_next_opening(result.next_opening, locale))
    if snapshot.is_busy:
        print(gettext("status.busy", locale))
    ordering_key = "status.ordering_open" if result.is_ordering_open else "status.ordering_closed"
    print(gettext(ordering_key, locale))
    if not result.is_ordering_open:
        print(format_next_opening(result.next_ordering, locale, ordering=True))


def _print_fee(settings: RestaurantSettings, args: argparse.Namespace) -> None:
    locale = args.locale
    quote = quote_delivery(args.distance, settings.zones)
    print(format_zone(describe_zone(args.distance, settings.zones), locale))
    if quote is OUTSIDE_SERVICE_AREA:
        return
    if quote.fee == 0:
        print(gettext("fee.free", locale))
    else:
        print(gettext("fee.amount", locale, fee=format_money(quote.fee)))
    if quote.minimum_order:
        print(gettext("fee.minimum_order", locale, amount=format_money(quote.minimum_order)))


async def _publish(config: AppConfig, settings: RestaurantSettings) -> None:
    redis = Redis.from_url(config.redis.url)
    try:
        broadcaster = SettingsBroadcaster(
            redis, config.redis.settings_channel, config.redis.settings_cache_key
        )
        receivers = await broadcaster.publish(settings)
    finally:
        await redis.close()
    print(f"Published settings to {receivers} subscriber(s).")


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = load_app_config()
    args.locale = args.locale or config.restaurant.locale
    try:
        settings = await load_settings(config, args.settings)
        if args.command == "status":
            _print_status(settings, args, config.restaurant.timezone)
        elif args.command == "fee":
            _print_fee(settings, args)
        else:
            await _publish(config, settings)
    except (ConfigurationError, InvalidInputError) as err:
        logger.error("{}", err)
        return EXIT_BAD_INPUT
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
