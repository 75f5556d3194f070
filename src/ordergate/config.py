from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class GoogleConfig:
    sheets_id: str
    service_account_json: Path


@dataclass(frozen=True)
class RedisConfig:
    url: str
    settings_channel: str
    settings_cache_key: str


@dataclass(frozen=True)
class RestaurantConfig:
    timezone: str
    settings_file: Path | None
    locale: str


@dataclass(frozen=True)
class MonitorSettings:
    poll_interval_sec: int


@dataclass(frozen=True)
class AppConfig:
    restaurant: RestaurantConfig
    redis: RedisConfig
    monitor: MonitorSettings
    google: GoogleConfig | None = None


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} is not set")
    return value


def get_google_config() -> GoogleConfig:
    sheets_id = _require_env("GOOGLE_SHEETS_ID")
    service_account = _require_env("GOOGLE_SERVICE_ACCOUNT_JSON")
    service_path = Path(service_account).expanduser()
    if not service_path.exists():
        raise FileNotFoundError(f"Service account JSON not found: {service_path}")
    return GoogleConfig(sheets_id=sheets_id, service_account_json=service_path)


def default_timezone() -> str:
    return os.getenv("RESTAURANT_TIMEZONE", "Europe/Helsinki")


def default_locale() -> str:
    return os.getenv("ORDERGATE_LOCALE", "fi")


def get_restaurant_config() -> RestaurantConfig:
    timezone = default_timezone()
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise RuntimeError(f"Invalid RESTAURANT_TIMEZONE: {timezone}") from err
    settings_file = os.getenv("RESTAURANT_SETTINGS_FILE")
    return RestaurantConfig(
        timezone=timezone,
        settings_file=Path(settings_file).expanduser() if settings_file else None,
        locale=default_locale(),
    )


def load_app_config() -> AppConfig:
    redis = RedisConfig(
        url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        settings_channel=os.getenv("SETTINGS_CHANNEL", "ordergate:settings"),
        settings_cache_key=os.getenv("SETTINGS_CACHE_KEY", "ordergate:settings:snapshot"),
    )
    poll_raw = os.getenv("STATUS_POLL_INTERVAL_SEC", "60")
    try:
        poll_interval = int(poll_raw)
    except ValueError as err:
        raise RuntimeError(f"Invalid STATUS_POLL_INTERVAL_SEC: {poll_raw}") from err
    if poll_interval <= 0:
        raise RuntimeError("STATUS_POLL_INTERVAL_SEC must be positive")
    google = get_google_config() if os.getenv("GOOGLE_SHEETS_ID") else None
    return AppConfig(
        restaurant=get_restaurant_config(),
        redis=redis,
        monitor=MonitorSettings(poll_interval_sec=poll_interval),
        google=google,
    )
