from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from ordergate.delivery.models import DeliveryZone, GeoPoint, parse_zones
from ordergate.hours.models import ConfigurationError, ServiceHours, WeekSchedule
from ordergate.hours.utils import convert_hours_to_week

# Settings-table columns holding JSON hours, keyed by schedule kind.
HOURS_COLUMNS = {
    "general": "opening_hours",
    "pickup": "pickup_hours",
    "delivery": "delivery_hours",
}


@dataclass(frozen=True)
class ServiceFlags:
    has_pickup: bool = True
    has_delivery: bool = True
    has_dine_in: bool = True


@dataclass(frozen=True)
class RestaurantSettings:
    name: str
    hours: ServiceHours
    zones: tuple[DeliveryZone, ...] = ()
    location: GeoPoint | None = None
    services: ServiceFlags = field(default_factory=ServiceFlags)
    is_busy: bool = False
    is_open_override: bool | None = None
    special_message: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "hours": self.hours.to_dict(),
            "delivery": {"zones": [zone.to_dict() for zone in self.zones]},
            "services": {
                "hasPickup": self.services.has_pickup,
                "hasDelivery": self.services.has_delivery,
                "hasDineIn": self.services.has_dine_in,
            },
            "isBusy": self.is_busy,
            "isOpen": self.is_open_override,
            "specialMessage": self.special_message,
            "updatedAt": self.updated_at,
        }
        if self.location:
            payload["delivery"]["location"] = {"lat": self.location.lat, "lng": self.location.lng}
        return payload

    @classmethod
    def from_config(cls, raw: Any) -> RestaurantSettings:
        if not isinstance(raw, Mapping):
            raise ConfigurationError("Restaurant configuration must be a mapping")
        delivery = raw.get("delivery") or {}
        if not isinstance(delivery, Mapping):
            raise ConfigurationError("'delivery' section must be a mapping")
        location_raw = delivery.get("location")
        location = None
        if location_raw:
            try:
                location = GeoPoint(lat=float(location_raw["lat"]), lng=float(location_raw["lng"]))
            except (KeyError, TypeError, ValueError) as err:
                raise ConfigurationError(f"Invalid delivery.location: {location_raw!r}") from err
        services_raw = raw.get("services") or {}
        return cls(
            name=str(raw.get("name") or ""),
            hours=ServiceHours.from_config(raw),
            zones=parse_zones(delivery.get("zones")),
            location=location,
            services=ServiceFlags(
                has_pickup=_config_flag(services_raw, "hasPickup", True),
                has_delivery=_config_flag(services_raw, "hasDelivery", True),
                has_dine_in=_config_flag(services_raw, "hasDineIn", True),
            ),
            is_busy=_config_flag(raw, "isBusy", False),
            is_open_override=_config_flag(raw, "isOpen", None),
            special_message=raw.get("specialMessage"),
            updated_at=raw.get("updatedAt"),
        )


def merge_database_settings(
    settings: RestaurantSettings,
    row: Mapping[str, Any] | None,
) -> RestaurantSettings:
    """Overlay a settings-table row on top of the static restaurant configuration."""
    if not row:
        return settings
    weeks: dict[str, WeekSchedule] = {}
    for kind, column in HOURS_COLUMNS.items():
        value = row.get(column)
        if value in (None, ""):
            weeks[kind] = settings.hours.week(kind)
        else:
            weeks[kind] = WeekSchedule.from_mapping(convert_hours_to_week(value), kind=kind)
    overrides: dict[str, Any] = {"hours": ServiceHours(**weeks)}
    if "is_busy" in row:
        overrides["is_busy"] = _as_bool(row["is_busy"])
    if "is_open" in row:
        value = row["is_open"]
        overrides["is_open_override"] = None if value in (None, "") else _as_bool(value)
    if "special_message" in row:
        overrides["special_message"] = row["special_message"] or None
    if "updated_at" in row:
        overrides["updated_at"] = row["updated_at"] or None
    return replace(settings, **overrides)


def _config_flag(raw: Mapping[str, Any], key: str, default: bool | None) -> bool | None:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{key}' must be true or false, got {value!r}")
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().upper() in {"TRUE", "1", "YES"}
    return bool(value)


def load_settings_file(path: Path) -> RestaurantSettings:
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    with path.open(encoding="utf-8") as fp:
        try:
            payload = json.load(fp)
        except json.JSONDecodeError as err:
            raise ConfigurationError(f"Settings file {path} is not valid JSON: {err}") from err
    return RestaurantSettings.from_config(payload)
