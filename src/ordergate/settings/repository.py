from __future__ import annotations

import asyncio
import json
from dataclasses import replace

from loguru import logger

from ordergate.delivery.models import DeliveryZone, GeoPoint, validate_zones
from ordergate.hours.models import SCHEDULE_KINDS, ConfigurationError, ServiceHours, WeekSchedule
from ordergate.hours.utils import convert_hours_to_week, format_week_ranges
from ordergate.settings.models import (
    HOURS_COLUMNS,
    RestaurantSettings,
    ServiceFlags,
    merge_database_settings,
)
from ordergate.sheets.client import SheetsClient

SETTINGS_RANGE = "Settings!A2:B"
ZONES_RANGE = "DeliveryZones!A2:C"


class SettingsNotFoundError(Exception):
    pass


class SettingsRepository:
    """
    Reads restaurant settings from Google Sheets and caches the last snapshot.

    ``Settings`` holds key/value rows (hours columns are JSON objects of
    ``"HH:MM-HH:MM"`` ranges), ``DeliveryZones`` holds one band per row.
    An optional base configuration supplies anything the sheet leaves out.
    """

    def __init__(self, sheets: SheetsClient, base: RestaurantSettings | None = None) -> None:
        self._sheets = sheets
        self._base = base
        self._cache: RestaurantSettings | None = None

    async def get(self) -> RestaurantSettings:
        if self._cache is None:
            self._cache = await asyncio.to_thread(self._load_sync)
        return self._cache

    async def refresh(self) -> RestaurantSettings:
        self._cache = None
        return await self.get()

    async def save_hours(self, kind: str, week: WeekSchedule) -> None:
        if kind not in HOURS_COLUMNS:
            raise ConfigurationError(f"Unknown schedule kind: {kind!r}")
        await asyncio.to_thread(self._save_hours_sync, kind, week)
        self._cache = None

    # ---- sync helpers -------------------------------------------------

    def _read_settings_row(self) -> dict[str, str]:
        row: dict[str, str] = {}
        for entry in self._sheets.read(SETTINGS_RANGE):
            if not entry or not entry[0].strip():
                continue
            row[entry[0].strip()] = entry[1].strip() if len(entry) > 1 else ""
        return row

    def _read_zones(self) -> tuple[DeliveryZone, ...]:
        zones: list[DeliveryZone] = []
        for index, entry in enumerate(self._sheets.read(ZONES_RANGE), start=2):
            if not entry or not entry[0].strip():
                continue
            padded = entry + [""] * (3 - len(entry))
            try:
                zones.append(
                    DeliveryZone(
                        max_distance_km=float(padded[0]),
                        fee=float(padded[1]),
                        minimum_order=float(padded[2]) if padded[2].strip() else None,
                    )
                )
            except ValueError as err:
                raise ConfigurationError(f"DeliveryZones row {index} is invalid: {entry}") from err
        validate_zones(zones)
        return tuple(zones)

    def _load_sync(self) -> RestaurantSettings:
        row = self._read_settings_row()
        if not row and self._base is None:
            raise SettingsNotFoundError("Settings sheet is empty and no base configuration given")
        base = self._base or self._settings_from_row(row)
        settings = merge_database_settings(base, row)
        zones = self._read_zones()
        if zones:
            settings = replace(settings, zones=zones)
        logger.info(
            "Loaded restaurant settings '{}' (zones={}, busy={})",
            settings.name,
            len(settings.zones),
            settings.is_busy,
        )
        return settings

    def _settings_from_row(self, row: dict[str, str]) -> RestaurantSettings:
        weeks = {}
        for kind in SCHEDULE_KINDS:
            column = HOURS_COLUMNS[kind]
            if not row.get(column):
                raise ConfigurationError(f"Settings sheet is missing '{column}'")
            weeks[kind] = WeekSchedule.from_mapping(convert_hours_to_week(row[column]), kind=kind)
        location = None
        if row.get("location_lat") and row.get("location_lng"):
            try:
                location = GeoPoint(lat=float(row["location_lat"]), lng=float(row["location_lng"]))
            except ValueError as err:
                raise ConfigurationError("Settings sheet has an invalid location") from err
        return RestaurantSettings(
            name=row.get("name", ""),
            hours=ServiceHours(**weeks),
            location=location,
            services=ServiceFlags(
                has_pickup=row.get("has_pickup", "TRUE").upper() != "FALSE",
                has_delivery=row.get("has_delivery", "TRUE").upper() != "FALSE",
                has_dine_in=row.get("has_dine_in", "TRUE").upper() != "FALSE",
            ),
        )

    def _save_hours_sync(self, kind: str, week: WeekSchedule) -> None:
        column = HOURS_COLUMNS[kind]
        rows = self._sheets.read(SETTINGS_RANGE)
        payload = json.dumps(format_week_ranges(week.to_dict()))
        for offset, entry in enumerate(rows):
            if entry and entry[0].strip() == column:
                self._sheets.write(f"Settings!B{offset + 2}", [[payload]])
                break
        else:
            self._sheets.write(f"Settings!A{len(rows) + 2}", [[column, payload]])
        logger.info("Saved {} hours to settings sheet", kind)


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def settings_rows(settings: RestaurantSettings) -> list[list[str]]:
    """Key/value rows for the ``Settings`` sheet, header included."""
    rows = [["key", "value"], ["name", settings.name]]
    for kind, column in HOURS_COLUMNS.items():
        week = settings.hours.week(kind).to_dict()
        rows.append([column, json.dumps(format_week_ranges(week))])
    rows.append(["has_pickup", _flag(settings.services.has_pickup)])
    rows.append(["has_delivery", _flag(settings.services.has_delivery)])
    rows.append(["has_dine_in", _flag(settings.services.has_dine_in)])
    rows.append(["is_busy", _flag(settings.is_busy)])
    override = settings.is_open_override
    rows.append(["is_open", "" if override is None else _flag(override)])
    rows.append(["special_message", settings.special_message or ""])
    rows.append(["updated_at", settings.updated_at or ""])
    if settings.location:
        rows.append(["location_lat", str(settings.location.lat)])
        rows.append(["location_lng", str(settings.location.lng)])
    return rows


def zone_rows(settings: RestaurantSettings) -> list[list[str]]:
    rows = [["max_distance_km", "fee", "minimum_order"]]
    for zone in settings.zones:
        minimum = "" if zone.minimum_order is None else str(zone.minimum_order)
        rows.append([str(zone.max_distance_km), str(zone.fee), minimum])
    return rows
