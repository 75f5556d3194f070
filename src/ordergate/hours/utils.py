from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from ordergate.hours.models import WEEKDAY_KEYS, ConfigurationError

CLOSED_MARKERS = {"", "closed", "suljettu"}


def normalize_time(raw: str) -> str:
    candidate = (raw or "").strip()
    try:
        hour, minute = candidate.split(":", 1)
        hour_i = int(hour)
        minute_i = int(minute)
    except ValueError as err:
        raise ConfigurationError(f"Invalid time of day: {raw!r}") from err
    if not (0 <= hour_i <= 23 and 0 <= minute_i <= 59) or len(minute.strip()) != 2:
        raise ConfigurationError(f"Time of day out of range: {raw!r}")
    return f"{hour_i:02d}:{minute_i:02d}"


def parse_hours_json(raw: str | Mapping[str, Any] | None) -> dict[str, str]:
    """Decode the settings-table hours column: ``{"monday": "10:30-21:30", ...}``."""
    if isinstance(raw, Mapping):
        payload: Any = raw
    else:
        cleaned = (raw or "").strip()
        if not cleaned:
            raise ConfigurationError("Hours column is empty")
        try:
            payload = json.loads(cleaned)
        except json.JSONDecodeError as err:
            raise ConfigurationError(f"Hours column is not valid JSON: {err}") from err
    if not isinstance(payload, Mapping):
        raise ConfigurationError("Hours column must be a JSON object")
    return {
        str(key).strip().lower(): "" if value is None else str(value)
        for key, value in payload.items()
    }


def _parse_range(day: str, value: str) -> dict[str, Any]:
    text = value.strip()
    if text.lower() in CLOSED_MARKERS:
        return {"open": "", "close": "", "closed": True}
    open_raw, sep, close_raw = text.partition("-")
    if not sep or not open_raw.strip() or not close_raw.strip():
        raise ConfigurationError(f"{day}: expected 'HH:MM-HH:MM' or 'closed', got {value!r}")
    return {
        "open": normalize_time(open_raw),
        "close": normalize_time(close_raw),
        "closed": False,
    }


def convert_hours_to_week(raw: str | Mapping[str, Any] | None) -> dict[str, dict[str, Any]]:
    ranges = parse_hours_json(raw)
    week: dict[str, dict[str, Any]] = {}
    for day in WEEKDAY_KEYS:
        if day not in ranges:
            raise ConfigurationError(f"Hours column is missing weekday '{day}'")
        week[day] = _parse_range(day, ranges[day])
    return week


def format_week_ranges(week: Mapping[str, Mapping[str, Any]]) -> dict[str, str]:
    """Inverse of :func:`convert_hours_to_week`, used when writing the settings table."""
    result: dict[str, str] = {}
    for day in WEEKDAY_KEYS:
        entry = week[day]
        result[day] = "closed" if entry.get("closed") else f"{entry['open']}-{entry['close']}"
    return result
