from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# 0=Sunday matches the weekday numbering used by the evaluator's clock helpers.
WEEKDAY_KEYS: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)
WEEKDAY_NAMES: tuple[str, ...] = tuple(key.capitalize() for key in WEEKDAY_KEYS)

SCHEDULE_KINDS: tuple[str, ...] = ("general", "pickup", "delivery")


class ConfigurationError(Exception):
    pass


def weekday_index(key: str) -> int:
    try:
        return WEEKDAY_KEYS.index(key.strip().lower())
    except ValueError as err:
        raise ConfigurationError(f"Unknown weekday: {key!r}") from err


@dataclass(frozen=True)
class DaySchedule:
    open_time: str
    close_time: str
    closed: bool = False

    @property
    def open_minutes(self) -> int:
        return to_minutes(self.open_time)

    @property
    def close_minutes(self) -> int:
        return to_minutes(self.close_time)

    @property
    def is_overnight(self) -> bool:
        return not self.closed and self.close_minutes < self.open_minutes

    def to_dict(self) -> dict[str, Any]:
        return {"open": self.open_time, "close": self.close_time, "closed": self.closed}

    @classmethod
    def from_mapping(cls, raw: Any, label: str = "day") -> DaySchedule:
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"{label}: expected mapping with open/close/closed")
        closed = raw.get("closed", False)
        if not isinstance(closed, bool):
            raise ConfigurationError(f"{label}: 'closed' must be a boolean, got {closed!r}")
        open_raw = raw.get("open")
        close_raw = raw.get("close")
        if closed:
            # Times of a closed day are kept verbatim and never evaluated.
            return cls(open_time=open_raw or "", close_time=close_raw or "", closed=True)
        if not open_raw or not close_raw:
            raise ConfigurationError(f"{label}: open and close are required for an open day")
        if not _is_hhmm(open_raw) or not _is_hhmm(close_raw):
            raise ConfigurationError(f"{label}: times must be zero-padded HH:MM")
        return cls(open_time=open_raw, close_time=close_raw, closed=False)


def to_minutes(value: str) -> int:
    try:
        hour, minute = value.split(":", 1)
        return int(hour) * 60 + int(minute)
    except (AttributeError, ValueError) as err:
        raise ConfigurationError(f"Invalid time of day: {value!r}") from err


def _is_hhmm(value: Any) -> bool:
    if not isinstance(value, str) or len(value) != 5 or value[2] != ":":
        return False
    hour, minute = value[:2], value[3:]
    if not (hour.isdigit() and minute.isdigit()):
        return False
    return int(hour) < 24 and int(minute) < 60


@dataclass(frozen=True)
class WeekSchedule:
    """Seven day schedules indexed 0=Sunday..6=Saturday."""

    days: tuple[DaySchedule, ...]

    def __post_init__(self) -> None:
        if len(self.days) != len(WEEKDAY_KEYS):
            raise ConfigurationError(
                f"Week schedule needs {len(WEEKDAY_KEYS)} days, got {len(self.days)}"
            )

    def day(self, index: int) -> DaySchedule:
        if not 0 <= index < len(WEEKDAY_KEYS):
            raise ConfigurationError(f"Weekday index out of range: {index}")
        return self.days[index]

    def to_dict(self) -> dict[str, dict[str, Any]]:
        return {key: self.days[idx].to_dict() for idx, key in enumerate(WEEKDAY_KEYS)}

    @classmethod
    def from_mapping(cls, raw: Any, kind: str = "schedule") -> WeekSchedule:
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"hours.{kind}: expected weekday mapping")
        normalized = {str(key).strip().lower(): value for key, value in raw.items()}
        unknown = set(normalized) - set(WEEKDAY_KEYS)
        if unknown:
            raise ConfigurationError(f"hours.{kind}: unknown weekday keys {sorted(unknown)}")
        days: list[DaySchedule] = []
        for key in WEEKDAY_KEYS:
            if key not in normalized:
                raise ConfigurationError(f"hours.{kind}: missing weekday '{key}'")
            days.append(DaySchedule.from_mapping(normalized[key], label=f"hours.{kind}.{key}"))
        return cls(days=tuple(days))


@dataclass(frozen=True)
class ServiceHours:
    general: WeekSchedule
    pickup: WeekSchedule
    delivery: WeekSchedule

    def schedule_for(self, kind: str, weekday: int) -> DaySchedule:
        return self.week(kind).day(weekday)

    def week(self, kind: str) -> WeekSchedule:
        if kind not in SCHEDULE_KINDS:
            raise ConfigurationError(f"Unknown schedule kind: {kind!r}")
        return getattr(self, kind)

    def to_dict(self) -> dict[str, dict[str, dict[str, Any]]]:
        return {kind: self.week(kind).to_dict() for kind in SCHEDULE_KINDS}

    @classmethod
    def from_config(cls, config: Any) -> ServiceHours:
        """Build hours from a configuration object carrying ``hours.general|pickup|delivery``."""
        if config is None:
            raise ConfigurationError("Restaurant configuration is missing")
        if isinstance(config, ServiceHours):
            return config
        hours = getattr(config, "hours", None)
        if isinstance(hours, ServiceHours):
            return hours
        if isinstance(config, Mapping):
            hours = config.get("hours")
        if not isinstance(hours, Mapping):
            raise ConfigurationError("Configuration has no 'hours' section")
        weeks = {}
        for kind in SCHEDULE_KINDS:
            if kind not in hours:
                raise ConfigurationError(f"Configuration is missing hours.{kind}")
            weeks[kind] = WeekSchedule.from_mapping(hours[kind], kind=kind)
        return cls(**weeks)


def schedule_for(config: Any, kind: str, weekday: int) -> DaySchedule:
    return ServiceHours.from_config(config).schedule_for(kind, weekday)
