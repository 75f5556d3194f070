from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from ordergate.config import default_timezone
from ordergate.hours.models import (
    WEEKDAY_NAMES,
    ConfigurationError,
    DaySchedule,
    ServiceHours,
)

LOOKAHEAD_DAYS = 7


@dataclass(frozen=True)
class NextOpening:
    weekday: str
    weekday_index: int
    time: str
    days_ahead: int

    def to_dict(self) -> dict[str, str]:
        return {"weekday": self.weekday, "time": self.time}


@dataclass(frozen=True)
class EvaluationResult:
    is_open: bool
    is_ordering_open: bool
    is_pickup_open: bool
    is_delivery_open: bool
    next_opening: NextOpening | None = None
    next_ordering: NextOpening | None = None
    evaluated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["next_opening"] = self.next_opening.to_dict() if self.next_opening else None
        payload["next_ordering"] = self.next_ordering.to_dict() if self.next_ordering else None
        payload["evaluated_at"] = self.evaluated_at.isoformat() if self.evaluated_at else None
        return payload


@dataclass(frozen=True)
class LocalClock:
    weekday: int  # 0=Sunday
    minutes: int
    moment: datetime


def resolve_timezone(tz: str | ZoneInfo | None = None) -> ZoneInfo:
    if isinstance(tz, ZoneInfo):
        return tz
    name = tz or default_timezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as err:
        raise ConfigurationError(f"Unknown reference timezone: {name!r}") from err


def local_clock(now: datetime | None = None, tz: str | ZoneInfo | None = None) -> LocalClock:
    """Resolve weekday and minutes since midnight in the restaurant's zone.

    Aware datetimes are converted to the reference zone. Naive datetimes are
    taken as wall-clock time already expressed in that zone.
    """
    zone = resolve_timezone(tz)
    if now is None:
        moment = datetime.now(zone)
    elif now.tzinfo is None:
        moment = now.replace(tzinfo=zone)
    else:
        moment = now.astimezone(zone)
    weekday = (moment.weekday() + 1) % 7
    return LocalClock(weekday=weekday, minutes=moment.hour * 60 + moment.minute, moment=moment)


def is_within_window(day: DaySchedule, minutes: int) -> bool:
    if day.closed:
        return False
    open_min = day.open_minutes
    close_min = day.close_minutes
    if close_min >= open_min:
        return open_min <= minutes <= close_min
    # Overnight: the tail after midnight is governed by today's own close time.
    return minutes >= open_min or minutes <= close_min


def is_kind_open(
    config: Any,
    kind: str,
    now: datetime | None = None,
    tz: str | ZoneInfo | None = None,
) -> bool:
    hours = ServiceHours.from_config(config)
    clock = local_clock(now, tz)
    today = hours.schedule_for(kind, clock.weekday)
    result = is_within_window(today, clock.minutes)
    logger.debug(
        "Window check kind={} weekday={} minutes={} day={} open={}",
        kind,
        clock.weekday,
        clock.minutes,
        today,
        result,
    )
    return result


def is_restaurant_open(config: Any, now: datetime | None = None, tz=None) -> bool:
    return is_kind_open(config, "general", now, tz)


def is_pickup_available(config: Any, now: datetime | None = None, tz=None) -> bool:
    return is_kind_open(config, "pickup", now, tz)


def is_delivery_available(config: Any, now: datetime | None = None, tz=None) -> bool:
    return is_kind_open(config, "delivery", now, tz)


def is_online_ordering_available(config: Any, now: datetime | None = None, tz=None) -> bool:
    hours = ServiceHours.from_config(config)
    return is_pickup_available(hours, now, tz) or is_delivery_available(hours, now, tz)


def _opening(weekday: int, day: DaySchedule, days_ahead: int) -> NextOpening:
    return NextOpening(
        weekday=WEEKDAY_NAMES[weekday],
        weekday_index=weekday,
        time=day.open_time,
        days_ahead=days_ahead,
    )


def get_next_opening_time(
    config: Any,
    now: datetime | None = None,
    tz: str | ZoneInfo | None = None,
    kind: str = "general",
) -> NextOpening | None:
    hours = ServiceHours.from_config(config)
    clock = local_clock(now, tz)
    today = hours.schedule_for(kind, clock.weekday)
    if not today.closed and clock.minutes < today.open_minutes:
        return _opening(clock.weekday, today, 0)
    for offset in range(1, LOOKAHEAD_DAYS + 1):
        weekday = (clock.weekday + offset) % 7
        day = hours.schedule_for(kind, weekday)
        if not day.closed:
            return _opening(weekday, day, offset)
    logger.debug("No {} opening within {} days", kind, LOOKAHEAD_DAYS)
    return None


def get_next_ordering_time(
    config: Any,
    now: datetime | None = None,
    tz: str | ZoneInfo | None = None,
) -> NextOpening | None:
    hours = ServiceHours.from_config(config)
    clock = local_clock(now, tz)
    for kind in ("pickup", "delivery"):
        today = hours.schedule_for(kind, clock.weekday)
        if not today.closed and clock.minutes < today.open_minutes:
            return _opening(clock.weekday, today, 0)
    for offset in range(1, LOOKAHEAD_DAYS + 1):
        weekday = (clock.weekday + offset) % 7
        pickup = hours.schedule_for("pickup", weekday)
        delivery = hours.schedule_for("delivery", weekday)
        if not pickup.closed:
            return _opening(weekday, pickup, offset)
        if not delivery.closed:
            return _opening(weekday, delivery, offset)
    logger.debug("No ordering window within {} days", LOOKAHEAD_DAYS)
    return None


def get_restaurant_status(
    config: Any,
    now: datetime | None = None,
    tz: str | ZoneInfo | None = None,
) -> EvaluationResult:
    hours = ServiceHours.from_config(config)
    moment = local_clock(now, tz).moment
    pickup_open = is_pickup_available(hours, moment, tz)
    delivery_open = is_delivery_available(hours, moment, tz)
    return EvaluationResult(
        is_open=is_restaurant_open(hours, moment, tz),
        is_ordering_open=pickup_open or delivery_open,
        is_pickup_open=pickup_open,
        is_delivery_open=delivery_open,
        next_opening=get_next_opening_time(hours, moment, tz),
        next_ordering=get_next_ordering_time(hours, moment, tz),
        evaluated_at=moment,
    )
