import json

import pytest

from ordergate.hours.models import ConfigurationError, WeekSchedule
from ordergate.hours.utils import (
    convert_hours_to_week,
    format_week_ranges,
    normalize_time,
    parse_hours_json,
)

DB_HOURS = json.dumps(
    {
        "monday": "10:30-21:30",
        "tuesday": "10:30-21:30",
        "wednesday": "closed",
        "thursday": "10:30-21:30",
        "friday": "10:30-22:00",
        "saturday": "10:30-05:30",
        "sunday": "",
    }
)


def test_normalize_time_pads_hours():
    assert normalize_time("9:05") == "09:05"
    assert normalize_time(" 23:59 ") == "23:59"


@pytest.mark.parametrize("raw", ["24:00", "10:60", "10", "ten:30", "10:5", ""])
def test_normalize_time_rejects_invalid(raw):
    with pytest.raises(ConfigurationError):
        normalize_time(raw)


def test_convert_hours_to_week():
    week = convert_hours_to_week(DB_HOURS)
    assert week["monday"] == {"open": "10:30", "close": "21:30", "closed": False}
    assert week["wednesday"]["closed"] is True
    assert week["sunday"]["closed"] is True
    assert week["saturday"] == {"open": "10:30", "close": "05:30", "closed": False}
    schedule = WeekSchedule.from_mapping(week)
    assert schedule.day(6).is_overnight


def test_convert_accepts_mapping():
    payload = json.loads(DB_HOURS)
    assert convert_hours_to_week(payload) == convert_hours_to_week(DB_HOURS)


def test_invalid_json_raises():
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        parse_hours_json("{monday: 10-20")


def test_json_array_raises():
    with pytest.raises(ConfigurationError):
        parse_hours_json('["10:00-20:00"]')


def test_missing_weekday_in_column_raises():
    payload = json.loads(DB_HOURS)
    del payload["friday"]
    with pytest.raises(ConfigurationError, match="friday"):
        convert_hours_to_week(payload)


def test_half_open_range_raises():
    payload = json.loads(DB_HOURS)
    payload["monday"] = "10:30-"
    with pytest.raises(ConfigurationError, match="monday"):
        convert_hours_to_week(payload)


def test_format_week_ranges_reverses_conversion():
    week = convert_hours_to_week(DB_HOURS)
    ranges = format_week_ranges(week)
    assert ranges["monday"] == "10:30-21:30"
    assert ranges["sunday"] == "closed"
    assert convert_hours_to_week(ranges) == week
