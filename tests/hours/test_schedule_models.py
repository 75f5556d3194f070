import pytest
from conftest import CLOSED_DAY, DAYS, open_day, week

from ordergate.hours.models import (
    WEEKDAY_KEYS,
    ConfigurationError,
    DaySchedule,
    ServiceHours,
    WeekSchedule,
    schedule_for,
)


def test_weekday_indexing_starts_on_sunday(restaurant_config):
    restaurant_config["hours"]["general"]["sunday"] = open_day("12:00", "18:00")
    restaurant_config["hours"]["general"]["saturday"] = open_day("09:00", "23:00")
    assert schedule_for(restaurant_config, "general", 0).open_time == "12:00"
    assert schedule_for(restaurant_config, "general", 6).open_time == "09:00"
    assert schedule_for(restaurant_config, "general", 1).open_time == "10:00"


def test_round_trip_keeps_values_verbatim():
    raw = week(
        monday=open_day("07:05", "23:55"),
        saturday=open_day("10:30", "05:30"),
        sunday={"open": "11:00", "close": "15:00", "closed": True},
    )
    schedule = WeekSchedule.from_mapping(raw)
    for index, key in enumerate(WEEKDAY_KEYS):
        day = schedule.day(index)
        assert day.to_dict() == raw[key]


def test_service_hours_are_independent(restaurant_config):
    restaurant_config["hours"]["pickup"]["monday"] = CLOSED_DAY
    hours = ServiceHours.from_config(restaurant_config)
    assert hours.schedule_for("pickup", 1).closed
    assert not hours.schedule_for("general", 1).closed
    assert not hours.schedule_for("delivery", 1).closed


def test_missing_weekday_raises(restaurant_config):
    del restaurant_config["hours"]["delivery"]["thursday"]
    with pytest.raises(ConfigurationError, match="thursday"):
        ServiceHours.from_config(restaurant_config)


def test_missing_kind_raises(restaurant_config):
    del restaurant_config["hours"]["pickup"]
    with pytest.raises(ConfigurationError, match="pickup"):
        ServiceHours.from_config(restaurant_config)


@pytest.mark.parametrize("config", [None, {}, {"hours": "closed"}])
def test_missing_configuration_raises(config):
    with pytest.raises(ConfigurationError):
        ServiceHours.from_config(config)


def test_weekday_keys_are_case_insensitive():
    raw = {day.capitalize(): open_day("10:00", "20:00") for day in DAYS}
    assert len(WeekSchedule.from_mapping(raw).days) == 7


def test_unknown_weekday_key_raises():
    raw = week()
    raw["funday"] = open_day("10:00", "20:00")
    with pytest.raises(ConfigurationError, match="funday"):
        WeekSchedule.from_mapping(raw)


@pytest.mark.parametrize(
    "entry",
    [
        {"open": "10:00", "closed": False},
        {"open": "10", "close": "20:00", "closed": False},
        {"open": "9:00", "close": "20:00", "closed": False},
        {"open": "25:00", "close": "20:00", "closed": False},
        {"open": "10:00", "close": "20:00", "closed": "no"},
        "10:00-20:00",
    ],
)
def test_malformed_day_raises(entry):
    with pytest.raises(ConfigurationError):
        DaySchedule.from_mapping(entry)


def test_closed_day_ignores_times():
    day = DaySchedule.from_mapping({"open": "garbage", "close": "", "closed": True})
    assert day.closed
    assert day.open_time == "garbage"


def test_overnight_flag():
    assert DaySchedule("23:00", "05:00").is_overnight
    assert not DaySchedule("10:00", "20:00").is_overnight
    assert not DaySchedule("23:00", "05:00", closed=True).is_overnight


def test_unknown_kind_raises(restaurant_config):
    hours = ServiceHours.from_config(restaurant_config)
    with pytest.raises(ConfigurationError):
        hours.schedule_for("brunch", 1)
    with pytest.raises(ConfigurationError):
        hours.schedule_for("general", 7)
