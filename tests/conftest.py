import copy

import pytest

DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def week(open_time="10:00", close_time="20:00", closed=False, **overrides):
    schedule = {day: {"open": open_time, "close": close_time, "closed": closed} for day in DAYS}
    for day, value in overrides.items():
        schedule[day] = value
    return schedule


def open_day(open_time, close_time):
    return {"open": open_time, "close": close_time, "closed": False}


CLOSED_DAY = {"open": "", "close": "", "closed": True}

ZONES = [
    {"maxDistance": 4, "fee": 0},
    {"maxDistance": 5, "fee": 4},
    {"maxDistance": 8, "fee": 7, "minimumOrder": 15.0},
    {"maxDistance": 10, "fee": 10, "minimumOrder": 20.0},
]

BASE_CONFIG = {
    "name": "Pizzeria Antonio",
    "hours": {
        "general": week(),
        "pickup": week(),
        "delivery": week(),
    },
    "services": {"hasPickup": True, "hasDelivery": True, "hasDineIn": True},
    "delivery": {
        "zones": ZONES,
        "location": {"lat": 60.9832, "lng": 25.6608},
    },
}


@pytest.fixture
def restaurant_config():
    return copy.deepcopy(BASE_CONFIG)
