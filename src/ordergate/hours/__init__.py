from __future__ import annotations

from .evaluator import (
    EvaluationResult,
    NextOpening,
    get_next_opening_time,
    get_next_ordering_time,
    get_restaurant_status,
    is_delivery_available,
    is_online_ordering_available,
    is_pickup_available,
    is_restaurant_open,
)
from .models import ConfigurationError, DaySchedule, ServiceHours, WeekSchedule, schedule_for

__all__ = [
    "ConfigurationError",
    "DaySchedule",
    "EvaluationResult",
    "NextOpening",
    "ServiceHours",
    "WeekSchedule",
    "get_next_opening_time",
    "get_next_ordering_time",
    "get_restaurant_status",
    "is_delivery_available",
    "is_online_ordering_available",
    "is_pickup_available",
    "is_restaurant_open",
    "schedule_for",
]
