from __future__ import annotations

from .fees import InvalidInputError, calculate_delivery_fee, describe_zone, quote_delivery
from .models import (
    OUTSIDE_SERVICE_AREA,
    DeliveryQuote,
    DeliveryZone,
    GeoPoint,
    ZoneDescription,
    parse_zones,
)

__all__ = [
    "OUTSIDE_SERVICE_AREA",
    "DeliveryQuote",
    "DeliveryZone",
    "GeoPoint",
    "InvalidInputError",
    "ZoneDescription",
    "calculate_delivery_fee",
    "describe_zone",
    "parse_zones",
    "quote_delivery",
]
