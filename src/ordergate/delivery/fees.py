from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from loguru import logger

from ordergate.delivery.models import (
    OUTSIDE_SERVICE_AREA,
    DeliveryQuote,
    DeliveryZone,
    ServiceArea,
    ZoneDescription,
    parse_zones,
)


class InvalidInputError(Exception):
    pass


def _validate_distance(distance_km: Any) -> float:
    if isinstance(distance_km, bool) or not isinstance(distance_km, (int, float)):
        raise InvalidInputError(f"Distance must be a number, got {distance_km!r}")
    try:
        distance = float(distance_km)
    except OverflowError as err:
        raise InvalidInputError(f"Distance is out of range: {distance_km}") from err
    if math.isnan(distance):
        raise InvalidInputError("Distance is NaN")
    if distance < 0:
        raise InvalidInputError(f"Distance must be non-negative, got {distance_km}")
    return distance


def quote_delivery(
    distance_km: float,
    zones: Sequence[DeliveryZone] | Sequence[dict],
) -> DeliveryQuote | ServiceArea:
    """Find the band covering ``distance_km``.

    Bands are inclusive of their own upper bound, so a distance equal to a
    boundary lands in the cheaper band. The minimum order amount is reported
    as-is; comparing it with the cart subtotal is up to the caller.
    """
    distance = _validate_distance(distance_km)
    for index, zone in enumerate(parse_zones(zones)):
        if distance <= zone.max_distance_km:
            return DeliveryQuote(
                zone_index=index,
                fee=zone.fee,
                minimum_order=zone.minimum_order,
                zone=zone,
            )
    logger.debug("Distance {:.2f} km is outside every delivery band", distance)
    return OUTSIDE_SERVICE_AREA


def calculate_delivery_fee(
    distance_km: float,
    zones: Sequence[DeliveryZone] | Sequence[dict],
) -> float | ServiceArea:
    quote = quote_delivery(distance_km, zones)
    if quote is OUTSIDE_SERVICE_AREA:
        return OUTSIDE_SERVICE_AREA
    return quote.fee


def describe_zone(
    distance_km: float,
    zones: Sequence[DeliveryZone] | Sequence[dict],
) -> ZoneDescription:
    parsed = parse_zones(zones)
    quote = quote_delivery(distance_km, parsed)
    if quote is OUTSIDE_SERVICE_AREA:
        return ZoneDescription(kind="outside")
    lower = parsed[quote.zone_index - 1].max_distance_km if quote.zone_index else 0.0
    return ZoneDescription(
        kind="standard" if quote.zone_index == 0 else "extended",
        lower_km=lower,
        upper_km=quote.zone.max_distance_km,
    )
