from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ordergate.hours.models import ConfigurationError


class ServiceArea(Enum):
    OUTSIDE = "outside_service_area"

    def __repr__(self) -> str:
        return "OUTSIDE_SERVICE_AREA"


OUTSIDE_SERVICE_AREA = ServiceArea.OUTSIDE


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class DeliveryZone:
    max_distance_km: float
    fee: float
    minimum_order: float | None = None

    def __post_init__(self) -> None:
        for label, value in (("maxDistance", self.max_distance_km), ("fee", self.fee)):
            if not _is_number(value) or value < 0 or math.isnan(value):
                raise ConfigurationError(f"Delivery zone {label} must be a non-negative number")
        if self.minimum_order is not None and (
            not _is_number(self.minimum_order) or self.minimum_order < 0
        ):
            raise ConfigurationError("Delivery zone minimumOrder must be a non-negative number")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"maxDistance": self.max_distance_km, "fee": self.fee}
        if self.minimum_order is not None:
            payload["minimumOrder"] = self.minimum_order
        return payload

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> DeliveryZone:
        if not isinstance(raw, Mapping):
            raise ConfigurationError(f"Delivery zone must be a mapping, got {raw!r}")
        max_distance = raw.get("maxDistance", raw.get("max_distance_km"))
        fee = raw.get("fee")
        minimum = raw.get("minimumOrder", raw.get("minimum_order"))
        if max_distance is None or fee is None:
            raise ConfigurationError("Delivery zone needs maxDistance and fee")
        return cls(max_distance_km=max_distance, fee=fee, minimum_order=minimum)


@dataclass(frozen=True)
class DeliveryQuote:
    zone_index: int
    fee: float
    minimum_order: float | None
    zone: DeliveryZone


@dataclass(frozen=True)
class ZoneDescription:
    kind: str  # standard | extended | outside
    lower_km: float | None = None
    upper_km: float | None = None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_zones(raw: Any) -> tuple[DeliveryZone, ...]:
    if raw is None:
        return ()
    if isinstance(raw, (str, bytes, Mapping)):
        raise ConfigurationError("delivery.zones must be a list")
    zones = tuple(
        zone if isinstance(zone, DeliveryZone) else DeliveryZone.from_mapping(zone) for zone in raw
    )
    validate_zones(zones)
    return zones


def validate_zones(zones: tuple[DeliveryZone, ...] | list[DeliveryZone]) -> None:
    previous: float | None = None
    for zone in zones:
        if previous is not None and zone.max_distance_km <= previous:
            raise ConfigurationError(
                "Delivery zones must be sorted by strictly ascending maxDistance"
            )
        previous = zone.max_distance_km
