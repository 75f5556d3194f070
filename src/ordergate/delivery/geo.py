"""Geospatial helpers used to turn a geocoded address into a delivery distance."""

from __future__ import annotations

import math

from ordergate.delivery.models import GeoPoint

EARTH_RADIUS_KM = 6371.0

# Approximate bounding box of Finland (lat, lng).
FINLAND_BOUNDS = ((59.5, 70.1), (19.5, 31.6))


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_from(origin: GeoPoint, lat: float, lng: float) -> float:
    return haversine_km(origin.lat, origin.lng, lat, lng)


def is_within_finland(lat: float, lng: float) -> bool:
    (lat_min, lat_max), (lng_min, lng_max) = FINLAND_BOUNDS
    return lat_min <= lat <= lat_max and lng_min <= lng <= lng_max
