from __future__ import annotations

import math

from schemas.hospital import Coordinate

EARTH_RADIUS_M: float = 6_371_000.0
# ~4.8 km/h
WALKING_METERS_PER_MINUTE: float = 80.0

GOOGLE_MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"


def distance_meters(a: Coordinate, b: Coordinate) -> float:
    """Great-circle (haversine) distance between two coordinates, in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


def walk_minutes(
    distance_m: float | None,
    meters_per_minute: float = WALKING_METERS_PER_MINUTE,
) -> int | None:
    if distance_m is None or not math.isfinite(distance_m):
        return None
    # Halves round up.
    return int(math.floor(distance_m / meters_per_minute + 0.5))


def walking_directions_url(origin: Coordinate, destination: Coordinate) -> str:
    return (
        f"{GOOGLE_MAPS_DIRECTIONS_URL}?api=1"
        f"&origin={origin.latitude},{origin.longitude}"
        f"&destination={destination.latitude},{destination.longitude}"
        "&travelmode=walking"
    )
