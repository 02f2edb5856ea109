from __future__ import annotations

import math
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .errors import InvalidCoordinate
from .models import GeoPoint

EARTH_RADIUS_MILES = 3958.8
# 1 degree of latitude in miles; longitude degrees shrink with cos(lat)
MILES_PER_LAT_DEGREE = 68.707


def distance_miles(a: GeoPoint, b: GeoPoint) -> float:
    if a == b:
        return 0.0
    phi1, phi2 = math.radians(a.latitude), math.radians(b.latitude)
    dphi = math.radians(b.latitude - a.latitude)
    dlambda = math.radians(b.longitude - a.longitude)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_MILES * c


def is_valid_point(point: Optional[GeoPoint]) -> bool:
    if point is None:
        return False
    lat, lon = point.latitude, point.longitude
    if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def validate_point(point: Optional[GeoPoint], what: str = "location") -> GeoPoint:
    if not is_valid_point(point):
        raise InvalidCoordinate(f"{what} has missing or out-of-range coordinates: {point!r}")
    return point


def _parse_coordinate(value: Any, name: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidCoordinate(f"{name} is missing")
    if isinstance(value, bool):
        raise InvalidCoordinate(f"{name} is not numeric: {value!r}")
    try:
        parsed = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidCoordinate(f"{name} is not numeric: {value!r}") from exc
    if not math.isfinite(parsed):
        raise InvalidCoordinate(f"{name} is not finite: {value!r}")
    return parsed


def coerce_point(latitude: Any, longitude: Any, what: str = "location") -> GeoPoint:
    """Parse raw latitude/longitude values (strings or numbers) into a valid GeoPoint."""
    point = GeoPoint(
        latitude=_parse_coordinate(latitude, "latitude"),
        longitude=_parse_coordinate(longitude, "longitude"),
    )
    return validate_point(point, what)


def bounding_box(center: GeoPoint, radius_miles: float) -> Tuple[float, float, float, float]:
    """Return ``(min_lat, max_lat, min_lon, max_lon)`` enclosing ``radius_miles`` around ``center``."""
    lat_delta = radius_miles / MILES_PER_LAT_DEGREE
    cos_lat = math.cos(math.radians(center.latitude))
    if cos_lat <= 1e-9:
        lon_delta = 180.0
    else:
        lon_delta = min(180.0, radius_miles / (MILES_PER_LAT_DEGREE * cos_lat))
    return (
        max(-90.0, center.latitude - lat_delta),
        min(90.0, center.latitude + lat_delta),
        center.longitude - lon_delta,
        center.longitude + lon_delta,
    )


def find_nearby(
    center: GeoPoint,
    venues: Iterable[Mapping[str, Any]],
    radius_miles: float,
) -> List[Tuple[Mapping[str, Any], float]]:
    matches: List[Tuple[Mapping[str, Any], float]] = []
    for venue in venues:
        try:
            point = coerce_point(venue.get("latitude"), venue.get("longitude"))
        except InvalidCoordinate:
            continue
        distance = distance_miles(center, point)
        if distance <= radius_miles:
            matches.append((venue, distance))
    matches.sort(key=lambda item: item[1])
    return matches
