from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class TourStop:
    location: Optional[GeoPoint]
    date: date
    label: str = ""


@dataclass(frozen=True)
class Leg:
    origin: TourStop
    destination: TourStop
    days_between: int


@dataclass(frozen=True)
class Candidate:
    venue: GeoPoint
    search_radius: float


@dataclass(frozen=True)
class RouteFit:
    origin_stop: TourStop
    destination_stop: Optional[TourStop]
    distance_to_venue: float
    detour_distance: float
    days_available: int
    routing_score: float
    direct_distance: float = 0.0
    extra_distance: float = 0.0

    @property
    def is_single_stop(self) -> bool:
        return self.destination_stop is None


@dataclass(frozen=True)
class DiscoveryResult:
    artist_identity: str
    best_fit: RouteFit


@dataclass(frozen=True)
class TourGap:
    start_date: date
    end_date: date
    duration_days: int


@dataclass(frozen=True)
class ArtistRoute:
    identity: str
    stops: List[TourStop] = field(default_factory=list)
