from __future__ import annotations

from typing import Iterable, List, Tuple

from tourfit.domain.errors import InvalidCoordinate
from tourfit.domain.geo import coerce_point
from tourfit.domain.models import TourStop
from tourfit.providers.events.base import ArtistEvent


def stop_label(event: ArtistEvent) -> str:
    parts = [p for p in (event.venue_city, event.venue_region) if p]
    if parts:
        return ", ".join(parts)
    return event.venue_name or ""


def build_tour_stops(events: Iterable[ArtistEvent]) -> Tuple[List[TourStop], int]:
    """Turn raw events into a date-sorted route.

    Events with unusable coordinates are dropped and counted. When two events
    fall on the same day the one seen first is kept.
    """
    stops: List[TourStop] = []
    skipped = 0
    for event in events:
        try:
            location = coerce_point(event.lat, event.lon, what=f"event {event.external_id}")
        except InvalidCoordinate:
            skipped += 1
            continue
        stops.append(TourStop(location=location, date=event.starts_at.date(), label=stop_label(event)))

    stops.sort(key=lambda s: s.date)
    deduped: List[TourStop] = []
    for stop in stops:
        if deduped and deduped[-1].date == stop.date:
            continue
        deduped.append(stop)
    return deduped, skipped
