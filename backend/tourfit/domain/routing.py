from __future__ import annotations

from typing import Iterable, Iterator, Optional, Sequence

from .errors import InvalidDateRange
from .geo import distance_miles
from .models import GeoPoint, Leg, RouteFit, TourStop
from .scoring import routing_score

SINGLE_STOP_DAYS_AVAILABLE = 1


def segment_route(stops: Sequence[TourStop]) -> Iterator[Leg]:
    """Yield consecutive legs of a date-sorted route.

    Same-day pairs cannot host an extra show and are skipped. A stop dated
    before its predecessor raises ``InvalidDateRange``.
    """
    for previous, current in zip(stops, stops[1:]):
        days_between = (current.date - previous.date).days
        if days_between < 0:
            raise InvalidDateRange(
                f"stops must be sorted by date: {current.date} follows {previous.date}"
            )
        if days_between < 1:
            continue
        yield Leg(origin=previous, destination=current, days_between=days_between)


def evaluate_leg(leg: Leg, venue: GeoPoint) -> RouteFit:
    direct = distance_miles(leg.origin.location, leg.destination.location)
    from_start = distance_miles(leg.origin.location, venue)
    from_end = distance_miles(venue, leg.destination.location)
    detour = from_start + from_end
    extra = detour - direct
    distance_to_venue = min(from_start, from_end)
    return RouteFit(
        origin_stop=leg.origin,
        destination_stop=leg.destination,
        distance_to_venue=distance_to_venue,
        detour_distance=detour,
        days_available=leg.days_between,
        routing_score=routing_score(distance_to_venue, extra, leg.days_between),
        direct_distance=direct,
        extra_distance=extra,
    )


def evaluate_single_stop(stop: TourStop, venue: GeoPoint) -> RouteFit:
    distance_to_venue = distance_miles(stop.location, venue)
    # no next stop to anchor a one-way detour, so assume a round trip
    detour = distance_to_venue * 2
    return RouteFit(
        origin_stop=stop,
        destination_stop=None,
        distance_to_venue=distance_to_venue,
        detour_distance=detour,
        days_available=SINGLE_STOP_DAYS_AVAILABLE,
        routing_score=routing_score(distance_to_venue, detour, SINGLE_STOP_DAYS_AVAILABLE),
        direct_distance=0.0,
        extra_distance=detour,
    )


def evaluate(
    venue: GeoPoint,
    leg: Optional[Leg] = None,
    single_stop: Optional[TourStop] = None,
) -> RouteFit:
    if (leg is None) == (single_stop is None):
        raise ValueError("exactly one of leg or single_stop is required")
    if leg is not None:
        return evaluate_leg(leg, venue)
    return evaluate_single_stop(single_stop, venue)


def evaluate_route(stops: Iterable[TourStop], venue: GeoPoint) -> list[RouteFit]:
    """Evaluate every leg of a sorted route, or the single stop when there is only one."""
    stops = list(stops)
    if not stops:
        return []
    if len(stops) == 1:
        return [evaluate_single_stop(stops[0], venue)]
    return [evaluate_leg(leg, venue) for leg in segment_route(stops)]
