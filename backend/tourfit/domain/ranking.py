from __future__ import annotations

import math
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .errors import InvalidConfiguration, InvalidDateRange
from .geo import is_valid_point, validate_point
from .models import ArtistRoute, Candidate, DiscoveryResult, GeoPoint, RouteFit, TourStop
from .routing import evaluate_route

# The search always reaches at least this far, whatever radius the caller asks for
MIN_SEARCH_RADIUS_MILES = 200.0

DateWindow = Tuple[date, date]


def effective_radius(user_radius: float) -> float:
    return max(user_radius, MIN_SEARCH_RADIUS_MILES)


def validate_date_window(date_window) -> DateWindow:
    try:
        start, end = date_window
    except (TypeError, ValueError) as exc:
        raise InvalidDateRange(f"date window must be a (start, end) pair: {date_window!r}") from exc
    if not isinstance(start, date) or not isinstance(end, date):
        raise InvalidDateRange(f"date window bounds must be dates: {date_window!r}")
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    if end < start:
        raise InvalidDateRange(f"date window ends before it starts: {start} > {end}")
    return start, end


def stops_in_window(stops: Iterable[TourStop], date_window: DateWindow) -> List[TourStop]:
    start, end = date_window
    usable = [s for s in stops if is_valid_point(s.location) and start <= s.date <= end]
    # sort is stable, so the first stop given for a date is the one kept
    kept: List[TourStop] = []
    for stop in sorted(usable, key=lambda s: s.date):
        if kept and kept[-1].date == stop.date:
            continue
        kept.append(stop)
    return kept


def best_fit(fits: Iterable[RouteFit]) -> Optional[RouteFit]:
    best: Optional[RouteFit] = None
    for fit in fits:
        if best is None or fit.routing_score < best.routing_score:
            best = fit
    return best


def rank_artist(
    venue: GeoPoint,
    route: ArtistRoute,
    date_window: DateWindow,
    search_radius: float,
) -> Optional[DiscoveryResult]:
    """Best routing opportunity of one artist, or None when nothing is in reach."""
    stops = stops_in_window(route.stops, date_window)
    if not stops:
        return None
    fits = [f for f in evaluate_route(stops, venue) if f.distance_to_venue <= search_radius]
    chosen = best_fit(fits)
    if chosen is None:
        return None
    return DiscoveryResult(artist_identity=route.identity, best_fit=chosen)


def sort_results(results: Iterable[DiscoveryResult]) -> List[DiscoveryResult]:
    return sorted(
        results,
        key=lambda r: (r.best_fit.routing_score, -r.best_fit.days_available),
    )


def rank(
    venue: GeoPoint,
    artists: Sequence[ArtistRoute],
    date_window: DateWindow,
    user_radius: float,
    limit: Optional[int] = None,
) -> List[DiscoveryResult]:
    validate_point(venue, "venue")
    window = validate_date_window(date_window)
    if user_radius is None or not math.isfinite(user_radius) or user_radius < 0:
        raise InvalidConfiguration(f"user_radius must be a finite number >= 0, got {user_radius}")
    if limit is not None and limit < 0:
        raise InvalidConfiguration(f"limit must be >= 0, got {limit}")

    radius = effective_radius(user_radius)
    per_artist: Dict[str, DiscoveryResult] = {}
    for route in artists:
        result = rank_artist(venue, route, window, radius)
        if result is None:
            continue
        # one result per identity, even if the caller lists an artist twice
        current = per_artist.get(route.identity)
        if current is None or result.best_fit.routing_score < current.best_fit.routing_score:
            per_artist[route.identity] = result

    ranked = sort_results(per_artist.values())
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def rank_candidate(
    candidate: Candidate,
    artists: Sequence[ArtistRoute],
    date_window: DateWindow,
    limit: Optional[int] = None,
) -> List[DiscoveryResult]:
    return rank(candidate.venue, artists, date_window, candidate.search_radius, limit=limit)
