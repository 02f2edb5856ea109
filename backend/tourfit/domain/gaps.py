from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .errors import InvalidConfiguration, InvalidDateRange
from .geo import find_nearby
from .models import TourGap, TourStop

ONE_DAY = timedelta(days=1)


def find_gaps(
    stops: Sequence[TourStop],
    tour_start: date,
    tour_end: date,
    min_gap_days: int,
) -> List[TourGap]:
    """Open date ranges of at least ``min_gap_days`` in a tour's schedule.

    ``stops`` must be sorted by date. The leading range before the first stop
    and the trailing range after the last one count as gaps too.
    """
    if tour_end < tour_start:
        raise InvalidDateRange(f"tour ends before it starts: {tour_start} > {tour_end}")
    if min_gap_days < 1:
        raise InvalidConfiguration(f"min_gap_days must be >= 1, got {min_gap_days}")

    if not stops:
        length = (tour_end - tour_start).days + 1
        if length >= min_gap_days:
            return [TourGap(start_date=tour_start, end_date=tour_end, duration_days=length)]
        return []

    gaps: List[TourGap] = []
    first, last = stops[0].date, stops[-1].date

    leading = (first - tour_start).days
    if leading >= min_gap_days:
        gaps.append(TourGap(start_date=tour_start, end_date=first - ONE_DAY, duration_days=leading))

    for current, following in zip(stops, stops[1:]):
        duration = (following.date - current.date).days - 1
        if duration >= min_gap_days:
            gaps.append(
                TourGap(
                    start_date=current.date + ONE_DAY,
                    end_date=following.date - ONE_DAY,
                    duration_days=duration,
                )
            )

    trailing = (tour_end - last).days
    if trailing >= min_gap_days:
        gaps.append(TourGap(start_date=last + ONE_DAY, end_date=tour_end, duration_days=trailing))
    return gaps


def gap_anchors(gap: TourGap, stops: Sequence[TourStop]) -> tuple[Optional[TourStop], Optional[TourStop]]:
    """Last stop before the gap and first stop after it."""
    before: Optional[TourStop] = None
    after: Optional[TourStop] = None
    for stop in sorted(stops, key=lambda s: s.date):
        if stop.date < gap.start_date:
            before = stop
        elif stop.date > gap.end_date:
            after = stop
            break
    return before, after


def venues_for_gap(
    gap: TourGap,
    stops: Sequence[TourStop],
    venues: Sequence[Mapping[str, Any]],
    radius_miles: float,
) -> List[Mapping[str, Any]]:
    if radius_miles < 0:
        raise InvalidConfiguration(f"radius_miles must be >= 0, got {radius_miles}")
    anchors = [stop for stop in gap_anchors(gap, stops) if stop is not None]
    nearest: Dict[int, tuple[float, Mapping[str, Any]]] = {}
    for anchor in anchors:
        for venue, distance in find_nearby(anchor.location, venues, radius_miles):
            key = id(venue)
            if key not in nearest or distance < nearest[key][0]:
                nearest[key] = (distance, venue)
    ranked = sorted(nearest.values(), key=lambda item: item[0])
    return [venue for _, venue in ranked]
