from __future__ import annotations

from typing import Optional

from tourfit.domain.models import DiscoveryResult, RouteFit, TourGap, TourStop


def serialize_stop(stop: Optional[TourStop]) -> Optional[dict]:
    if stop is None:
        return None
    return {
        "label": stop.label,
        "date": stop.date.isoformat(),
        "lat": stop.location.latitude,
        "lon": stop.location.longitude,
    }


def serialize_fit(fit: RouteFit) -> dict:
    return {
        "origin": serialize_stop(fit.origin_stop),
        "destination": serialize_stop(fit.destination_stop),
        "distance_to_venue": round(fit.distance_to_venue, 1),
        "detour_distance": round(fit.detour_distance, 1),
        "extra_distance": round(fit.extra_distance, 1),
        "days_available": fit.days_available,
        "routing_score": fit.routing_score,
    }


def serialize_result(result: DiscoveryResult) -> dict:
    return {"artist": result.artist_identity, "route": serialize_fit(result.best_fit)}


def serialize_gap(gap: TourGap) -> dict:
    return {
        "start_date": gap.start_date.isoformat(),
        "end_date": gap.end_date.isoformat(),
        "duration_days": gap.duration_days,
    }
