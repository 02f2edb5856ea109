from __future__ import annotations

from datetime import date as date_type
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.engine import Engine

from tourfit.api.deps import get_engine, get_events_provider
from tourfit.api.serializers import serialize_result
from tourfit.domain.errors import RoutingError
from tourfit.domain.geo import find_nearby
from tourfit.infra.db.venues_repository import VenuesRepository, resolve_venue_point
from tourfit.providers.events.base import ArtistEventsProvider
from tourfit.services.discovery import DEFAULT_ARTISTS, DiscoveryService

router = APIRouter(tags=["discovery"])


@router.get("/venues/{venue_id}/discovery")
def discover_artists(
    venue_id: int,
    start: date_type,
    end: date_type,
    radius: float = Query(50.0, description="Search radius in miles"),
    artists: Optional[str] = Query(None, description="Comma separated artist names"),
    limit: int = Query(20, ge=1, le=200),
    engine: Engine = Depends(get_engine),
    provider: ArtistEventsProvider = Depends(get_events_provider),
):
    venue = _load_venue(engine, venue_id)
    names = [a.strip() for a in artists.split(",") if a.strip()] if artists else list(DEFAULT_ARTISTS)
    if not names:
        raise HTTPException(status_code=400, detail="No artists to query")
    try:
        point = resolve_venue_point(venue)
        run = DiscoveryService(provider).discover(
            point, names, start=start, end=end, radius=radius, limit=limit
        )
    except RoutingError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "venue": {"id": venue["id"], "name": venue["name"]},
        "data": [serialize_result(r) for r in run.results],
        "stats": {
            "artists_queried": run.artists_queried,
            "artists_with_events": run.artists_with_events,
            "artists_passing_near": len(run.results),
            "total_events_found": run.events_found,
            "stops_skipped": run.stops_skipped,
            "errors": [name for name, _ in run.errors],
        },
    }


@router.get("/venues/{venue_id}/nearby")
def nearby_venues(
    venue_id: int,
    radius: float = Query(100.0, ge=0, description="Radius in miles"),
    engine: Engine = Depends(get_engine),
):
    venue = _load_venue(engine, venue_id)
    try:
        point = resolve_venue_point(venue)
    except RoutingError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    others = [v for v in VenuesRepository(engine).list_venues() if v["id"] != venue_id]
    return [
        {"id": other["id"], "name": other["name"], "distance_miles": round(distance, 1)}
        for other, distance in find_nearby(point, others, radius)
    ]


def _load_venue(engine: Engine, venue_id: int) -> dict:
    venue = VenuesRepository(engine).get_venue(venue_id)
    if venue is None:
        raise HTTPException(status_code=404, detail=f"Venue {venue_id} not found")
    return venue
