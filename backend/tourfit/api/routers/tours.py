from __future__ import annotations

from datetime import date as date_type
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.engine import Engine

from tourfit.api.deps import get_engine
from tourfit.api.serializers import serialize_gap
from tourfit.domain.errors import InvalidCoordinate, InvalidDateRange, RoutingError
from tourfit.domain.gaps import find_gaps, venues_for_gap
from tourfit.domain.geo import coerce_point
from tourfit.domain.models import TourGap, TourStop
from tourfit.infra.db.venues_repository import VenuesRepository

router = APIRouter(tags=["tours"])


class StopIn(BaseModel):
    date: date_type
    label: str = ""
    lat: Optional[float] = None
    lon: Optional[float] = None


class GapsRequest(BaseModel):
    tour_start: date_type
    tour_end: date_type
    min_gap_days: int = 2
    stops: List[StopIn] = Field(default_factory=list)


class GapVenuesRequest(BaseModel):
    start_date: date_type
    end_date: date_type
    radius: float = 100.0
    stops: List[StopIn] = Field(default_factory=list)


@router.post("/tours/gaps")
def tour_gaps(payload: GapsRequest):
    # gaps only need dates; a stop without coordinates still blocks its day
    stops = []
    for item in payload.stops:
        try:
            stops.append(_to_stop(item, require_location=False))
        except InvalidCoordinate:
            stops.append(TourStop(location=None, date=item.date, label=item.label))
    stops.sort(key=lambda s: s.date)
    try:
        gaps = find_gaps(stops, payload.tour_start, payload.tour_end, payload.min_gap_days)
    except RoutingError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [serialize_gap(gap) for gap in gaps]


@router.post("/tours/gaps/venues")
def gap_venues(payload: GapVenuesRequest, engine: Engine = Depends(get_engine)):
    stops = []
    for item in payload.stops:
        try:
            stops.append(_to_stop(item, require_location=True))
        except InvalidCoordinate:
            continue
    try:
        if payload.end_date < payload.start_date:
            raise InvalidDateRange(f"gap ends before it starts: {payload.start_date} > {payload.end_date}")
        gap = TourGap(
            start_date=payload.start_date,
            end_date=payload.end_date,
            duration_days=(payload.end_date - payload.start_date).days + 1,
        )
        venues = venues_for_gap(gap, stops, VenuesRepository(engine).list_venues(), payload.radius)
    except RoutingError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return [{"id": v["id"], "name": v["name"], "city": v.get("city")} for v in venues]


def _to_stop(item: StopIn, *, require_location: bool) -> TourStop:
    if require_location or (item.lat is not None and item.lon is not None):
        location = coerce_point(item.lat, item.lon, what=f"stop {item.label or item.date}")
    else:
        location = None
    return TourStop(location=location, date=item.date, label=item.label)
