from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine

from tourfit.domain.geo import coerce_point
from tourfit.domain.models import GeoPoint

from .tables import venues_table


VENUE_COLUMNS = [
    "name",
    "city",
    "region",
    "country",
    "latitude",
    "longitude",
    "capacity",
]


class VenuesRepository:
    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine is required")
        self.engine = engine

    def add_venue(self, venue: Dict[str, Any]) -> int:
        record = {col: venue.get(col) for col in VENUE_COLUMNS}
        for col in ("latitude", "longitude"):
            if record[col] is not None:
                record[col] = str(record[col])
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            result = conn.execute(
                insert(venues_table).values(**record, created_at=now, updated_at=now)
            )
            return result.inserted_primary_key[0]

    def get_venue(self, venue_id: int) -> Optional[Dict[str, Any]]:
        with self.engine.begin() as conn:
            row = conn.execute(
                select(venues_table).where(venues_table.c.id == venue_id)
            ).mappings().first()
            return dict(row) if row else None

    def list_venues(self) -> List[Dict[str, Any]]:
        with self.engine.begin() as conn:
            rows = conn.execute(select(venues_table).order_by(venues_table.c.id)).mappings().all()
        return [dict(row) for row in rows]


def resolve_venue_point(venue: Dict[str, Any]) -> GeoPoint:
    """Parse a stored venue's coordinates; raises ``InvalidCoordinate`` if unusable."""
    name = venue.get("name") or venue.get("id")
    return coerce_point(venue.get("latitude"), venue.get("longitude"), what=f"venue {name!r}")
