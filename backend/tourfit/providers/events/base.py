from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Protocol


@dataclass
class ArtistEvent:
    source: str
    artist: str
    external_id: str
    starts_at: datetime
    venue_name: Optional[str] = None
    venue_city: Optional[str] = None
    venue_region: Optional[str] = None
    venue_country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    url: Optional[str] = None


class ArtistEventsProvider(Protocol):
    """Contract for sources of per-artist tour dates."""

    def fetch_artist_events(
        self,
        artist: str,
        *,
        start: date,
        end: date,
    ) -> list[ArtistEvent]:
        """Fetch ``artist``'s events between ``start`` and ``end`` (inclusive).

        Events whose venue has no usable coordinates are dropped by the
        provider rather than returned with empty ``lat``/``lon``.
        """
        raise NotImplementedError
