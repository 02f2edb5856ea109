from __future__ import annotations

import logging
import math
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from tourfit.domain.errors import InvalidConfiguration
from tourfit.domain.geo import validate_point
from tourfit.domain.models import ArtistRoute, DiscoveryResult, GeoPoint
from tourfit.domain.ranking import rank, validate_date_window
from tourfit.providers.events.base import ArtistEventsProvider

from .stop_builder import build_tour_stops

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = int(os.getenv("DISCOVERY_MAX_WORKERS", "4"))
DEFAULT_ARTISTS = [
    name.strip() for name in os.getenv("DISCOVERY_ARTISTS", "").split(",") if name.strip()
]


@dataclass
class DiscoveryRun:
    results: List[DiscoveryResult]
    artists_queried: int = 0
    artists_with_events: int = 0
    events_found: int = 0
    stops_skipped: int = 0
    errors: list[tuple[str, Exception]] = field(default_factory=list)


class DiscoveryService:
    """Fetches artists' tour dates and ranks them against one venue."""

    def __init__(self, provider: ArtistEventsProvider, max_workers: Optional[int] = None) -> None:
        self._provider = provider
        self._max_workers = max_workers or DEFAULT_MAX_WORKERS

    def discover(
        self,
        venue: GeoPoint,
        artists: Sequence[str],
        *,
        start: date,
        end: date,
        radius: float,
        limit: Optional[int] = None,
    ) -> DiscoveryRun:
        # argument problems surface before any request goes out
        validate_point(venue, "venue")
        validate_date_window((start, end))
        if not math.isfinite(radius) or radius < 0:
            raise InvalidConfiguration(f"radius must be a finite number >= 0, got {radius}")

        routes: List[ArtistRoute] = []
        run = DiscoveryRun(results=[], artists_queried=len(artists))
        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            futures = [
                (artist, pool.submit(self._provider.fetch_artist_events, artist, start=start, end=end))
                for artist in artists
            ]
            for artist, future in futures:
                try:
                    events = future.result()
                except Exception as exc:
                    logger.warning("Fetching events for %s failed: %s", artist, exc)
                    run.errors.append((artist, exc))
                    continue
                if not events:
                    continue
                run.artists_with_events += 1
                run.events_found += len(events)
                stops, skipped = build_tour_stops(events)
                run.stops_skipped += skipped
                routes.append(ArtistRoute(identity=artist, stops=stops))

        run.results = rank(venue, routes, (start, end), radius, limit=limit)
        logger.info(
            "Discovery processed %d artists (%d with events), %d matches, %d stops skipped, %d errors",
            run.artists_queried,
            run.artists_with_events,
            len(run.results),
            run.stops_skipped,
            len(run.errors),
        )
        return run
