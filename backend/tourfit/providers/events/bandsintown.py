from __future__ import annotations

import logging
import os
import time
from datetime import date, datetime, timezone
from typing import Callable, List, Optional, Tuple
from urllib.parse import quote

import httpx

from .base import ArtistEvent, ArtistEventsProvider

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_DELAY_S = 1.0


class BandsintownEventsProvider(ArtistEventsProvider):
    BASE_URL = "https://rest.bandsintown.com"

    def __init__(
        self,
        app_id: Optional[str] = None,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.app_id = app_id or os.getenv("BANDSINTOWN_APP_ID")
        if not self.app_id:
            raise RuntimeError("BANDSINTOWN_APP_ID is required for BandsintownEventsProvider")
        self.timeout = timeout
        self._client = client
        self._sleep = sleep
        self.stats = {
            "requests": 0,
            "api_errors": 0,
            "fetched": 0,
            "mapped": 0,
            "skipped_no_coords": 0,
            "skipped_malformed": 0,
        }

    def fetch_artist_events(
        self,
        artist: str,
        *,
        start: date,
        end: date,
    ) -> List[ArtistEvent]:
        params = {
            "app_id": self.app_id,
            "date": f"{start.isoformat()},{end.isoformat()}",
        }
        path = f"/artists/{quote(artist, safe='')}/events"
        payload = self._get(path, params)
        if not isinstance(payload, list):
            return []
        events, stats = self._process_events(artist, payload)
        for key in ("fetched", "mapped", "skipped_no_coords", "skipped_malformed"):
            self.stats[key] += stats[key]
        return events

    def _get(self, path: str, params: dict):
        retries = 0
        while True:
            self.stats["requests"] += 1
            try:
                resp = self._send(path, params)
                if resp.status_code == 404:
                    self.stats["api_errors"] += 1
                    logger.info("Bandsintown resource not found: %s", path)
                    return []
                resp.raise_for_status()
                return resp.json()
            except (httpx.TransportError, httpx.HTTPStatusError) as exc:
                if retries >= MAX_RETRIES:
                    self.stats["api_errors"] += 1
                    logger.error("Bandsintown request failed after %d retries: %s", MAX_RETRIES, path)
                    raise
                retries += 1
                delay = RETRY_DELAY_S * (2 ** retries)
                logger.warning("Retry %d/%d for %s in %.0fs: %s", retries, MAX_RETRIES, path, delay, exc)
                self._sleep(delay)

    def _send(self, path: str, params: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.get(self.BASE_URL + path, params=params)
        with httpx.Client(timeout=self.timeout) as client:
            return client.get(self.BASE_URL + path, params=params)

    def _process_events(self, artist: str, events: list[dict]) -> Tuple[List[ArtistEvent], dict]:
        mapped: List[ArtistEvent] = []
        stats = {"fetched": len(events), "mapped": 0, "skipped_no_coords": 0, "skipped_malformed": 0}
        for item in events:
            try:
                event = self._map_event(artist, item)
            except (AttributeError, KeyError, TypeError, ValueError):
                stats["skipped_malformed"] += 1
                logger.debug("Skipping malformed Bandsintown event for %s: %r", artist, item)
                continue
            if event is None:
                stats["skipped_no_coords"] += 1
                continue
            mapped.append(event)
        stats["mapped"] = len(mapped)
        return mapped, stats

    def _map_event(self, artist: str, payload: dict) -> Optional[ArtistEvent]:
        starts_at = self._parse_ts(payload.get("datetime"))
        venue = payload.get("venue") or {}
        try:
            lat = float(venue.get("latitude"))
            lon = float(venue.get("longitude"))
        except (TypeError, ValueError):
            return None
        return ArtistEvent(
            source="bandsintown",
            artist=artist,
            external_id=str(payload.get("id", "")),
            starts_at=starts_at,
            venue_name=venue.get("name"),
            venue_city=venue.get("city"),
            venue_region=venue.get("region"),
            venue_country=venue.get("country"),
            lat=lat,
            lon=lon,
            url=payload.get("url"),
        )

    @staticmethod
    def _parse_ts(value: Optional[str]) -> datetime:
        if not value:
            raise ValueError("Missing datetime")
        if value.endswith("Z"):
            value = value.replace("Z", "+00:00")
        dt = datetime.fromisoformat(value)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
