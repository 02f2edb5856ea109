from datetime import date, datetime, timezone

import pytest

from tourfit.domain.errors import InvalidConfiguration, InvalidCoordinate, InvalidDateRange
from tourfit.domain.models import GeoPoint
from tourfit.providers.events.base import ArtistEvent
from tourfit.services.discovery import DiscoveryService

ROCHESTER = GeoPoint(43.1566, -77.6088)
START = date(2026, 4, 1)
END = date(2026, 5, 31)


def event(artist: str, day: int, lat, lon, city: str) -> ArtistEvent:
    return ArtistEvent(
        source="fake",
        artist=artist,
        external_id=f"{artist}-{day}",
        starts_at=datetime(2026, 4, day, 20, 0, tzinfo=timezone.utc),
        venue_city=city,
        lat=lat,
        lon=lon,
    )


class FakeArtistProvider:
    def __init__(self, events: dict, failing: tuple = ()):
        self.events = events
        self.failing = set(failing)
        self.calls = []

    def fetch_artist_events(self, artist, *, start, end):
        self.calls.append((artist, start, end))
        if artist in self.failing:
            raise RuntimeError(f"provider failed for {artist}")
        return list(self.events.get(artist, []))


@pytest.fixture()
def provider():
    return FakeArtistProvider(
        {
            "Band A": [
                event("Band A", 6, 40.4406, -79.9959, "Pittsburgh"),
                event("Band A", 1, 42.8864, -78.8784, "Buffalo"),
            ],
            "Near Band": [
                event("Near Band", 3, 43.0481, -76.1474, "Syracuse"),
                event("Near Band", 5, 42.8864, -78.8784, "Buffalo"),
                event("Near Band", 7, None, None, "Nowhere"),
            ],
            "Far Band": [
                event("Far Band", 2, 34.0522, -118.2437, "Los Angeles"),
                event("Far Band", 4, 37.7749, -122.4194, "San Francisco"),
            ],
        },
        failing=("Broken Band",),
    )


def test_discover_ranks_fetched_artists(provider):
    service = DiscoveryService(provider, max_workers=2)
    run = service.discover(
        ROCHESTER,
        ["Band A", "Near Band", "Far Band", "Quiet Band", "Broken Band"],
        start=START,
        end=END,
        radius=50,
    )
    assert [r.artist_identity for r in run.results] == ["Near Band", "Band A"]
    assert run.artists_queried == 5
    assert run.artists_with_events == 3
    assert run.events_found == 7
    assert run.stops_skipped == 1
    assert [name for name, _ in run.errors] == ["Broken Band"]
    assert all(call[1:] == (START, END) for call in provider.calls)


def test_discover_is_repeatable(provider):
    service = DiscoveryService(provider, max_workers=4)
    first = service.discover(ROCHESTER, ["Far Band", "Band A", "Near Band"], start=START, end=END, radius=50)
    second = service.discover(ROCHESTER, ["Far Band", "Band A", "Near Band"], start=START, end=END, radius=50)
    assert first.results == second.results


def test_discover_limit(provider):
    run = DiscoveryService(provider).discover(
        ROCHESTER, ["Band A", "Near Band"], start=START, end=END, radius=50, limit=1
    )
    assert [r.artist_identity for r in run.results] == ["Near Band"]


def test_bad_arguments_fail_before_fetching(provider):
    service = DiscoveryService(provider)
    with pytest.raises(InvalidCoordinate):
        service.discover(GeoPoint(100.0, 0.0), ["Band A"], start=START, end=END, radius=50)
    with pytest.raises(InvalidDateRange):
        service.discover(ROCHESTER, ["Band A"], start=END, end=START, radius=50)
    with pytest.raises(InvalidConfiguration):
        service.discover(ROCHESTER, ["Band A"], start=START, end=END, radius=float("nan"))
    assert provider.calls == []
