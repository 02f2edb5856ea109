from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from tourfit.api.deps import get_engine
from tourfit.api.main import create_app
from tourfit.infra.db.tables import metadata
from tourfit.infra.db.venues_repository import VenuesRepository
from tourfit.providers.events.base import ArtistEvent

VENUES = [
    {"name": "Rochester Club", "city": "Rochester", "region": "NY", "latitude": "43.1566", "longitude": "-77.6088"},
    {"name": "Erie Hall", "city": "Erie", "region": "PA", "latitude": "42.1292", "longitude": "-80.0851"},
    {"name": "Mystery Room", "city": "Unknown", "latitude": None, "longitude": None},
    {"name": "LA Theater", "city": "Los Angeles", "region": "CA", "latitude": "34.0522", "longitude": "-118.2437"},
]


def _event(artist: str, day: int, lat, lon, city: str) -> ArtistEvent:
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
    events = {
        "Band A": [
            _event("Band A", 1, 42.8864, -78.8784, "Buffalo"),
            _event("Band A", 7, 40.4406, -79.9959, "Pittsburgh"),
        ],
        "Far Band": [
            _event("Far Band", 2, 34.0522, -118.2437, "Los Angeles"),
            _event("Far Band", 4, 37.7749, -122.4194, "San Francisco"),
        ],
    }

    def fetch_artist_events(self, artist, *, start, end):
        return list(self.events.get(artist, []))


def _build_api_client(tmp_path, monkeypatch, *, with_provider: bool):
    monkeypatch.delenv("BANDSINTOWN_APP_ID", raising=False)
    engine = create_engine(
        f"sqlite:///{tmp_path / 'api_tests.db'}",
        connect_args={"check_same_thread": False},
        future=True,
    )
    metadata.create_all(engine)
    repo = VenuesRepository(engine)
    for venue in VENUES:
        repo.add_venue(venue)
    app = create_app(engine=engine, provider=FakeArtistProvider() if with_provider else None)
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    metadata.drop_all(engine)


@pytest.fixture()
def api_client(tmp_path, monkeypatch):
    yield from _build_api_client(tmp_path, monkeypatch, with_provider=True)


@pytest.fixture()
def api_client_no_provider(tmp_path, monkeypatch):
    yield from _build_api_client(tmp_path, monkeypatch, with_provider=False)
