from datetime import date, datetime, timezone

import httpx
import pytest

from tourfit.providers.events.bandsintown import MAX_RETRIES, BandsintownEventsProvider


def sample_event(event_id: str, lat="42.8864", lon="-78.8784", dt="2026-04-02T20:00:00"):
    return {
        "id": event_id,
        "url": f"https://bandsintown.example/e/{event_id}",
        "datetime": dt,
        "venue": {
            "name": "Town Ballroom",
            "city": "Buffalo",
            "region": "NY",
            "country": "United States",
            "latitude": lat,
            "longitude": lon,
        },
    }


def make_provider(handler, sleeps=None) -> BandsintownEventsProvider:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    recorder = sleeps.append if sleeps is not None else (lambda _: None)
    return BandsintownEventsProvider(app_id="test-app", client=client, sleep=recorder)


def test_requires_app_id(monkeypatch):
    monkeypatch.delenv("BANDSINTOWN_APP_ID", raising=False)
    with pytest.raises(RuntimeError):
        BandsintownEventsProvider()


def test_map_event_parses_coordinates():
    provider = BandsintownEventsProvider.__new__(BandsintownEventsProvider)
    event = provider._map_event("Band A", sample_event("e1"))  # type: ignore[attr-defined]
    assert event.lat == 42.8864
    assert event.lon == -78.8784
    assert event.venue_city == "Buffalo"
    assert event.starts_at == datetime(2026, 4, 2, 20, 0, tzinfo=timezone.utc)


def test_process_events_skips_missing_coordinates():
    provider = BandsintownEventsProvider.__new__(BandsintownEventsProvider)
    events = [
        sample_event("keep"),
        sample_event("blank", lat="", lon=""),
        sample_event("none", lat=None, lon=None),
        {"id": "no-date", "venue": {"latitude": "1", "longitude": "1"}},
    ]
    mapped, stats = provider._process_events("Band A", events)  # type: ignore[attr-defined]
    assert [e.external_id for e in mapped] == ["keep"]
    assert stats["fetched"] == 4
    assert stats["skipped_no_coords"] == 2
    assert stats["skipped_malformed"] == 1
    assert stats["mapped"] == 1


def test_fetch_sends_date_range():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.raw_path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[sample_event("e1"), sample_event("e2", lat="x")])

    provider = make_provider(handler)
    events = provider.fetch_artist_events("AC/DC", start=date(2026, 4, 1), end=date(2026, 4, 30))
    assert seen["path"].startswith(b"/artists/AC%2FDC/events")
    assert seen["params"] == {"app_id": "test-app", "date": "2026-04-01,2026-04-30"}
    assert len(events) == 1
    assert provider.stats["skipped_no_coords"] == 1


def test_not_found_means_no_events():
    provider = make_provider(lambda request: httpx.Response(404, json={"error": "not found"}))
    assert provider.fetch_artist_events("Nobody", start=date(2026, 4, 1), end=date(2026, 4, 2)) == []
    assert provider.stats["api_errors"] == 1


def test_retries_transient_failures():
    attempts = []
    sleeps = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            return httpx.Response(503)
        return httpx.Response(200, json=[sample_event("e1")])

    provider = make_provider(handler, sleeps)
    events = provider.fetch_artist_events("Band A", start=date(2026, 4, 1), end=date(2026, 4, 2))
    assert len(events) == 1
    assert len(attempts) == 3
    assert sleeps == [2.0, 4.0]


def test_gives_up_after_max_retries():
    provider = make_provider(lambda request: httpx.Response(500))
    with pytest.raises(httpx.HTTPStatusError):
        provider.fetch_artist_events("Band A", start=date(2026, 4, 1), end=date(2026, 4, 2))
    assert provider.stats["requests"] == MAX_RETRIES + 1


def test_junk_records_do_not_fail_the_artist():
    bad_venue = {"id": "bad-venue", "datetime": "2026-04-03T20:00:00", "venue": "Buffalo"}
    payload = ["junk", None, 7, bad_venue, sample_event("e1")]
    provider = make_provider(lambda request: httpx.Response(200, json=payload))
    events = provider.fetch_artist_events("Band A", start=date(2026, 4, 1), end=date(2026, 4, 30))
    assert [e.external_id for e in events] == ["e1"]
    assert provider.stats["fetched"] == 5
    assert provider.stats["mapped"] == 1
    assert provider.stats["skipped_malformed"] == 4
