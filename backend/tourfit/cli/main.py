import json
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer

from tourfit.domain.errors import RoutingError
from tourfit.domain.gaps import find_gaps
from tourfit.domain.models import ArtistRoute, GeoPoint, TourStop
from tourfit.domain.ranking import rank
from tourfit.providers.events.base import ArtistEvent
from tourfit.services.stop_builder import build_tour_stops

app = typer.Typer(help="CLI for tour routing discovery")


def _read_json(path: Path):
    try:
        return json.loads(path.read_text())
    except (OSError, ValueError) as exc:
        typer.echo(f"Cannot read {path}: {exc}", err=True)
        raise typer.Exit(code=2)


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.echo(f"Invalid date: {value!r} (expected YYYY-MM-DD)", err=True)
        raise typer.Exit(code=2)


def _to_event(artist: str, item: dict) -> ArtistEvent:
    return ArtistEvent(
        source="file",
        artist=artist,
        external_id=str(item.get("id", item.get("date", ""))),
        starts_at=datetime.fromisoformat(item["date"]),
        venue_name=item.get("venue"),
        venue_city=item.get("city"),
        venue_region=item.get("region"),
        lat=item.get("lat"),
        lon=item.get("lon"),
    )


def _load_routes(payload: list) -> tuple[list[ArtistRoute], int]:
    routes = []
    skipped = 0
    try:
        entries = [(entry["artist"], entry.get("events", [])) for entry in payload]
        if not all(isinstance(items, list) for _, items in entries):
            raise TypeError("events must be a list")
    except (KeyError, TypeError, AttributeError) as exc:
        typer.echo(f"Invalid input: each entry needs an 'artist' and a list of 'events' ({exc!r})", err=True)
        raise typer.Exit(code=2)
    for name, items in entries:
        events = []
        for item in items:
            try:
                events.append(_to_event(name, item))
            except (KeyError, TypeError, ValueError, AttributeError):
                skipped += 1
        stops, dropped = build_tour_stops(events)
        skipped += dropped
        routes.append(ArtistRoute(identity=name, stops=stops))
    return routes, skipped


@app.command("rank")
def cli_rank(
    venue_lat: float = typer.Option(..., help="Venue latitude"),
    venue_lon: float = typer.Option(..., help="Venue longitude"),
    start: str = typer.Option(..., help="Window start YYYY-MM-DD"),
    end: str = typer.Option(..., help="Window end YYYY-MM-DD"),
    input: Path = typer.Option(..., help="JSON file with artists and their events"),
    radius: float = typer.Option(50.0, help="Search radius in miles"),
    top: Optional[int] = typer.Option(None, help="Number of artists to show"),
):
    routes, skipped = _load_routes(_read_json(input))
    try:
        results = rank(
            GeoPoint(venue_lat, venue_lon),
            routes,
            (_parse_day(start), _parse_day(end)),
            radius,
            limit=top,
        )
    except RoutingError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)
    if skipped:
        typer.echo(f"Skipped {skipped} events without a usable date or coordinates", err=True)
    if not results:
        typer.echo("No routing opportunities found")
        raise typer.Exit(code=0)
    typer.echo("artist\tscore\tmiles\textra\tdays\tfrom\tto")
    for result in results:
        fit = result.best_fit
        destination = fit.destination_stop.label if fit.destination_stop else "-"
        typer.echo(
            f"{result.artist_identity}\t{fit.routing_score:.1f}\t{fit.distance_to_venue:.1f}\t"
            f"{fit.extra_distance:.1f}\t{fit.days_available}\t{fit.origin_stop.label}\t{destination}"
        )


@app.command("gaps")
def cli_gaps(
    start: str = typer.Option(..., help="Tour start YYYY-MM-DD"),
    end: str = typer.Option(..., help="Tour end YYYY-MM-DD"),
    input: Path = typer.Option(..., help="JSON file with the tour's events"),
    min_days: int = typer.Option(2, help="Minimum gap length in days"),
):
    # only dates matter for open-date search
    try:
        stops = sorted(
            (TourStop(location=None, date=_parse_day(item["date"][:10]), label=item.get("city", ""))
             for item in _read_json(input)),
            key=lambda s: s.date,
        )
    except (KeyError, TypeError, AttributeError) as exc:
        typer.echo(f"Invalid input: each entry needs a 'date' ({exc!r})", err=True)
        raise typer.Exit(code=2)
    try:
        gaps = find_gaps(stops, _parse_day(start), _parse_day(end), min_days)
    except RoutingError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)
    if not gaps:
        typer.echo("No open dates found")
        raise typer.Exit(code=0)
    typer.echo("start\tend\tdays")
    for gap in gaps:
        typer.echo(f"{gap.start_date}\t{gap.end_date}\t{gap.duration_days}")


if __name__ == "__main__":
    app()
