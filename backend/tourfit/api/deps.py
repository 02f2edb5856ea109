from __future__ import annotations

from fastapi import HTTPException, Request
from sqlalchemy.engine import Engine

from tourfit.providers.events.base import ArtistEventsProvider


def get_engine(request: Request) -> Engine:
    engine = getattr(request.app.state, "db_engine", None)
    if engine is None:
        raise HTTPException(status_code=500, detail="Database engine not configured")
    return engine


def get_events_provider(request: Request) -> ArtistEventsProvider:
    provider = getattr(request.app.state, "events_provider", None)
    if provider is None:
        raise HTTPException(status_code=503, detail="Artist events provider not configured")
    return provider
