from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import create_engine

from tourfit.api.routers import discovery, tours


def create_app(engine=None, provider=None) -> FastAPI:
    app = FastAPI(title="Tourfit API", version="0.1.0")
    if engine is None:
        database_url = os.getenv("DATABASE_URL")
        engine = create_engine(database_url, future=True) if database_url else None
    app.state.db_engine = engine
    if provider is None and os.getenv("BANDSINTOWN_APP_ID"):
        from tourfit.providers.events.bandsintown import BandsintownEventsProvider

        provider = BandsintownEventsProvider()
    app.state.events_provider = provider

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(discovery.router, prefix="/api")
    app.include_router(tours.router, prefix="/api")
    return app


app = create_app()
