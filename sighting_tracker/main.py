"""sighting-tracker: geofenced, timezone-aware sighting reports.

This is the application entry point.  ``create_app`` wires Settings, the
database, the SightingStore and the routers together.  Nothing is held in
module-level state: build an app per process (or per test) and pass it to
the server.

    uvicorn sighting_tracker.main:create_app --factory
"""

from __future__ import annotations

import logging
from datetime import timedelta

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sighting_tracker.api.dependencies import create_admin_guard
from sighting_tracker.api.sightings import create_sightings_router
from sighting_tracker.config import Settings
from sighting_tracker.store.database import init_db, make_engine, make_session_factory
from sighting_tracker.store.sighting_store import SightingStore

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    )


def build_store(settings: Settings) -> SightingStore:
    """Construct the SightingStore described by *settings*, creating tables."""
    engine = make_engine(settings.database_url)
    init_db(engine)
    return SightingStore(
        session_factory=make_session_factory(engine),
        geofence=settings.geofence(),
        default_timezone=settings.default_timezone,
        lookback=timedelta(hours=settings.lookback_hours),
    )


def create_app(
    settings: Settings | None = None,
    store: SightingStore | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        settings: Configuration; read from the environment when omitted.
        store: Pre-built store; built from *settings* when omitted.
    """
    settings = settings or Settings()
    configure_logging(settings)
    store = store or build_store(settings)
    require_admin = create_admin_guard(settings.admin_token)

    app = FastAPI(
        title=settings.app_name,
        description="Geofenced, timezone-aware sighting reports",
        version="1.0.0",
        debug=settings.debug,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    # ── Routes ───────────────────────────────────────────────────────────

    app.include_router(create_sightings_router(store, require_admin))

    @app.get("/api/config")
    async def geofence_config() -> dict:
        return store.geofence.to_public_dict()

    @app.get("/api/admin/test", dependencies=[Depends(require_admin)])
    async def admin_test() -> dict:
        return {"message": "Admin authentication successful"}

    # ── Health ───────────────────────────────────────────────────────────

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "sightings": await store.count()}

    logger.info(
        "%s ready: geofence %s (%g mi), default timezone %s",
        settings.app_name,
        store.geofence.geoname,
        store.geofence.radius_miles,
        store.default_timezone,
    )
    return app


def run() -> None:
    settings = Settings()
    uvicorn.run(
        "sighting_tracker.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
