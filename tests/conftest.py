"""Shared fixtures: an in-memory database and a Chicago-fenced store."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy.engine import Engine

from sighting_tracker.domain.geofence import GeofenceConfig
from sighting_tracker.store.database import init_db, make_engine, make_session_factory
from sighting_tracker.store.sighting_store import SightingStore

CHICAGO = GeofenceConfig(
    center_lat=41.8781,
    center_lon=-87.6298,
    radius_miles=25.0,
    geoname="Chicago",
)


def valid_payload(**overrides) -> dict:
    """Return a valid sighting payload inside the Chicago fence."""
    base = {
        "latitude": 41.8781,
        "longitude": -87.7846,
        "sighted_at": "2024-12-25T06:00:00Z",
        "details": "Saw Santa on rooftop",
    }
    base.update(overrides)
    return base


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = make_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine: Engine) -> SightingStore:
    return SightingStore(make_session_factory(engine), CHICAGO)
