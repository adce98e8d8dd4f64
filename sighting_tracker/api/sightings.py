"""REST endpoints for sightings.

Paths:
    GET    /api/sightings?date=YYYY-MM-DD&timezone=Area/City
    POST   /api/sightings
    GET    /api/sightings/{id}
    DELETE /api/sightings/{id}          (admin)

Parsing and status mapping live here.  Filtering, validation and geofence
admission belong to the SightingStore.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi import APIRouter, Body, Depends, Query, Response
from fastapi.responses import JSONResponse

from sighting_tracker.domain.errors import (
    InvalidDateError,
    InvalidTimezoneError,
    OutOfBoundsError,
    SightingNotFoundError,
    SightingValidationError,
)
from sighting_tracker.domain.sighting import Sighting
from sighting_tracker.store.sighting_store import SightingStore

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})


def create_sightings_router(
    store: SightingStore,
    require_admin: Callable[..., None],
) -> APIRouter:
    """Factory that wires the sighting endpoints to a concrete SightingStore.

    Args:
        store: The SightingStore to read from and write to.
        require_admin: Dependency guarding moderation endpoints.
    """

    router = APIRouter(prefix="/api/sightings", tags=["sightings"])

    @router.get("", response_model=list[Sighting])
    async def list_sightings(
        date: str | None = Query(None, description="Civil date YYYY-MM-DD, or 'today'"),
        timezone: str | None = Query(None, description="IANA timezone, e.g. America/Chicago"),
    ) -> Any:
        try:
            return await store.list_sightings(date=date, timezone=timezone)
        except (InvalidDateError, InvalidTimezoneError) as exc:
            return _error(400, str(exc))

    @router.post("", response_model=Sighting, status_code=201)
    async def create_sighting(payload: Any = Body(None)) -> Any:
        try:
            return await store.create(payload)
        except SightingValidationError as exc:
            return _error(400, str(exc), details=exc.errors)
        except OutOfBoundsError as exc:
            return _error(
                400, str(exc), geoname=exc.geoname, radiusMiles=exc.radius_miles
            )

    @router.get("/{sighting_id}", response_model=Sighting)
    async def get_sighting(sighting_id: int) -> Any:
        try:
            return await store.get(sighting_id)
        except SightingNotFoundError:
            return _error(404, "Sighting not found")

    @router.delete(
        "/{sighting_id}",
        status_code=204,
        dependencies=[Depends(require_admin)],
    )
    async def delete_sighting(sighting_id: int) -> Response:
        if not await store.delete(sighting_id):
            return _error(404, "Sighting not found")
        return Response(status_code=204)

    return router
