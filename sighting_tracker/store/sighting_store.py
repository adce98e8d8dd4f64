"""Sighting store: geofenced writes and timezone-aware reads over SQLAlchemy.

Design notes:
    - An asyncio.Lock serialises every operation, giving a single logical
      writer.  Each write is one validate → insert → commit transaction.
      Session work runs in a worker thread so the event loop never blocks
      on database I/O.
    - Reads with a date use the DateRangeResolver; reads without a date use
      a rolling lookback window anchored at "now".  These are deliberately
      different: "today" and "no date" see different rows near midnight.
    - Age fields are computed against a single "now" per call and never
      stored.
    - The geofence config is injected, not read from globals.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from sighting_tracker.domain.date_range import get_zone, resolve_date_range, today
from sighting_tracker.domain.errors import (
    OutOfBoundsError,
    SightingNotFoundError,
    SightingValidationError,
)
from sighting_tracker.domain.geofence import GeofenceConfig, is_within
from sighting_tracker.domain.sighting import Sighting, SightingCreate
from sighting_tracker.foundation.clock import utc_now
from sighting_tracker.store.database import SightingRow

logger = logging.getLogger(__name__)

TODAY = "today"

# SQLite INTEGER PRIMARY KEY is a signed 64-bit value
MAX_ID = 2**63 - 1


def _storable_id(sighting_id: int) -> bool:
    return 0 < sighting_id <= MAX_ID


def _field_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


class SightingStore:
    """Async-safe store for Sightings.

    Args:
        session_factory: SQLAlchemy sessionmaker bound to the sightings engine.
        geofence: Admission boundary for new sightings.
        default_timezone: IANA zone used when a query omits one.
        lookback: Width of the rolling window used when a query omits a date.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        geofence: GeofenceConfig,
        default_timezone: str = "America/Chicago",
        lookback: timedelta = timedelta(hours=24),
    ) -> None:
        if lookback <= timedelta(0):
            raise ValueError("lookback must be positive")
        get_zone(default_timezone)

        self._session_factory = session_factory
        self._geofence = geofence
        self._default_timezone = default_timezone
        self._lookback = lookback
        self._lock = asyncio.Lock()

    @property
    def geofence(self) -> GeofenceConfig:
        return self._geofence

    @property
    def default_timezone(self) -> str:
        return self._default_timezone

    # ── Reads ────────────────────────────────────────────────────────────

    async def list_sightings(
        self,
        date: str | None = None,
        timezone: str | None = None,
    ) -> list[Sighting]:
        """Return sightings for a civil date, or for the rolling window.

        ``date`` is ``YYYY-MM-DD`` or ``"today"`` (resolved in *timezone*).
        Results are ordered by ``sighted_at`` then ``id``.

        Raises:
            InvalidTimezoneError: If *timezone* is not a known IANA zone.
            InvalidDateError: If *date* is not a valid calendar date.
        """
        tz_name = timezone or self._default_timezone
        get_zone(tz_name)

        async with self._lock:
            now = utc_now()
            stmt = select(SightingRow)
            if date:
                if date == TODAY:
                    date = today(tz_name, now)
                date_range = resolve_date_range(date, tz_name)
                stmt = stmt.where(
                    SightingRow.sighted_at >= date_range.start,
                    SightingRow.sighted_at < date_range.end,
                )
            else:
                stmt = stmt.where(SightingRow.sighted_at >= now - self._lookback)
            stmt = stmt.order_by(SightingRow.sighted_at, SightingRow.id)

            rows = await asyncio.to_thread(self._fetch_all, stmt)
            return [Sighting.from_row(row, now) for row in rows]

    async def get(self, sighting_id: int) -> Sighting:
        """Return one sighting with fresh age fields.

        Raises:
            SightingNotFoundError: If no row has this id.
        """
        if not _storable_id(sighting_id):
            raise SightingNotFoundError(sighting_id)
        async with self._lock:
            row = await asyncio.to_thread(self._fetch_one, sighting_id)
            if row is None:
                raise SightingNotFoundError(sighting_id)
            return Sighting.from_row(row, utc_now())

    async def count(self) -> int:
        async with self._lock:
            return await asyncio.to_thread(self._count)

    # ── Writes ───────────────────────────────────────────────────────────

    async def create(self, payload: Mapping[str, Any] | SightingCreate) -> Sighting:
        """Validate, geofence-check and persist a new sighting.

        ``reported_at`` is always stamped here; a caller-supplied value is
        ignored.

        Raises:
            SightingValidationError: If required fields are missing or mistyped.
            OutOfBoundsError: If the coordinate is outside the geofence.
        """
        data = self._validate(payload)

        if not is_within(data.latitude, data.longitude, self._geofence):
            logger.info(
                "Rejected sighting at (%.5f, %.5f): outside %s",
                data.latitude, data.longitude, self._geofence.geoname,
            )
            raise OutOfBoundsError(self._geofence.geoname, self._geofence.radius_miles)

        async with self._lock:
            now = utc_now()
            row = SightingRow(
                latitude=data.latitude,
                longitude=data.longitude,
                sighted_at=data.sighted_at,
                reported_at=now,
                details=data.details,
            )
            await asyncio.to_thread(self._insert, row)
            logger.info("Created sighting %d at (%.5f, %.5f)", row.id, row.latitude, row.longitude)
            return Sighting.from_row(row, now)

    async def delete(self, sighting_id: int) -> bool:
        """Hard-delete a sighting.  Returns False if it was already absent."""
        if not _storable_id(sighting_id):
            return False
        async with self._lock:
            deleted = await asyncio.to_thread(self._delete_row, sighting_id)
            if deleted:
                logger.info("Deleted sighting %d", sighting_id)
            return deleted

    # ── Session work (runs in a worker thread, under self._lock) ─────────

    def _fetch_all(self, stmt) -> list[SightingRow]:
        with self._session_factory() as session:
            return list(session.scalars(stmt).all())

    def _fetch_one(self, sighting_id: int) -> SightingRow | None:
        with self._session_factory() as session:
            return session.get(SightingRow, sighting_id)

    def _count(self) -> int:
        with self._session_factory() as session:
            return session.scalar(select(func.count(SightingRow.id))) or 0

    def _insert(self, row: SightingRow) -> None:
        with self._session_factory() as session:
            session.add(row)
            session.commit()
            session.refresh(row)

    def _delete_row(self, sighting_id: int) -> bool:
        with self._session_factory() as session:
            row = session.get(SightingRow, sighting_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    # ── Internals ────────────────────────────────────────────────────────

    @staticmethod
    def _validate(payload: Mapping[str, Any] | SightingCreate) -> SightingCreate:
        if isinstance(payload, SightingCreate):
            return payload
        if not isinstance(payload, Mapping):
            raise SightingValidationError("Sighting payload must be an object")
        try:
            return SightingCreate.model_validate(dict(payload))
        except ValidationError as exc:
            errors = _field_errors(exc)
            logger.info("Rejected sighting payload: %s", errors)
            raise SightingValidationError("Missing or invalid sighting fields", errors) from exc
