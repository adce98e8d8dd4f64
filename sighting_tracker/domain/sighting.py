"""Sighting models: the write contract and the read view.

``SightingCreate`` is what a reporter submits.  It is strict: coordinates
must be real numbers (a JSON string or boolean is rejected), ``sighted_at``
must be an ISO-8601 string, and ``details`` must be non-empty.

``Sighting`` is what every read returns.  Its age fields are derived at read
time and are never stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from sighting_tracker.foundation.clock import age_minutes, as_utc


# ── Write contract ───────────────────────────────────────────────────────────

class SightingCreate(BaseModel):
    """A reporter-submitted sighting, validated at the boundary."""

    latitude: float = Field(..., strict=True, allow_inf_nan=False, description="Decimal degrees")
    longitude: float = Field(..., strict=True, allow_inf_nan=False, description="Decimal degrees")
    sighted_at: datetime = Field(..., description="When the event was observed (ISO-8601)")
    details: str = Field(..., strict=True, min_length=1, description="Free-text description")

    model_config = {"frozen": True}

    @field_validator("sighted_at", mode="before")
    @classmethod
    def sighted_at_must_be_instant_string(cls, v: object) -> datetime:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("sighted_at must be an ISO-8601 timestamp string")
        try:
            parsed = datetime.fromisoformat(v.strip())
        except ValueError:
            raise ValueError(f"sighted_at is not a parseable timestamp: {v!r}") from None
        # Naive timestamps are taken as UTC
        try:
            return as_utc(parsed)
        except OverflowError:
            raise ValueError(f"sighted_at is outside the representable range: {v!r}") from None


# ── Read view ────────────────────────────────────────────────────────────────

class Sighting(BaseModel):
    """A persisted sighting with freshly computed age fields."""

    id: int
    latitude: float
    longitude: float
    sighted_at: datetime
    reported_at: datetime
    details: str
    sighted_age: int = Field(..., description="Whole minutes since sighted_at")
    reported_age: int = Field(..., description="Whole minutes since reported_at")

    model_config = {"frozen": True}

    @classmethod
    def from_row(cls, row: Any, now: datetime) -> Sighting:
        """Build the read view from a stored row, computing ages against *now*."""
        sighted_at = as_utc(row.sighted_at)
        reported_at = as_utc(row.reported_at)
        return cls(
            id=row.id,
            latitude=row.latitude,
            longitude=row.longitude,
            sighted_at=sighted_at,
            reported_at=reported_at,
            details=row.details,
            sighted_age=age_minutes(sighted_at, now),
            reported_age=age_minutes(reported_at, now),
        )
