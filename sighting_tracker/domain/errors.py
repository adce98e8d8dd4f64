"""Error taxonomy for the sighting core.

Every error here is local, synchronous and non-retryable.  The HTTP layer
maps them to status codes; the core never does.
"""

from __future__ import annotations

from typing import Any


class SightingError(Exception):
    """Base class for all sighting core errors."""


class SightingValidationError(SightingError):
    """Raised when a write payload is missing fields or has wrong types."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)


class OutOfBoundsError(SightingError):
    """Raised when a coordinate falls outside the configured geofence."""

    def __init__(self, geoname: str, radius_miles: float) -> None:
        self.geoname = geoname
        self.radius_miles = radius_miles
        super().__init__(
            f"Location is outside the {geoname} area ({radius_miles:g} mile radius)"
        )


class InvalidTimezoneError(SightingError):
    """Raised when a timezone identifier is not a known IANA zone."""

    def __init__(self, timezone: object) -> None:
        self.timezone = timezone
        super().__init__(f"Unknown timezone: {timezone!r}")


class InvalidDateError(SightingError):
    """Raised when a date string is not a valid YYYY-MM-DD calendar date."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid date (expected YYYY-MM-DD): {value!r}")


class SightingNotFoundError(SightingError):
    """Raised when a sighting id does not exist."""

    def __init__(self, sighting_id: int) -> None:
        self.sighting_id = sighting_id
        super().__init__(f"Sighting {sighting_id} not found")
