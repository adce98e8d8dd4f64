"""Civil date → UTC instant range resolution.

A civil date only means something inside a timezone.  ``resolve_date_range``
turns ``("2024-11-03", "America/Chicago")`` into the half-open UTC interval
covering that local day.  The UTC offset is looked up separately for each
local midnight from the IANA database, so the interval is 23, 24 or 25 hours
wide depending on DST transitions.  Never substitute a fixed per-zone offset.

Local midnight that does not exist (zones springing forward at 00:00) resolves
with the pre-transition offset, which lands on the first real instant of the
day.  A repeated midnight resolves to its first occurrence.

Everything here is a pure function of its arguments.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field

from sighting_tracker.domain.errors import InvalidDateError, InvalidTimezoneError
from sighting_tracker.foundation.clock import utc_now

logger = logging.getLogger(__name__)

_CIVIL_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateRange(BaseModel):
    """Half-open UTC interval ``[start, end)`` covering one local civil day."""

    start: datetime = Field(..., description="Local midnight of the date, in UTC")
    end: datetime = Field(..., description="Local midnight of the next date, in UTC")

    model_config = {"frozen": True}

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __contains__(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


def get_zone(tz_name: str) -> ZoneInfo:
    """Load an IANA zone, raising InvalidTimezoneError if it is unknown."""
    if not isinstance(tz_name, str) or not tz_name:
        raise InvalidTimezoneError(tz_name)
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidTimezoneError(tz_name) from exc


def parse_civil_date(date_str: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""
    if not isinstance(date_str, str) or not _CIVIL_DATE.match(date_str):
        raise InvalidDateError(date_str)
    try:
        return date.fromisoformat(date_str)
    except ValueError as exc:
        raise InvalidDateError(date_str) from exc


def local_midnight_utc(day: date, zone: ZoneInfo) -> datetime:
    """The UTC instant at which *day* begins in *zone*."""
    return datetime.combine(day, time.min, tzinfo=zone).astimezone(timezone.utc)


def resolve_date_range(date_str: str, tz_name: str) -> DateRange:
    """Resolve a civil date in *tz_name* to its ``[start, end)`` UTC range.

    Raises:
        InvalidTimezoneError: If *tz_name* is not a recognised IANA zone.
        InvalidDateError: If *date_str* is not a valid calendar date.
    """
    zone = get_zone(tz_name)
    day = parse_civil_date(date_str)
    # Dates at either end of the calendar have no representable UTC bound
    try:
        date_range = DateRange(
            start=local_midnight_utc(day, zone),
            end=local_midnight_utc(day + timedelta(days=1), zone),
        )
    except OverflowError as exc:
        raise InvalidDateError(date_str) from exc

    logger.debug(
        "Resolved %s in %s to [%s, %s)",
        date_str, tz_name, date_range.start.isoformat(), date_range.end.isoformat(),
    )
    return date_range


def today(tz_name: str, now: datetime | None = None) -> str:
    """Return the civil date of *now* (default: current time) in *tz_name*."""
    zone = get_zone(tz_name)
    instant = now or utc_now()
    return instant.astimezone(zone).date().isoformat()
