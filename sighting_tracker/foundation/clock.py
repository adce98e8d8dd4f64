"""Timezone-aware clock utilities.

All stored instants in sighting-tracker are UTC-aware.  This module is the
single source of "now" so tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

_MINUTE = timedelta(minutes=1)


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive datetime, or convert an aware one to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def age_minutes(instant: datetime, now: datetime) -> int:
    """Whole minutes elapsed from *instant* to *now*, floored.

    Negative when *instant* lies in the future.
    """
    return (now - instant) // _MINUTE
