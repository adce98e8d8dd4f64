"""Tests for civil date → UTC range resolution.

The America/Chicago transitions used below:
    2024-03-10  CST (UTC-6) → CDT (UTC-5), a 23-hour day
    2024-11-03  CDT (UTC-5) → CST (UTC-6), a 25-hour day
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from sighting_tracker.domain.date_range import (
    DateRange,
    get_zone,
    parse_civil_date,
    resolve_date_range,
    today,
)
from sighting_tracker.domain.errors import InvalidDateError, InvalidTimezoneError

CHICAGO = "America/Chicago"


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _fixed_offset_range(day: str, offset_hours: int) -> tuple[datetime, datetime]:
    """What a resolver that ignores DST would produce."""
    d = date.fromisoformat(day)
    start = datetime(d.year, d.month, d.day, tzinfo=timezone.utc) - timedelta(hours=offset_hours)
    return start, start + timedelta(hours=24)


def _days(first: str, count: int) -> list[str]:
    d = date.fromisoformat(first)
    return [(d + timedelta(days=i)).isoformat() for i in range(count)]


# ── Range resolution ─────────────────────────────────────────────────────────


class TestResolveDateRange:
    def test_winter_day_in_chicago(self) -> None:
        r = resolve_date_range("2024-12-25", CHICAGO)
        assert r.start == _utc(2024, 12, 25, 6)
        assert r.end == _utc(2024, 12, 26, 6)
        assert r.duration == timedelta(hours=24)

    def test_summer_day_in_chicago_uses_daylight_offset(self) -> None:
        r = resolve_date_range("2024-07-04", CHICAGO)
        assert r.start == _utc(2024, 7, 4, 5)
        assert r.end == _utc(2024, 7, 5, 5)

    def test_fall_back_day_is_25_hours(self) -> None:
        r = resolve_date_range("2024-11-03", CHICAGO)
        assert r.start == _utc(2024, 11, 3, 5)
        assert r.end == _utc(2024, 11, 4, 6)
        assert r.duration == timedelta(hours=25)

    def test_spring_forward_day_is_23_hours(self) -> None:
        r = resolve_date_range("2024-03-10", CHICAGO)
        assert r.start == _utc(2024, 3, 10, 6)
        assert r.end == _utc(2024, 3, 11, 5)
        assert r.duration == timedelta(hours=23)

    def test_utc_zone_is_identity(self) -> None:
        r = resolve_date_range("2024-06-01", "UTC")
        assert r.start == _utc(2024, 6, 1)
        assert r.end == _utc(2024, 6, 2)

    def test_london_spring_forward(self) -> None:
        r = resolve_date_range("2024-03-31", "Europe/London")
        assert r.start == _utc(2024, 3, 31, 0)
        assert r.end == _utc(2024, 3, 31, 23)

    def test_positive_offset_zone(self) -> None:
        r = resolve_date_range("2024-12-25", "Asia/Tokyo")
        assert r.start == _utc(2024, 12, 24, 15)
        assert r.end == _utc(2024, 12, 25, 15)

    def test_leap_day(self) -> None:
        r = resolve_date_range("2024-02-29", CHICAGO)
        assert r.start == _utc(2024, 2, 29, 6)
        assert r.end == _utc(2024, 3, 1, 6)

    def test_bounds_are_utc_aware(self) -> None:
        r = resolve_date_range("2024-12-25", CHICAGO)
        assert r.start.utcoffset() == timedelta(0)
        assert r.end.utcoffset() == timedelta(0)

    def test_range_is_half_open(self) -> None:
        r = resolve_date_range("2024-12-25", CHICAGO)
        assert r.start in r
        assert r.end - timedelta(microseconds=1) in r
        assert r.end not in r

    def test_range_is_immutable(self) -> None:
        r = resolve_date_range("2024-12-25", CHICAGO)
        with pytest.raises(Exception):
            r.start = _utc(2000, 1, 1)


class TestRangeContinuity:
    @pytest.mark.parametrize(
        "first_day",
        ["2024-03-07", "2024-10-31", "2024-12-29"],
        ids=["spring-forward", "fall-back", "year-end"],
    )
    def test_consecutive_days_tile_without_gaps(self, first_day: str) -> None:
        days = _days(first_day, 7)
        ranges = [resolve_date_range(d, CHICAGO) for d in days]
        for today_range, next_range in zip(ranges, ranges[1:]):
            assert today_range.end == next_range.start

    def test_non_transition_days_match_fixed_offset(self) -> None:
        for day in ("2024-01-15", "2024-12-25"):
            r = resolve_date_range(day, CHICAGO)
            assert (r.start, r.end) == _fixed_offset_range(day, -6)

    def test_fall_back_differs_from_fixed_offset_by_one_hour(self) -> None:
        r = resolve_date_range("2024-11-03", CHICAGO)
        naive_start, naive_end = _fixed_offset_range("2024-11-03", -6)
        assert naive_start - r.start == timedelta(hours=1)
        assert naive_end == r.end

    def test_spring_forward_differs_from_fixed_offset_by_one_hour(self) -> None:
        r = resolve_date_range("2024-03-10", CHICAGO)
        naive_start, naive_end = _fixed_offset_range("2024-03-10", -6)
        assert naive_start == r.start
        assert naive_end - r.end == timedelta(hours=1)


# ── Failures ─────────────────────────────────────────────────────────────────


class TestInvalidInput:
    @pytest.mark.parametrize("tz_name", ["Mars/Olympus_Mons", "", "../etc/passwd", "Chicago"])
    def test_unknown_timezone_rejected(self, tz_name: str) -> None:
        with pytest.raises(InvalidTimezoneError):
            resolve_date_range("2024-12-25", tz_name)

    def test_non_string_timezone_rejected(self) -> None:
        with pytest.raises(InvalidTimezoneError):
            get_zone(None)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "value",
        ["2024-13-01", "2024-02-30", "12/25/2024", "20241225", "2024-W52-3", "", "yesterday"],
    )
    def test_bad_date_rejected(self, value: str) -> None:
        with pytest.raises(InvalidDateError):
            resolve_date_range(value, CHICAGO)

    def test_last_representable_date_rejected(self) -> None:
        with pytest.raises(InvalidDateError):
            resolve_date_range("9999-12-31", "UTC")

    @pytest.mark.parametrize(
        ("value", "tz_name"),
        [("0001-01-01", "Asia/Tokyo"), ("9999-12-30", "America/Los_Angeles")],
    )
    def test_range_past_calendar_edge_rejected(self, value: str, tz_name: str) -> None:
        with pytest.raises(InvalidDateError):
            resolve_date_range(value, tz_name)

    def test_timezone_checked_before_date(self) -> None:
        with pytest.raises(InvalidTimezoneError):
            resolve_date_range("not-a-date", "Nowhere/Special")

    def test_parse_civil_date(self) -> None:
        assert parse_civil_date("2024-12-25") == date(2024, 12, 25)


# ── Today ────────────────────────────────────────────────────────────────────


class TestToday:
    _NOW = _utc(2024, 12, 26, 3, 0)

    def test_chicago_is_still_the_previous_day(self) -> None:
        assert today(CHICAGO, self._NOW) == "2024-12-25"

    def test_utc(self) -> None:
        assert today("UTC", self._NOW) == "2024-12-26"

    def test_tokyo(self) -> None:
        assert today("Asia/Tokyo", self._NOW) == "2024-12-26"

    def test_today_range_contains_now(self) -> None:
        r = resolve_date_range(today(CHICAGO, self._NOW), CHICAGO)
        assert self._NOW in r

    def test_defaults_to_current_time(self) -> None:
        assert today("UTC") == datetime.now(timezone.utc).date().isoformat()

    def test_unknown_timezone_rejected(self) -> None:
        with pytest.raises(InvalidTimezoneError):
            today("Nowhere/Special", self._NOW)


def test_date_range_model_round_trips() -> None:
    r = DateRange(start=_utc(2024, 1, 1), end=_utc(2024, 1, 2))
    assert DateRange.model_validate(r.model_dump()) == r
