"""
Tests for the date and time helpers used by scheduling.
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from vet_scheduling.utils import (
    day_bounds,
    ensure_utc,
    format_slot,
    get_current_utc,
    intervals_overlap,
    to_utc,
)


def at(hour, minute=0):
    return datetime(2024, 1, 10, hour, minute, tzinfo=timezone.utc)


class TestTimezoneHelpers:
    """Test cases for UTC normalization."""

    def test_current_utc_is_aware(self):
        assert get_current_utc().utcoffset() == timedelta(0)

    def test_ensure_utc_attaches_utc_to_naive(self):
        naive = datetime(2024, 1, 10, 10, 0)

        assert ensure_utc(naive) == at(10)
        assert ensure_utc(naive).tzinfo is not None

    def test_ensure_utc_converts_offsets(self):
        plus_two = datetime(2024, 1, 10, 12, 0, tzinfo=timezone(timedelta(hours=2)))

        assert ensure_utc(plus_two) == at(10)
        assert ensure_utc(plus_two).utcoffset() == timedelta(0)

    def test_to_utc_interprets_naive_in_source_zone(self):
        local = datetime(2024, 1, 10, 9, 0)

        assert to_utc(local, "America/New_York") == at(14)

    def test_day_bounds_in_timezone(self):
        start, end = day_bounds(date(2024, 1, 10), "Europe/Berlin")

        assert start == datetime(2024, 1, 9, 23, 0, tzinfo=timezone.utc)
        assert end == datetime(2024, 1, 10, 23, 0, tzinfo=timezone.utc)

    def test_day_bounds_default_utc(self):
        start, end = day_bounds(date(2024, 1, 10))

        assert (start, end) == (at(0), at(0) + timedelta(days=1))

    def test_format_slot(self):
        assert format_slot(datetime(2024, 1, 10, 9, 5)) == "09:05"


class TestIntervalsOverlap:
    """Half-open overlap semantics."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ((at(10), at(11)), (at(10, 30), at(11, 30)), True),
            ((at(10), at(11)), (at(10, 15), at(10, 45)), True),
            ((at(10), at(11)), (at(9), at(12)), True),
            ((at(10), at(11)), (at(11), at(12)), False),
            ((at(10), at(11)), (at(9), at(10)), False),
            ((at(10), at(11)), (at(12), at(13)), False),
        ],
    )
    def test_overlap(self, a, b, expected):
        assert intervals_overlap(*a, *b) is expected
        assert intervals_overlap(*b, *a) is expected
