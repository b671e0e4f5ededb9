"""
Tests for pantryguard/utils/time_utils.py

ISO-week bucketing and ISO-8601 parsing.
"""

from datetime import datetime, timedelta, timezone

import pytest
from pantryguard.utils.time_utils import (
    current_week_key,
    parse_iso,
    record_week_key,
    to_iso,
    week_key_for,
)


class TestWeekKey:
    """Tests for week_key_for / current_week_key."""

    def test_mid_year_week(self):
        assert week_key_for(datetime(2026, 10, 14, tzinfo=timezone.utc)) == "2026-42"

    def test_week_starts_on_monday(self):
        sunday = datetime(2026, 10, 11, 23, 59, tzinfo=timezone.utc)
        monday = datetime(2026, 10, 12, 0, 0, tzinfo=timezone.utc)
        assert week_key_for(sunday) == "2026-41"
        assert week_key_for(monday) == "2026-42"

    def test_late_december_belongs_to_next_iso_year(self):
        assert week_key_for(datetime(2024, 12, 30, tzinfo=timezone.utc)) == "2025-01"

    def test_early_january_belongs_to_previous_iso_year(self):
        assert week_key_for(datetime(2027, 1, 1, tzinfo=timezone.utc)) == "2026-53"

    def test_single_digit_week_is_zero_padded(self):
        assert week_key_for(datetime(2026, 1, 7, tzinfo=timezone.utc)) == "2026-02"

    def test_other_timezones_are_bucketed_in_utc(self):
        plus_three = timezone(timedelta(hours=3))
        # 01:00 Monday in UTC+3 is still Sunday in UTC
        moment = datetime(2026, 10, 12, 1, 0, tzinfo=plus_three)
        assert week_key_for(moment) == "2026-41"

    def test_naive_datetime_is_treated_as_utc(self):
        assert week_key_for(datetime(2026, 10, 14)) == "2026-42"

    def test_current_week_key_uses_given_moment(self):
        assert current_week_key(datetime(2026, 10, 14, tzinfo=timezone.utc)) == "2026-42"


class TestIsoParsing:
    """Tests for to_iso / parse_iso."""

    def test_round_trip_keeps_moment(self):
        moment = datetime(2026, 10, 14, 12, 30, tzinfo=timezone.utc)
        assert parse_iso(to_iso(moment)) == moment

    def test_to_iso_converts_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        assert to_iso(datetime(2026, 10, 14, 14, 0, tzinfo=plus_two)) == "2026-10-14T12:00:00+00:00"

    def test_parse_trailing_z(self):
        parsed = parse_iso("2026-10-14T12:00:00.000Z")
        assert parsed == datetime(2026, 10, 14, 12, 0, tzinfo=timezone.utc)

    def test_parse_naive_is_utc(self):
        assert parse_iso("2026-10-14T12:00:00").tzinfo is not None

    @pytest.mark.parametrize("value", [None, "", "not-a-date", 12345])
    def test_parse_invalid_returns_none(self, value):
        assert parse_iso(value) is None


class TestRecordWeekKey:
    """Tests for record_week_key."""

    def test_stored_week_key_wins(self):
        record = {"week_key": "2026-41", "created_at": "2026-10-14T12:00:00+00:00"}
        assert record_week_key(record) == "2026-41"

    def test_derived_from_created_at(self):
        assert record_week_key({"created_at": "2026-10-14T12:00:00+00:00"}) == "2026-42"

    def test_derived_from_timestamp(self):
        assert record_week_key({"week_key": "", "timestamp": "2027-01-01T00:00:00Z"}) == "2026-53"

    @pytest.mark.parametrize("record", [
        {},
        {"created_at": "not a timestamp"},
        {"week_key": None, "timestamp": None},
    ])
    def test_unreadable_is_none(self, record):
        assert record_week_key(record) is None
