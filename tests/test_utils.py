"""Tests for the date utilities."""

from datetime import date, datetime, time, timezone

import pytest

from custom_components.houseplant_manager.utils import (
    format_date,
    parse_date_field,
    parse_reminder_time,
)


def test_parse_date_field_aware_string():
    """Offsets in ISO strings are kept."""
    parsed = parse_date_field("2024-07-01T08:00:00+00:00")
    assert parsed == datetime(2024, 7, 1, 8, 0, tzinfo=timezone.utc)


def test_parse_date_field_naive_values_get_a_time_zone():
    """Naive strings, datetimes and dates become timezone aware."""
    for value in ("2024-07-01T08:00:00", datetime(2024, 7, 1, 8), date(2024, 7, 1)):
        parsed = parse_date_field(value)
        assert parsed is not None
        assert parsed.tzinfo is not None


def test_parse_date_field_date_is_midnight():
    """A bare date is read as the start of that day."""
    parsed = parse_date_field(date(2024, 7, 1))
    assert (parsed.year, parsed.month, parsed.day, parsed.hour) == (2024, 7, 1, 0)


@pytest.mark.parametrize("value", [None, "", "not a date", 12345])
def test_parse_date_field_invalid(value):
    """Unparseable values give None."""
    assert parse_date_field(value) is None


def test_format_date():
    """Dates are written as ISO strings."""
    assert format_date("2024-07-01T08:00:00+00:00") == "2024-07-01T08:00:00+00:00"
    assert format_date(None) is None
    assert format_date("garbage") is None


def test_parse_reminder_time():
    """HH:MM values parse to a time of day."""
    assert parse_reminder_time("07:30") == time(7, 30)
    assert parse_reminder_time(" 18:05 ") == time(18, 5)
    assert parse_reminder_time(None) is None
    assert parse_reminder_time("") is None


@pytest.mark.parametrize("value", ["7pm", "24:00", "12:60", "ab:cd"])
def test_parse_reminder_time_invalid(value):
    """Anything else is a ValueError."""
    with pytest.raises(ValueError):
        parse_reminder_time(value)
