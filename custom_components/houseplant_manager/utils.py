"""Utility functions for date parsing and formatting in houseplant_manager."""

from __future__ import annotations

from datetime import date, datetime, time

from dateutil import parser
from homeassistant.util import dt as dt_util

DateInput = str | datetime | date | None


def parse_date_field(date_value: DateInput) -> datetime | None:
    """Parse various date inputs into a timezone-aware datetime.

    Naive values are interpreted in the Home Assistant local time zone.
    """
    if date_value is None:
        return None
    if isinstance(date_value, datetime):
        parsed = date_value
    elif isinstance(date_value, date):
        parsed = datetime.combine(date_value, datetime.min.time())
    elif isinstance(date_value, str):
        try:
            parsed = parser.isoparse(date_value)
        except (ValueError, TypeError):
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt_util.get_default_time_zone())
    return parsed


def format_date(date_value: DateInput) -> str | None:
    """Format a date input into an ISO string."""
    dt = parse_date_field(date_value)
    if dt is None:
        return None
    return dt.isoformat()


def parse_reminder_time(value: str | None) -> time | None:
    """Parse an "HH:MM" option value.

    Returns:
        The parsed time, or None when the value is empty.

    Raises:
        ValueError: If the value is not a valid "HH:MM" string.
    """
    if not value:
        return None
    hour_text, sep, minute_text = value.strip().partition(":")
    if not sep:
        raise ValueError(f"Invalid reminder time '{value}', expected HH:MM")
    return time(hour=int(hour_text), minute=int(minute_text))
