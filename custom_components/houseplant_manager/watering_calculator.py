"""Watering schedule calculations for Houseplant Manager.

All functions in this module are pure: they take plain values (or a rule table
profile) and return new values without touching Home Assistant state. The
coordinator is the only caller that feeds their results back into storage.
Calendar days are always taken in the Home Assistant local time zone.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from homeassistant.util import dt as dt_util

from .const import (
    AUTUMN_END,
    DEFAULT_INTERVAL_DAYS,
    MAX_INTERVAL_DAYS,
    MIN_INTERVAL_DAYS,
    SPRING_START,
    SUMMER_END,
    SUMMER_START,
)
from .models import (
    Humidity,
    Plant,
    PotMaterial,
    Season,
    SubstrateWeight,
    WindowDistance,
)
from .utils import parse_date_field

if TYPE_CHECKING:
    from .rule_table import ProximityProfile, SpeciesWateringProfile

_LOGGER = logging.getLogger(__name__)


class CountdownState(Enum):
    """Sentinel states returned by `countdown`."""

    OVERDUE = "overdue"


@dataclass(frozen=True)
class WateringCountdown:
    """Time left until the next watering, split into whole units."""

    days: int
    hours: int
    minutes: int


@dataclass(frozen=True)
class CareAttributes:
    """The static plant attributes that drive the watering interval."""

    window_distance: WindowDistance
    pot_material: PotMaterial | str
    substrate_weight: SubstrateWeight | str
    humidity: Humidity

    @classmethod
    def from_plant(cls, plant: Plant) -> CareAttributes:
        """Build care attributes from a stored plant.

        Pot material and substrate weight are kept as raw strings when they are
        not known members, so the interval lookup can apply its fallback.
        Unknown distance and humidity values fall back to the defaults.
        """
        try:
            distance = WindowDistance(plant.window_distance)
        except ValueError:
            _LOGGER.warning(
                "Plant %s has unknown window distance '%s', using medium",
                plant.plant_id,
                plant.window_distance,
            )
            distance = WindowDistance.MEDIUM
        try:
            humidity = Humidity(plant.humidity)
        except ValueError:
            humidity = Humidity.STANDARD

        return cls(
            window_distance=distance,
            pot_material=_coerce(PotMaterial, plant.pot_material),
            substrate_weight=_coerce(SubstrateWeight, plant.substrate_weight),
            humidity=humidity,
        )


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def resolve_season(value: date | datetime) -> Season:
    """Return the season bucket for a date; the year is ignored."""
    month_day = (value.month, value.day)
    if SUMMER_START <= month_day <= SUMMER_END:
        return Season.SUMMER
    if SPRING_START <= month_day <= AUTUMN_END:
        return Season.SPRING_AUTUMN
    return Season.WINTER


def parse_interval_range(text: str) -> tuple[int, int]:
    """Parse a "<min>-<max>" interval range.

    An inverted range such as "5-4" is rejected rather than read by its first
    bound, so it falls back to the default like any other malformed entry.

    Raises:
        ValueError: If the text is not two whole day counts with
            1 <= min <= max <= MAX_INTERVAL_DAYS.
    """
    if not isinstance(text, str):
        raise ValueError(f"Interval range must be a string, got {type(text)}")
    parts = text.split("-")
    if len(parts) != 2:
        raise ValueError(f"Interval range '{text}' must have exactly two parts")
    low, high = int(parts[0]), int(parts[1])
    if low < MIN_INTERVAL_DAYS or high < low or high > MAX_INTERVAL_DAYS:
        raise ValueError(f"Interval range '{text}' is out of bounds")
    return low, high


def resolve_interval(
    profile: ProximityProfile,
    pot_material: PotMaterial | str,
    substrate_weight: SubstrateWeight | str,
    humidity: Humidity | str,
) -> int:
    """Resolve the number of days between waterings.

    The minimum bound of the configured range is the base interval. Low
    humidity shortens it by one day, never below one day. Any lookup or
    parsing problem yields the default interval instead of an error.
    """
    range_text = profile.interval_range(pot_material, substrate_weight)
    try:
        interval, _ = parse_interval_range(range_text)
    except ValueError:
        _LOGGER.debug(
            "Falling back to %d days for range %r (%s/%s)",
            DEFAULT_INTERVAL_DAYS,
            range_text,
            pot_material,
            substrate_weight,
        )
        interval = DEFAULT_INTERVAL_DAYS

    if humidity == Humidity.LOW:
        interval = max(MIN_INTERVAL_DAYS, interval - 1)
    return interval


def project_next_watering(
    profile: SpeciesWateringProfile,
    care: CareAttributes,
    last_watered: datetime,
    reference: date | datetime | None = None,
) -> datetime:
    """Project the next watering from the last one.

    The season is taken from `reference` (defaults to now), not from
    `last_watered`. Whole calendar days are added on the local wall clock, so
    the local time of day of `last_watered` is kept across DST changes. The
    result carries the UTC offset of `last_watered`.
    """
    if reference is None:
        reference = dt_util.now()
    elif isinstance(reference, datetime) and reference.tzinfo is not None:
        reference = dt_util.as_local(reference)
    season = resolve_season(reference)
    proximity = profile.for_season(season).for_distance(care.window_distance)
    interval = resolve_interval(
        proximity, care.pot_material, care.substrate_weight, care.humidity
    )
    _LOGGER.debug(
        "Projected %s: season=%s distance=%s interval=%d",
        profile.species,
        season,
        care.window_distance,
        interval,
    )
    due = dt_util.as_local(last_watered) + timedelta(days=interval)
    return due.astimezone(last_watered.tzinfo)


def is_overdue(due: datetime, now: datetime) -> bool:
    """Return True when the due date lies strictly before now."""
    return due < now


def countdown(
    due: datetime, now: datetime
) -> WateringCountdown | CountdownState:
    """Return the time left until `due`, or OVERDUE once it has passed."""
    if is_overdue(due, now):
        return CountdownState.OVERDUE
    delta = due - now
    return WateringCountdown(
        days=delta.days,
        hours=delta.seconds // 3600,
        minutes=(delta.seconds % 3600) // 60,
    )


def format_countdown(value: WateringCountdown | CountdownState) -> str:
    """Format a countdown as "DD:HH:MM"."""
    if value is CountdownState.OVERDUE:
        return CountdownState.OVERDUE.value
    return f"{value.days:02d}:{value.hours:02d}:{value.minutes:02d}"


def local_due_day(plant: Plant) -> date | None:
    """Return the local calendar day a plant is due, or None if it is not."""
    if plant.retired:
        return None
    due = parse_date_field(plant.next_watering)
    if due is None:
        return None
    return dt_util.as_local(due).date()


def watering_dates_in_month(
    reference: date | datetime, plants: Iterable[Plant]
) -> set[date]:
    """Return the distinct due days that fall in the month of `reference`."""
    dates: set[date] = set()
    for plant in plants:
        day = local_due_day(plant)
        if day is None:
            continue
        if day.year == reference.year and day.month == reference.month:
            dates.add(day)
    return dates


def plants_due_on(day: date | datetime, plants: Iterable[Plant]) -> list[Plant]:
    """Return the active plants due on the same calendar day as `day`."""
    if isinstance(day, datetime):
        day = dt_util.as_local(day).date() if day.tzinfo else day.date()
    return [plant for plant in plants if local_due_day(plant) == day]
