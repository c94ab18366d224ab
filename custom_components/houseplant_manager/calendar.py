"""Calendar platform for Houseplant Manager.

This file defines a single watering calendar. Every active plant contributes
an all-day event on the day its next watering falls due.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.util import dt as dt_util

from .const import DOMAIN
from .coordinator import HouseplantCoordinator
from .models import Plant
from .watering_calculator import local_due_day, plants_due_on

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the calendar platform for Houseplant Manager from a config entry.

    Args:
        hass: The Home Assistant instance.
        config_entry: The configuration entry.
        async_add_entities: A callback function for adding new entities.
    """
    coordinator = config_entry.runtime_data.coordinator
    async_add_entities([HouseplantWateringCalendar(coordinator)])


class HouseplantWateringCalendar(CoordinatorEntity[HouseplantCoordinator], CalendarEntity):
    """A calendar of upcoming plant waterings."""

    _attr_icon = "mdi:calendar-heart"

    def __init__(self, coordinator: HouseplantCoordinator) -> None:
        """Initialize the watering calendar.

        Args:
            coordinator: The data update coordinator.
        """
        super().__init__(coordinator)
        self._attr_name = "Watering Schedule"
        self._attr_unique_id = f"{DOMAIN}_watering_calendar"

    @property
    def event(self) -> CalendarEvent | None:
        """Return the next upcoming watering, including today's."""
        today = dt_util.now().date()
        days = sorted(d for d in self._due_days() if d >= today)
        if not days:
            return None
        events = self._events_for_day(days[0])
        return events[0] if events else None

    async def async_get_events(
        self, hass: HomeAssistant, start_date: datetime, end_date: datetime
    ) -> list[CalendarEvent]:
        """Return the watering events overlapping a time range.

        Args:
            hass: The Home Assistant instance.
            start_date: The start of the date range.
            end_date: The end of the date range.

        Returns:
            A list of all-day `CalendarEvent` objects, in date order.
        """
        events: list[CalendarEvent] = []
        for day in sorted(self._due_days()):
            day_start = dt_util.start_of_local_day(day)
            day_end = day_start + timedelta(days=1)
            if day_start < end_date and day_end > start_date:
                events.extend(self._events_for_day(day))
        return events

    def _due_days(self) -> set[date]:
        """Return the distinct local due days of all active plants."""
        days = {local_due_day(plant) for plant in self.coordinator.get_active_plants()}
        days.discard(None)
        return days

    def _events_for_day(self, day: date) -> list[CalendarEvent]:
        plants = plants_due_on(day, self.coordinator.get_active_plants())
        return [self._build_event(plant, day) for plant in plants]

    def _build_event(self, plant: Plant, day: date) -> CalendarEvent:
        room = self.coordinator.get_room(plant.room_id) if plant.room_id else None
        description = f"Water {plant.display_name} ({plant.species})."
        return CalendarEvent(
            start=day,
            end=day + timedelta(days=1),
            summary=f"Water {plant.display_name}",
            description=description,
            location=room.name if room else None,
            uid=f"{plant.plant_id}_{day.isoformat()}",
        )
