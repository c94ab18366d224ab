"""Notification manager for Houseplant Manager."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, time
from functools import partial
from typing import Any

from homeassistant.components import persistent_notification
from homeassistant.core import CALLBACK_TYPE, HomeAssistant, callback
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.event import async_track_point_in_time
from homeassistant.util import dt as dt_util

from .const import (
    CONF_NOTIFICATION_TARGET,
    CONF_REMINDER_TIME,
    REMINDER_MESSAGE,
    REMINDER_NOTIFICATION_ID,
    REMINDER_TITLE,
)
from .models import Plant
from .utils import parse_date_field, parse_reminder_time

_LOGGER = logging.getLogger(__name__)


class NotificationManager:
    """Keeps at most one pending watering reminder per plant."""

    def __init__(self, hass: HomeAssistant, coordinator: Any) -> None:
        """Initialize the notification manager."""
        self.hass = hass
        self.coordinator = coordinator
        self._pending: dict[str, CALLBACK_TYPE] = {}

    @property
    def notification_target(self) -> str | None:
        """Return the configured notify service, without the domain."""
        target = self.coordinator.options.get(CONF_NOTIFICATION_TARGET)
        if not target:
            return None
        return target.replace("notify.", "")

    @property
    def reminder_time(self) -> time | None:
        """Return the preferred time of day for reminders, if configured."""
        try:
            return parse_reminder_time(self.coordinator.options.get(CONF_REMINDER_TIME))
        except ValueError as err:
            _LOGGER.warning("Ignoring reminder time option: %s", err)
            return None

    @property
    def pending(self) -> list[str]:
        """Return the plant IDs that have a reminder armed."""
        return list(self._pending)

    def fire_time(self, due: datetime) -> datetime:
        """Return when the reminder for a due date should fire."""
        preferred = self.reminder_time
        if preferred is None:
            return due
        return dt_util.as_local(due).replace(
            hour=preferred.hour, minute=preferred.minute, second=0, microsecond=0
        )

    @callback
    def schedule_reminder(self, plant_id: str, at: datetime) -> bool:
        """Arm a reminder for a plant, replacing any pending one.

        Returns:
            True if a reminder was armed, False if its fire time has passed.
        """
        self.cancel_reminder(plant_id)

        fire_at = self.fire_time(at)
        if fire_at <= dt_util.now():
            _LOGGER.debug(
                "Not arming reminder for %s, fire time %s has passed", plant_id, fire_at
            )
            return False

        self._pending[plant_id] = async_track_point_in_time(
            self.hass, partial(self._async_fire_reminder, plant_id), fire_at
        )
        _LOGGER.debug("Reminder for %s armed at %s", plant_id, fire_at)
        return True

    @callback
    def cancel_reminder(self, plant_id: str) -> None:
        """Cancel the pending reminder for a plant, if any."""
        unsub = self._pending.pop(plant_id, None)
        if unsub is not None:
            unsub()
            _LOGGER.debug("Reminder for %s cancelled", plant_id)

    @callback
    def cancel_all(self) -> None:
        """Cancel every pending reminder."""
        for plant_id in list(self._pending):
            self.cancel_reminder(plant_id)

    @callback
    def reschedule_all(self, plants: Iterable[Plant]) -> int:
        """Re-arm reminders for all active plants with a due date.

        Returns:
            The number of reminders armed.
        """
        self.cancel_all()
        armed = 0
        for plant in plants:
            if plant.retired:
                continue
            due = parse_date_field(plant.next_watering)
            if due is not None and self.schedule_reminder(plant.plant_id, due):
                armed += 1
        _LOGGER.info("Armed %d watering reminders", armed)
        return armed

    async def _async_fire_reminder(self, plant_id: str, now: datetime) -> None:
        """Deliver a reminder that came due."""
        self._pending.pop(plant_id, None)
        plant = self.coordinator.plants.get(plant_id)
        if plant is None or plant.retired:
            return
        await self.async_send_reminder(plant)

    async def async_send_reminder(self, plant: Plant) -> None:
        """Send a watering reminder for a plant.

        Uses the configured notify service, or a persistent notification when
        none is set.
        """
        message = REMINDER_MESSAGE.format(name=plant.display_name)
        service = self.notification_target

        if service is None:
            persistent_notification.async_create(
                self.hass,
                message,
                title=REMINDER_TITLE,
                notification_id=f"{REMINDER_NOTIFICATION_ID}_{plant.plant_id}",
            )
            _LOGGER.info("Reminder posted for %s", plant.display_name)
            return

        try:
            await self.hass.services.async_call(
                "notify",
                service,
                {
                    "message": message,
                    "title": REMINDER_TITLE,
                },
                blocking=False,
            )
            _LOGGER.info("Reminder sent to %s: %s", service, message)
        except (HomeAssistantError, AttributeError, TypeError, ValueError) as e:
            _LOGGER.error("Failed to send reminder to %s: %s", service, e)
