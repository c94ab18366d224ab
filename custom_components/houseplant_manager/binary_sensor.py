"""Binary sensor platform for Houseplant Manager."""

from __future__ import annotations

from typing import Any

from homeassistant.components.binary_sensor import (
    BinarySensorDeviceClass,
    BinarySensorEntity,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util import dt as dt_util

from .const import DOMAIN
from .coordinator import HouseplantCoordinator
from .helpers import PlantEntity, async_setup_plant_platform
from .models import Plant
from .utils import parse_date_field
from .watering_calculator import is_overdue


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Houseplant Manager binary sensors from a config entry."""
    await async_setup_plant_platform(
        hass, config_entry, async_add_entities, NeedsWateringBinarySensor
    )


class NeedsWateringBinarySensor(PlantEntity, BinarySensorEntity):
    """On while a plant's watering is overdue."""

    _attr_device_class = BinarySensorDeviceClass.PROBLEM
    _attr_icon = "mdi:water-alert-outline"

    def __init__(self, coordinator: HouseplantCoordinator, plant: Plant) -> None:
        """Initialize the binary sensor."""
        super().__init__(coordinator, plant)
        self._attr_unique_id = f"{DOMAIN}_{plant.plant_id}_needs_watering"
        self._attr_name = f"{plant.display_name} Needs Watering"

    @property
    def is_on(self) -> bool:
        """Return True when the due date has passed."""
        plant = self.plant
        if not plant:
            return False
        due = parse_date_field(plant.next_watering)
        return due is not None and is_overdue(due, dt_util.now())

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the due date the flag is based on."""
        plant = self.plant
        return {"next_watering": plant.next_watering if plant else None}
