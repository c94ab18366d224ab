"""Sensor platform for Houseplant Manager.

Each active plant gets a timestamp sensor holding its next watering. A single
summary sensor counts the plants that are currently overdue.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorStateClass,
)
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity
from homeassistant.util import dt as dt_util

from .const import DOMAIN
from .coordinator import HouseplantCoordinator
from .helpers import PlantEntity, async_setup_plant_platform
from .models import Plant
from .utils import parse_date_field
from .watering_calculator import countdown, format_countdown, is_overdue

_LOGGER = logging.getLogger(__name__)


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the Houseplant Manager sensor platform from a config entry."""
    coordinator = config_entry.runtime_data.coordinator
    async_add_entities([PlantsNeedingWaterSensor(coordinator)])
    await async_setup_plant_platform(
        hass, config_entry, async_add_entities, PlantWateringSensor
    )


class PlantWateringSensor(PlantEntity, SensorEntity):
    """The next watering of a single plant.

    The state is the due timestamp. Attributes carry the countdown, the
    overdue flag and the plant's care settings.
    """

    _attr_device_class = SensorDeviceClass.TIMESTAMP
    _attr_icon = "mdi:watering-can"

    def __init__(self, coordinator: HouseplantCoordinator, plant: Plant) -> None:
        """Initialize the plant watering sensor."""
        super().__init__(coordinator, plant)
        self._attr_unique_id = f"{DOMAIN}_{plant.plant_id}_next_watering"
        self._attr_name = f"{plant.display_name} Next Watering"

    @property
    def native_value(self) -> datetime | None:
        """Return when the plant is next due."""
        plant = self.plant
        if not plant:
            return None
        return parse_date_field(plant.next_watering)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the watering details for the plant."""
        plant = self.plant
        if not plant:
            return {}

        due = parse_date_field(plant.next_watering)
        now = dt_util.now()
        room = self.coordinator.get_room(plant.room_id) if plant.room_id else None

        return {
            "plant_id": plant.plant_id,
            "species": plant.species,
            "custom_name": plant.custom_name,
            "last_watered": plant.last_watered,
            "overdue": is_overdue(due, now) if due else False,
            "countdown": format_countdown(countdown(due, now)) if due else None,
            "order_index": plant.order_index,
            "window_distance": plant.window_distance,
            "pot_material": plant.pot_material,
            "substrate_weight": plant.substrate_weight,
            "humidity": plant.humidity,
            "room_id": plant.room_id,
            "room": room.name if room else None,
            "last_fertilized": plant.last_fertilized,
        }


class PlantsNeedingWaterSensor(CoordinatorEntity[HouseplantCoordinator], SensorEntity):
    """Counts the active plants whose watering is overdue."""

    _attr_icon = "mdi:water-alert"
    _attr_state_class = SensorStateClass.MEASUREMENT
    _attr_native_unit_of_measurement = "plants"

    def __init__(self, coordinator: HouseplantCoordinator) -> None:
        """Initialize the summary sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{DOMAIN}_plants_needing_water"
        self._attr_name = "Plants Needing Water"

    def _overdue_plants(self) -> list[Plant]:
        now = dt_util.now()
        overdue = []
        for plant in self.coordinator.get_active_plants():
            due = parse_date_field(plant.next_watering)
            if due is not None and is_overdue(due, now):
                overdue.append(plant)
        return overdue

    @property
    def native_value(self) -> int:
        """Return the number of overdue plants."""
        return len(self._overdue_plants())

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Return the overdue plants by name."""
        return {
            "plants": [p.display_name for p in self._overdue_plants()],
            "active_plants": len(self.coordinator.get_active_plants()),
        }
