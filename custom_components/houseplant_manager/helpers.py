"""Helpers shared by the Houseplant Manager entity platforms."""

from __future__ import annotations

import logging
from collections.abc import Callable

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.entity import Entity
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DEFAULT_NAME, DOMAIN
from .coordinator import HouseplantCoordinator
from .models import Plant

_LOGGER = logging.getLogger(__name__)


def plant_device_info(plant: Plant) -> DeviceInfo:
    """Return the device that groups a plant's entities."""
    return DeviceInfo(
        identifiers={(DOMAIN, plant.plant_id)},
        name=plant.display_name,
        model=plant.species,
        manufacturer=DEFAULT_NAME,
    )


async def async_sync_plant_entities(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    plant_entities: dict[str, Entity],
    factory: Callable[[HouseplantCoordinator, Plant], Entity],
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Add entities for new active plants and remove those of gone plants.

    Retired plants count as gone: they drop out of every watering view.
    """
    active = {p.plant_id: p for p in coordinator.get_active_plants()}

    new_entities = []
    for plant_id, plant in active.items():
        if plant_id not in plant_entities:
            entity = factory(coordinator, plant)
            plant_entities[plant_id] = entity
            new_entities.append(entity)

    if new_entities:
        async_add_entities(new_entities)
        _LOGGER.debug("Added %d plant entities", len(new_entities))

    entity_registry = er.async_get(hass)
    for plant_id in set(plant_entities) - set(active):
        entity = plant_entities.pop(plant_id)
        if entity.registry_entry:
            entity_registry.async_remove(entity.registry_entry.entity_id)
        await entity.async_remove()


async def async_setup_plant_platform(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
    factory: Callable[[HouseplantCoordinator, Plant], Entity],
) -> dict[str, Entity]:
    """Create per-plant entities and keep them in step with the coordinator."""
    coordinator = config_entry.runtime_data.coordinator
    plant_entities: dict[str, Entity] = {}

    await async_sync_plant_entities(
        hass, coordinator, plant_entities, factory, async_add_entities
    )

    def _listener_callback() -> None:
        """Handle coordinator updates."""
        hass.async_create_task(
            async_sync_plant_entities(
                hass, coordinator, plant_entities, factory, async_add_entities
            )
        )

    config_entry.async_on_unload(coordinator.async_add_listener(_listener_callback))
    return plant_entities


class PlantEntity(CoordinatorEntity[HouseplantCoordinator]):
    """Base class for entities that describe a single plant."""

    def __init__(self, coordinator: HouseplantCoordinator, plant: Plant) -> None:
        """Initialize the plant entity."""
        super().__init__(coordinator)
        self.plant_id = plant.plant_id
        self._attr_device_info = plant_device_info(plant)

    @property
    def plant(self) -> Plant | None:
        """Return the current plant data, or None once it is gone."""
        return self.coordinator.plants.get(self.plant_id)

    @property
    def available(self) -> bool:
        """Return True while the plant is active."""
        plant = self.plant
        return super().available and plant is not None and not plant.retired
