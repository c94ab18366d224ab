"""Storage manager for Houseplant Manager."""

from __future__ import annotations

import logging

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from .const import STORAGE_KEY, STORAGE_VERSION
from .exceptions import PlantStoreError
from .models import Plant, Room
from .rule_table import SpeciesWateringProfile

_LOGGER = logging.getLogger(__name__)


class StorageManager:
    """Manages data persistence for the Houseplant Manager."""

    def __init__(self, coordinator, hass: HomeAssistant) -> None:
        """Initialize the StorageManager.

        Args:
            coordinator: The HouseplantCoordinator instance.
            hass: The Home Assistant instance.
        """
        self.coordinator = coordinator
        self.hass = hass
        self.store = Store(hass, STORAGE_VERSION, STORAGE_KEY)

    async def async_save(self) -> None:
        """Save plants and rooms to persistent storage.

        Raises:
            PlantStoreError: If the store could not be written.
        """
        try:
            await self.store.async_save(
                {
                    "plants": {
                        pid: p.to_dict() for pid, p in self.coordinator.plants.items()
                    },
                    "rooms": {
                        rid: r.to_dict() for rid, r in self.coordinator.rooms.items()
                    },
                }
            )
        except (HomeAssistantError, OSError, TypeError, ValueError) as err:
            _LOGGER.error("Failed to save houseplant data: %s", err)
            raise PlantStoreError(f"Failed to save houseplant data: {err}") from err

    async def async_load(self) -> None:
        """Load data from persistent storage."""
        data = await self.store.async_load()
        if not data:
            _LOGGER.info("No stored data found, starting fresh")
            return

        _LOGGER.debug("Raw storage data keys = %s", list(data.keys()))
        self._load_plants(data)
        self._load_rooms(data)

    def _load_plants(self, data: dict) -> None:
        """Load plants from storage data."""
        plants: dict[str, Plant] = {}
        for pid, raw in data.get("plants", {}).items():
            try:
                plants[pid] = Plant.from_dict({"plant_id": pid, **raw})
            except (TypeError, ValueError) as e:
                _LOGGER.warning("Failed to load plant %s: %s", pid, e)
        self.coordinator.plants = plants
        _LOGGER.info("Loaded %d plants", len(plants))

    def _load_rooms(self, data: dict) -> None:
        """Load rooms from storage data."""
        rooms: dict[str, Room] = {}
        for rid, raw in data.get("rooms", {}).items():
            try:
                rooms[rid] = Room.from_dict({"room_id": rid, **raw})
            except (TypeError, ValueError) as e:
                _LOGGER.warning("Failed to load room %s: %s", rid, e)
        self.coordinator.rooms = rooms
        _LOGGER.info("Loaded %d rooms", len(rooms))

    def load_species_profile(self, species: str | None) -> SpeciesWateringProfile | None:
        """Return the watering profile for a species key, if any."""
        return self.coordinator.rule_table.get(species)

    def load_active_plants(self) -> list[Plant]:
        """Return the active plants in display order."""
        return self.coordinator.order_manager.active_plants()
