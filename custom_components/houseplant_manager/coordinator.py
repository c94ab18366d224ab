"""Data update coordinator for the Houseplant Manager integration."""

from __future__ import annotations

import logging
import uuid
from dataclasses import fields, replace
from datetime import date, datetime, timedelta
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator
from homeassistant.util import dt as dt_util

from .const import CARE_FIELDS, DATE_FIELDS
from .exceptions import UnknownSpeciesError
from .models import (
    Humidity,
    Plant,
    PotMaterial,
    Room,
    RoomType,
    SubstrateWeight,
    WindowDistance,
)
from .notification_manager import NotificationManager
from .order_manager import PlantOrderManager
from .rule_table import WateringRuleTable
from .storage_manager import StorageManager
from .utils import format_date, parse_date_field
from .watering_calculator import CareAttributes, project_next_watering

_LOGGER = logging.getLogger(__name__)

DateInput = str | datetime | date | None

# Fields that are derived or owned by another component
_PROTECTED_FIELDS = {"next_watering", "order_index", "retired"}

_CARE_ENUMS = {
    "window_distance": WindowDistance,
    "pot_material": PotMaterial,
    "substrate_weight": SubstrateWeight,
    "humidity": Humidity,
}


class HouseplantCoordinator(DataUpdateCoordinator):
    """Manages plant and room data for the Houseplant Manager integration.

    Every mutation follows the same sequence: change the in-memory objects,
    recompute derived watering dates, persist, update reminders and finally
    notify listening entities. Home Assistant runs these on the event loop,
    so mutations never interleave.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        rule_table: WateringRuleTable,
        options: dict | None = None,
    ) -> None:
        """Initialize the Houseplant Coordinator.

        Args:
            hass: The Home Assistant instance.
            rule_table: The watering rules used for every projection.
            options: Configuration options from the config entry (optional).
        """
        super().__init__(
            hass,
            _LOGGER,
            name="Houseplant Manager Coordinator",
            update_interval=timedelta(hours=1),
        )

        self.hass = hass
        self.rule_table = rule_table
        self.options = options or {}
        self.plants: dict[str, Plant] = {}
        self.rooms: dict[str, Room] = {}

        self.order_manager = PlantOrderManager(self)
        self.storage_manager = StorageManager(self, hass)
        self.notification_manager = NotificationManager(hass, self)
        self.update_data_property()

    # =============================================================================
    # STORAGE AND REFRESH
    # =============================================================================

    async def _async_update_data(self) -> dict[str, Any]:
        """Refresh data so overdue flags and the calendar stay current."""
        self.update_data_property()
        return self.data

    async def async_save(self) -> None:
        """Save the current state of all data to persistent storage."""
        await self.storage_manager.async_save()

    async def async_load(self) -> None:
        """Load data from storage, repair the ordering and re-arm reminders."""
        await self.storage_manager.async_load()
        if self.order_manager.normalize():
            await self.async_save()
        self.update_data_property()
        self.notification_manager.reschedule_all(self.plants.values())

    def update_data_property(self) -> None:
        """Update the central `self.data` property to reflect the current state."""
        self.data = {
            "plants": self.plants,
            "rooms": self.rooms,
        }

    async def _async_commit(self, *, reschedule: list[Plant] | None = None) -> None:
        """Persist, update reminders for `reschedule`, then notify listeners."""
        await self.async_save()
        for plant in reschedule or []:
            due = parse_date_field(plant.next_watering)
            if due is None or plant.retired:
                self.notification_manager.cancel_reminder(plant.plant_id)
            else:
                self.notification_manager.schedule_reminder(plant.plant_id, due)
        self.update_data_property()
        self.async_set_updated_data(self.data)

    # =============================================================================
    # LOOKUP HELPERS
    # =============================================================================

    def get_plant(self, plant_id: str) -> Plant | None:
        """Retrieve a plant by its ID."""
        return self.plants.get(plant_id)

    def get_room(self, room_id: str) -> Room | None:
        """Retrieve a room by its ID."""
        return self.rooms.get(room_id)

    def get_active_plants(self) -> list[Plant]:
        """Return active plants in display order."""
        return self.storage_manager.load_active_plants()

    def get_retired_plants(self) -> list[Plant]:
        """Return retired plants, most recently retired first."""
        retired = [p for p in self.plants.values() if p.retired]
        return sorted(retired, key=lambda p: p.updated_at or "", reverse=True)

    def get_room_plants(self, room_id: str) -> list[Plant]:
        """Return active plants in a room, in display order."""
        return [p for p in self.get_active_plants() if p.room_id == room_id]

    def _require_plant(self, plant_id: str) -> Plant:
        plant = self.plants.get(plant_id)
        if plant is None:
            raise ValueError(f"Plant {plant_id} does not exist")
        return plant

    def _require_room(self, room_id: str) -> Room:
        room = self.rooms.get(room_id)
        if room is None:
            raise ValueError(f"Room {room_id} does not exist")
        return room

    @staticmethod
    def _validate_care_fields(values: dict[str, Any]) -> None:
        """Coerce care attributes to their enum members in-place.

        Raises:
            ValueError: If a value is not a known member.
        """
        for key, enum_cls in _CARE_ENUMS.items():
            if key in values and values[key] is not None:
                try:
                    values[key] = enum_cls(values[key])
                except ValueError as err:
                    raise ValueError(f"Invalid {key} '{values[key]}'") from err

    @staticmethod
    def _parse_date_fields(values: dict[str, Any]) -> None:
        """Normalize all date fields within a dictionary in-place."""
        for key in DATE_FIELDS:
            if key in values and values[key] is not None:
                parsed = format_date(values[key])
                if parsed is None:
                    raise ValueError(f"Invalid date for {key}: {values[key]}")
                values[key] = parsed

    # =============================================================================
    # WATERING PROJECTION
    # =============================================================================

    def recompute(self, plant: Plant, reference: datetime | None = None) -> datetime | None:
        """Recompute `next_watering` for a plant in-place.

        This is the single place where the derived due date is written.

        Args:
            plant: The plant to update.
            reference: The instant whose season is used (defaults to now).

        Returns:
            The new due date, or None when the plant was never watered.

        Raises:
            UnknownSpeciesError: If the species has no watering profile. The
                plant is left unchanged.
        """
        profile = self.storage_manager.load_species_profile(plant.species)
        if profile is None:
            raise UnknownSpeciesError(plant.species)

        last_watered = parse_date_field(plant.last_watered)
        if last_watered is None:
            plant.next_watering = None
            return None

        due = project_next_watering(
            profile,
            CareAttributes.from_plant(plant),
            last_watered,
            reference or dt_util.now(),
        )
        plant.next_watering = due.isoformat()
        return due

    # =============================================================================
    # PLANT MANAGEMENT
    # =============================================================================

    async def async_add_plant(
        self,
        species: str,
        custom_name: str = "",
        window_distance: str = WindowDistance.MEDIUM,
        pot_material: str = PotMaterial.PLASTIC,
        substrate_weight: str = SubstrateWeight.STANDARD,
        humidity: str = Humidity.STANDARD,
        last_watered: DateInput = None,
        room_id: str | None = None,
        height: float | None = None,
        pot_size: float | None = None,
        last_fertilized: DateInput = None,
    ) -> Plant:
        """Add a new plant at the end of the display order.

        Args:
            species: The species key into the watering rule table.
            custom_name: The name the user gave the plant (optional).
            window_distance: Distance bucket from the window.
            pot_material: Material of the pot.
            substrate_weight: Weight class of the substrate.
            humidity: Humidity bucket around the plant.
            last_watered: When the plant was last watered (defaults to now).
            room_id: The room the plant stands in (optional).
            height: Height of the plant in centimeters (optional).
            pot_size: Pot diameter in centimeters (optional).
            last_fertilized: When the plant was last fertilized (optional).

        Returns:
            The newly created Plant object.

        Raises:
            UnknownSpeciesError: If the species has no watering profile.
            ValueError: If a care attribute, date or room is invalid.
        """
        values: dict[str, Any] = {
            "window_distance": window_distance,
            "pot_material": pot_material,
            "substrate_weight": substrate_weight,
            "humidity": humidity,
            "last_watered": last_watered or dt_util.now(),
            "last_fertilized": last_fertilized,
        }
        self._validate_care_fields(values)
        self._parse_date_fields(values)
        if room_id is not None:
            self._require_room(room_id)

        now = dt_util.now().isoformat()
        plant = Plant(
            plant_id=uuid.uuid4().hex,
            species=species.strip(),
            custom_name=(custom_name or "").strip(),
            room_id=room_id,
            height=height,
            pot_size=pot_size,
            created_at=now,
            updated_at=now,
            **values,
        )
        self.recompute(plant)
        self.order_manager.append(plant)
        self.plants[plant.plant_id] = plant

        _LOGGER.info(
            "Added plant %s (%s) at position %d, next watering %s",
            plant.display_name,
            plant.plant_id,
            plant.order_index,
            plant.next_watering,
        )
        await self._async_commit(reschedule=[plant])
        return plant

    async def async_update_plant(self, plant_id: str, **updates: Any) -> Plant:
        """Update the attributes of an existing plant.

        The due date is recomputed when a care attribute, the species or the
        last watering changes.

        Raises:
            ValueError: If the plant does not exist or a field is invalid.
            UnknownSpeciesError: If the new species has no watering profile.
                The plant is left unchanged.
        """
        plant = self._require_plant(plant_id)

        protected = _PROTECTED_FIELDS.intersection(updates)
        if protected:
            raise ValueError(f"Fields cannot be set directly: {sorted(protected)}")
        if updates.get("room_id") is not None:
            self._require_room(updates["room_id"])
        self._validate_care_fields(updates)
        self._parse_date_fields(updates)

        plant_fields = {field.name for field in fields(Plant)}
        valid = {}
        for key, value in updates.items():
            if key in plant_fields:
                valid[key] = value
            else:
                _LOGGER.warning("Ignoring invalid plant field %s", key)

        candidate = replace(plant, **valid)
        care_changed = any(
            getattr(candidate, key) != getattr(plant, key) for key in CARE_FIELDS
        )
        if care_changed:
            self.recompute(candidate)
        candidate.updated_at = dt_util.now().isoformat()
        self.plants[plant_id] = candidate

        _LOGGER.debug("Updated plant %s: %s", plant_id, valid)
        await self._async_commit(reschedule=[candidate] if care_changed else None)
        return candidate

    async def async_mark_watered(
        self, plant_id: str, watered_at: DateInput = None
    ) -> Plant:
        """Record a watering and project the next one.

        Raises:
            ValueError: If the plant does not exist or is retired.
            UnknownSpeciesError: If the species has no watering profile.
        """
        plant = self._require_plant(plant_id)
        if plant.retired:
            raise ValueError(f"Plant {plant_id} is retired")

        values = {"last_watered": watered_at or dt_util.now()}
        self._parse_date_fields(values)

        candidate = replace(plant, **values)
        self.recompute(candidate)
        candidate.updated_at = dt_util.now().isoformat()
        self.plants[plant_id] = candidate

        _LOGGER.info(
            "Plant %s watered, next watering %s",
            candidate.display_name,
            candidate.next_watering,
        )
        await self._async_commit(reschedule=[candidate])
        return candidate

    async def async_retire_plant(self, plant_id: str) -> Plant:
        """Archive a plant, closing its gap in the ordering.

        Retiring is one-way; retiring an already retired plant does nothing.
        """
        plant = self._require_plant(plant_id)
        if plant.retired:
            return plant

        plant.retired = True
        plant.updated_at = dt_util.now().isoformat()
        self.order_manager.remove(plant)

        _LOGGER.info("Retired plant %s (%s)", plant.display_name, plant_id)
        await self._async_commit(reschedule=[plant])
        return plant

    async def async_remove_plant(self, plant_id: str) -> None:
        """Delete a plant permanently."""
        plant = self._require_plant(plant_id)
        self.notification_manager.cancel_reminder(plant_id)
        self.order_manager.remove(plant)
        del self.plants[plant_id]

        _LOGGER.info("Removed plant %s (%s)", plant.display_name, plant_id)
        await self._async_commit()

    async def async_reorder_plants(self, from_index: int, to_index: int) -> list[Plant]:
        """Move an active plant to a new display position.

        Raises:
            ValueError: If an index is out of range. Nothing is changed.
        """
        plants = self.order_manager.reorder(from_index, to_index)
        if from_index != to_index:
            await self._async_commit()
        return plants

    # =============================================================================
    # ROOM MANAGEMENT
    # =============================================================================

    async def async_add_room(
        self,
        name: str,
        room_type: str = RoomType.LIVING_ROOM,
        compass_direction: float = 0.0,
    ) -> Room:
        """Add a new room."""
        room = Room.from_dict(
            {
                "room_id": uuid.uuid4().hex,
                "name": name.strip(),
                "room_type": room_type,
                "compass_direction": float(compass_direction) % 360,
                "created_at": dt_util.now().isoformat(),
            }
        )
        self.rooms[room.room_id] = room
        _LOGGER.info("Added room %s (%s)", room.name, room.room_id)
        await self._async_commit()
        return room

    async def async_update_room(self, room_id: str, **updates: Any) -> Room:
        """Update the attributes of an existing room."""
        room = self._require_room(room_id)
        if "compass_direction" in updates:
            updates["compass_direction"] = float(updates["compass_direction"]) % 360

        updated = Room.from_dict({**room.to_dict(), **updates})
        self.rooms[room_id] = updated
        _LOGGER.debug("Updated room %s: %s", room_id, updates)
        await self._async_commit()
        return updated

    async def async_remove_room(self, room_id: str) -> None:
        """Delete a room, leaving its plants without a room."""
        room = self._require_room(room_id)
        for plant in self.plants.values():
            if plant.room_id == room_id:
                plant.room_id = None
        del self.rooms[room_id]
        _LOGGER.info("Removed room %s (%s)", room.name, room_id)
        await self._async_commit()

    async def async_assign_plant_to_room(
        self, plant_id: str, room_id: str | None
    ) -> Plant:
        """Place a plant in a room, or take it out with room_id=None."""
        plant = self._require_plant(plant_id)
        if room_id is not None:
            self._require_room(room_id)
        plant.room_id = room_id
        plant.updated_at = dt_util.now().isoformat()
        await self._async_commit()
        return plant
