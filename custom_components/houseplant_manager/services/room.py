"""Services related to Rooms."""

import logging

from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ServiceValidationError

from ..coordinator import HouseplantCoordinator

_LOGGER = logging.getLogger(__name__)


async def handle_add_room(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle add room service call."""
    try:
        await coordinator.async_add_room(
            name=call.data["name"],
            room_type=call.data.get("room_type"),
            compass_direction=call.data.get("compass_direction", 0.0),
        )
    except Exception as err:
        _LOGGER.exception("Failed to add room %s: %s", call.data.get("name"), err)
        raise


async def handle_update_room(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle update room service call."""
    room_id = call.data["room_id"]
    if room_id not in coordinator.rooms:
        raise ServiceValidationError(f"Room {room_id} not found.")

    updates = {k: v for k, v in call.data.items() if k != "room_id"}
    if not updates:
        _LOGGER.warning("No valid fields provided for room %s update", room_id)
        return

    try:
        await coordinator.async_update_room(room_id, **updates)
    except ValueError as err:
        raise ServiceValidationError(str(err)) from err
    except Exception as err:
        _LOGGER.exception("Failed to update room %s: %s", room_id, err)
        raise


async def handle_remove_room(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle remove room service call."""
    room_id = call.data["room_id"]
    if room_id not in coordinator.rooms:
        raise ServiceValidationError(f"Room {room_id} not found.")

    try:
        await coordinator.async_remove_room(room_id)
    except Exception as err:
        _LOGGER.exception("Failed to remove room %s: %s", room_id, err)
        raise


async def handle_assign_plant_to_room(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle assign plant to room service call."""
    plant_id = call.data["plant_id"]
    room_id = call.data.get("room_id")

    try:
        await coordinator.async_assign_plant_to_room(plant_id, room_id)
        _LOGGER.info("Plant %s assigned to room %s", plant_id, room_id)
    except ValueError as err:
        raise ServiceValidationError(str(err)) from err
    except Exception as err:
        _LOGGER.exception("Failed to assign plant %s to room %s: %s", plant_id, room_id, err)
        raise
