"""Services related to Plants."""

import logging
from typing import Any

from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import ServiceValidationError

from ..const import EVENT_PLANT_ADDED, EVENT_PLANT_RETIRED, EVENT_PLANT_WATERED
from ..coordinator import HouseplantCoordinator

_LOGGER = logging.getLogger(__name__)


def _resolve_plant_id(hass: HomeAssistant, plant_id: str) -> str:
    """Resolve a plant ID from an entity ID if necessary."""
    if "." not in plant_id:
        return plant_id

    state = hass.states.get(plant_id)
    if state and state.attributes.get("plant_id"):
        resolved_id = state.attributes["plant_id"]
        _LOGGER.debug("Resolved entity ID '%s' to plant ID '%s'", plant_id, resolved_id)
        return resolved_id
    _LOGGER.warning("Could not resolve entity ID '%s' to a plant_id attribute", plant_id)
    return plant_id


def _require_plant(coordinator: HouseplantCoordinator, plant_id: str) -> None:
    if plant_id not in coordinator.plants:
        _LOGGER.error("Plant %s not found", plant_id)
        raise ServiceValidationError(f"Plant {plant_id} not found.")


def _prepare_update_data(service_data: dict[str, Any]) -> dict[str, Any]:
    """Return the fields to update, without the plant ID."""
    return {k: v for k, v in service_data.items() if k != "plant_id"}


async def handle_add_plant(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle add plant service call."""
    _LOGGER.debug("Service call: add_plant with data: %s", call.data)
    try:
        plant = await coordinator.async_add_plant(**call.data)
    except ValueError as err:
        _LOGGER.error("Cannot add plant: %s", err)
        raise ServiceValidationError(str(err)) from err
    except Exception as err:
        _LOGGER.exception("Failed to add plant: %s", err)
        raise

    hass.bus.async_fire(
        EVENT_PLANT_ADDED,
        {
            "plant_id": plant.plant_id,
            "species": plant.species,
            "name": plant.display_name,
            "next_watering": plant.next_watering,
        },
    )


async def handle_update_plant(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle update plant service call."""
    plant_id = _resolve_plant_id(hass, call.data["plant_id"])
    _require_plant(coordinator, plant_id)

    update_data = _prepare_update_data(dict(call.data))
    if not update_data:
        _LOGGER.warning("No valid fields provided for plant %s update", plant_id)
        return

    try:
        await coordinator.async_update_plant(plant_id, **update_data)
        _LOGGER.info("Plant %s updated: %s", plant_id, list(update_data))
    except ValueError as err:
        _LOGGER.error("Cannot update plant %s: %s", plant_id, err)
        raise ServiceValidationError(str(err)) from err
    except Exception as err:
        _LOGGER.exception("Failed to update plant %s: %s", plant_id, err)
        raise


async def handle_mark_watered(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle mark watered service call."""
    plant_id = _resolve_plant_id(hass, call.data["plant_id"])
    _require_plant(coordinator, plant_id)

    try:
        plant = await coordinator.async_mark_watered(
            plant_id, call.data.get("watered_at")
        )
    except ValueError as err:
        raise ServiceValidationError(str(err)) from err
    except Exception as err:
        _LOGGER.exception("Failed to mark plant %s as watered: %s", plant_id, err)
        raise

    hass.bus.async_fire(
        EVENT_PLANT_WATERED,
        {
            "plant_id": plant_id,
            "last_watered": plant.last_watered,
            "next_watering": plant.next_watering,
        },
    )


async def handle_retire_plant(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle retire plant service call."""
    plant_id = _resolve_plant_id(hass, call.data["plant_id"])
    _require_plant(coordinator, plant_id)

    if coordinator.plants[plant_id].retired:
        _LOGGER.debug("Plant %s is already retired", plant_id)
        return

    try:
        plant = await coordinator.async_retire_plant(plant_id)
    except Exception as err:
        _LOGGER.exception("Failed to retire plant %s: %s", plant_id, err)
        raise

    hass.bus.async_fire(
        EVENT_PLANT_RETIRED,
        {"plant_id": plant_id, "name": plant.display_name},
    )


async def handle_remove_plant(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle remove plant service call."""
    plant_id = _resolve_plant_id(hass, call.data["plant_id"])
    _require_plant(coordinator, plant_id)

    try:
        await coordinator.async_remove_plant(plant_id)
    except Exception as err:
        _LOGGER.exception("Failed to remove plant %s: %s", plant_id, err)
        raise


async def handle_reorder_plants(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> None:
    """Handle reorder plants service call."""
    from_index = call.data["from_index"]
    to_index = call.data["to_index"]

    try:
        await coordinator.async_reorder_plants(from_index, to_index)
    except ValueError as err:
        _LOGGER.error("Cannot reorder plants: %s", err)
        raise ServiceValidationError(str(err)) from err
    except Exception as err:
        _LOGGER.exception(
            "Failed to move plant from %d to %d: %s", from_index, to_index, err
        )
        raise
