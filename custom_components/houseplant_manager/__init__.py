"""Houseplant Manager integration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, cast

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, SupportsResponse
from homeassistant.exceptions import ConfigEntryError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .const import CONF_RULE_TABLE_PATH, DEFAULT_RULE_TABLE_FILE, DOMAIN, PLATFORMS
from .coordinator import HouseplantCoordinator
from .exceptions import RuleTableError
from .rule_table import WateringRuleTable
from .services import (
    ADD_PLANT_SCHEMA,
    ADD_ROOM_SCHEMA,
    ASSIGN_PLANT_TO_ROOM_SCHEMA,
    GET_WATERING_SCHEDULE_SCHEMA,
    LIST_RETIRED_PLANTS_SCHEMA,
    MARK_WATERED_SCHEMA,
    REMOVE_PLANT_SCHEMA,
    REMOVE_ROOM_SCHEMA,
    REORDER_PLANTS_SCHEMA,
    RETIRE_PLANT_SCHEMA,
    SEARCH_SPECIES_SCHEMA,
    UPDATE_PLANT_SCHEMA,
    UPDATE_ROOM_SCHEMA,
    plant,
    room,
    schedule,
)

CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)

_LOGGER = logging.getLogger(__name__)

RESPONSE_ONLY_SERVICES = [
    "search_species",
    "get_watering_schedule",
    "list_retired_plants",
]


@dataclass
class HouseplantRuntimeData:
    """Runtime data for the Houseplant Manager integration."""

    coordinator: HouseplantCoordinator
    rule_table: WateringRuleTable


type HouseplantConfigEntry = ConfigEntry[HouseplantRuntimeData]


def _service_definitions(
    hass: HomeAssistant, coordinator: HouseplantCoordinator
) -> list[tuple[str, Any, Any]]:
    """Return (name, handler, schema) for every service."""
    return [
        (
            "add_plant",
            partial(plant.handle_add_plant, hass, coordinator),
            ADD_PLANT_SCHEMA,
        ),
        (
            "update_plant",
            partial(plant.handle_update_plant, hass, coordinator),
            UPDATE_PLANT_SCHEMA,
        ),
        (
            "mark_watered",
            partial(plant.handle_mark_watered, hass, coordinator),
            MARK_WATERED_SCHEMA,
        ),
        (
            "retire_plant",
            partial(plant.handle_retire_plant, hass, coordinator),
            RETIRE_PLANT_SCHEMA,
        ),
        (
            "remove_plant",
            partial(plant.handle_remove_plant, hass, coordinator),
            REMOVE_PLANT_SCHEMA,
        ),
        (
            "reorder_plants",
            partial(plant.handle_reorder_plants, hass, coordinator),
            REORDER_PLANTS_SCHEMA,
        ),
        (
            "add_room",
            partial(room.handle_add_room, hass, coordinator),
            ADD_ROOM_SCHEMA,
        ),
        (
            "update_room",
            partial(room.handle_update_room, hass, coordinator),
            UPDATE_ROOM_SCHEMA,
        ),
        (
            "remove_room",
            partial(room.handle_remove_room, hass, coordinator),
            REMOVE_ROOM_SCHEMA,
        ),
        (
            "assign_plant_to_room",
            partial(room.handle_assign_plant_to_room, hass, coordinator),
            ASSIGN_PLANT_TO_ROOM_SCHEMA,
        ),
        (
            "search_species",
            partial(schedule.handle_search_species, hass, coordinator),
            SEARCH_SPECIES_SCHEMA,
        ),
        (
            "get_watering_schedule",
            partial(schedule.handle_get_watering_schedule, hass, coordinator),
            GET_WATERING_SCHEDULE_SCHEMA,
        ),
        (
            "list_retired_plants",
            partial(schedule.handle_list_retired_plants, hass, coordinator),
            LIST_RETIRED_PLANTS_SCHEMA,
        ),
    ]


async def _register_services(
    hass: HomeAssistant, coordinator: HouseplantCoordinator
) -> None:
    """Register services for the Houseplant Manager integration."""
    for service_name, handler, schema in _service_definitions(hass, coordinator):
        if service_name in RESPONSE_ONLY_SERVICES:
            hass.services.async_register(
                DOMAIN,
                service_name,
                cast(Any, handler),
                schema=schema,
                supports_response=SupportsResponse.ONLY,
            )
        else:
            hass.services.async_register(
                DOMAIN, service_name, cast(Any, handler), schema=schema
            )


def _rule_table_path(hass: HomeAssistant, entry: ConfigEntry) -> Path:
    """Return the rule table file configured for the entry."""
    custom_path = entry.options.get(CONF_RULE_TABLE_PATH)
    if custom_path:
        return Path(hass.config.path(custom_path))
    return Path(__file__).parent / DEFAULT_RULE_TABLE_FILE


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up the Houseplant Manager component."""
    return True


async def async_setup_entry(hass: HomeAssistant, entry: HouseplantConfigEntry) -> bool:
    """Set up Houseplant Manager from a config entry."""
    _LOGGER.debug("Setting up Houseplant Manager entry %s", entry.entry_id)

    path = _rule_table_path(hass, entry)
    try:
        rule_table = await WateringRuleTable.async_load(hass, path)
    except RuleTableError as err:
        _LOGGER.error("Invalid watering rule table %s: %s", path, err)
        raise ConfigEntryError(str(err)) from err

    coordinator = HouseplantCoordinator(
        hass,
        rule_table,
        options=dict(entry.options),
    )
    await coordinator.async_load()

    entry.runtime_data = HouseplantRuntimeData(
        coordinator=coordinator,
        rule_table=rule_table,
    )

    entry.async_on_unload(entry.add_update_listener(_async_update_listener))

    _LOGGER.debug("Registering services for domain %s", DOMAIN)
    await _register_services(hass, coordinator)

    _LOGGER.debug("Setting up platforms: %s", PLATFORMS)
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    await coordinator.async_config_entry_first_refresh()

    return True


async def async_unload_entry(hass: HomeAssistant, entry: HouseplantConfigEntry) -> bool:
    """Unload a config entry."""
    _LOGGER.debug("Unloading config entry %s for Houseplant Manager", entry.entry_id)

    entry.runtime_data.coordinator.notification_manager.cancel_all()
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)

    if unload_ok:
        _async_remove_services(hass)
        _LOGGER.info("Unloaded Houseplant Manager for entry %s", entry.entry_id)
        return True

    _LOGGER.error("Failed to unload platforms for entry %s", entry.entry_id)
    return False


def _async_remove_services(hass: HomeAssistant) -> None:
    """Remove all Houseplant Manager services."""
    for service in list(hass.services.async_services_for_domain(DOMAIN)):
        hass.services.async_remove(DOMAIN, service)


async def _async_update_listener(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when its options change."""
    await hass.config_entries.async_reload(entry.entry_id)
