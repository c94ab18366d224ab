"""Response-only services for species, the watering schedule and retired plants."""

import logging

from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse
from homeassistant.util import dt as dt_util

from ..coordinator import HouseplantCoordinator
from ..watering_calculator import plants_due_on, watering_dates_in_month

_LOGGER = logging.getLogger(__name__)


async def handle_search_species(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> ServiceResponse:
    """Return the species whose key or name contains the query."""
    query = call.data.get("query", "")
    profiles = coordinator.rule_table.search(query)
    _LOGGER.debug("Species search '%s' matched %d entries", query, len(profiles))
    return {
        "species": [
            {"species": profile.species, "name": profile.name} for profile in profiles
        ]
    }


async def handle_get_watering_schedule(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> ServiceResponse:
    """Return the due days of the month and the plants due on the given day."""
    day = call.data.get("date") or dt_util.now().date()
    plants = coordinator.get_active_plants()

    dates = sorted(watering_dates_in_month(day, plants))
    due = plants_due_on(day, plants)
    return {
        "date": day.isoformat(),
        "month": f"{day.year:04d}-{day.month:02d}",
        "dates": [d.isoformat() for d in dates],
        "plants": [
            {
                "plant_id": plant.plant_id,
                "name": plant.display_name,
                "species": plant.species,
                "next_watering": plant.next_watering,
            }
            for plant in due
        ],
    }


async def handle_list_retired_plants(
    hass: HomeAssistant,
    coordinator: HouseplantCoordinator,
    call: ServiceCall,
) -> ServiceResponse:
    """Return the retired plants, most recently retired first."""
    retired = coordinator.get_retired_plants()
    return {
        "count": len(retired),
        "plants": [
            {
                "plant_id": plant.plant_id,
                "name": plant.display_name,
                "species": plant.species,
                "last_watered": plant.last_watered,
                "retired_at": plant.updated_at,
            }
            for plant in retired
        ],
    }
