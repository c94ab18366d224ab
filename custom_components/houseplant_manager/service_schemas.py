"""Service schemas for Houseplant Manager."""

from __future__ import annotations

import voluptuous as vol
from homeassistant.helpers import config_validation as cv

from .models import (
    Humidity,
    PotMaterial,
    RoomType,
    SubstrateWeight,
    WindowDistance,
)

_CARE_FIELDS = {
    vol.Optional("window_distance"): vol.In([d.value for d in WindowDistance]),
    vol.Optional("pot_material"): vol.In([m.value for m in PotMaterial]),
    vol.Optional("substrate_weight"): vol.In([w.value for w in SubstrateWeight]),
    vol.Optional("humidity"): vol.In([h.value for h in Humidity]),
}

_PLANT_DETAIL_FIELDS = {
    vol.Optional("custom_name"): cv.string,
    vol.Optional("room_id"): cv.string,
    vol.Optional("height"): vol.Coerce(float),
    vol.Optional("pot_size"): vol.Coerce(float),
    vol.Optional("last_watered"): cv.datetime,
    vol.Optional("last_fertilized"): cv.datetime,
}

# Plant services
ADD_PLANT_SCHEMA = vol.Schema(
    {
        vol.Required("species"): cv.string,
        **_CARE_FIELDS,
        **_PLANT_DETAIL_FIELDS,
    }
)

UPDATE_PLANT_SCHEMA = vol.Schema(
    {
        vol.Required("plant_id"): cv.string,
        vol.Optional("species"): cv.string,
        **_CARE_FIELDS,
        **_PLANT_DETAIL_FIELDS,
    }
)

MARK_WATERED_SCHEMA = vol.Schema(
    {
        vol.Required("plant_id"): cv.string,
        vol.Optional("watered_at"): cv.datetime,
    }
)

RETIRE_PLANT_SCHEMA = vol.Schema(
    {
        vol.Required("plant_id"): cv.string,
    }
)

REMOVE_PLANT_SCHEMA = vol.Schema(
    {
        vol.Required("plant_id"): cv.string,
    }
)

REORDER_PLANTS_SCHEMA = vol.Schema(
    {
        vol.Required("from_index"): cv.positive_int,
        vol.Required("to_index"): cv.positive_int,
    }
)

# Room services
ADD_ROOM_SCHEMA = vol.Schema(
    {
        vol.Required("name"): cv.string,
        vol.Optional("room_type", default=RoomType.LIVING_ROOM.value): vol.In(
            [t.value for t in RoomType]
        ),
        vol.Optional("compass_direction", default=0.0): vol.Coerce(float),
    }
)

UPDATE_ROOM_SCHEMA = vol.Schema(
    {
        vol.Required("room_id"): cv.string,
        vol.Optional("name"): cv.string,
        vol.Optional("room_type"): vol.In([t.value for t in RoomType]),
        vol.Optional("compass_direction"): vol.Coerce(float),
    }
)

REMOVE_ROOM_SCHEMA = vol.Schema(
    {
        vol.Required("room_id"): cv.string,
    }
)

ASSIGN_PLANT_TO_ROOM_SCHEMA = vol.Schema(
    {
        vol.Required("plant_id"): cv.string,
        vol.Optional("room_id"): vol.Any(None, cv.string),
    }
)

# Response-only services
SEARCH_SPECIES_SCHEMA = vol.Schema(
    {
        vol.Optional("query", default=""): cv.string,
    }
)

GET_WATERING_SCHEDULE_SCHEMA = vol.Schema(
    {
        vol.Optional("date"): cv.date,
    }
)

LIST_RETIRED_PLANTS_SCHEMA = vol.Schema({})
