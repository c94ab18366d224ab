"""Service handlers and schemas for Houseplant Manager."""

from ..service_schemas import (
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
)
from . import plant, room, schedule

__all__ = [
    "ADD_PLANT_SCHEMA",
    "ADD_ROOM_SCHEMA",
    "ASSIGN_PLANT_TO_ROOM_SCHEMA",
    "GET_WATERING_SCHEDULE_SCHEMA",
    "LIST_RETIRED_PLANTS_SCHEMA",
    "MARK_WATERED_SCHEMA",
    "REMOVE_PLANT_SCHEMA",
    "REMOVE_ROOM_SCHEMA",
    "REORDER_PLANTS_SCHEMA",
    "RETIRE_PLANT_SCHEMA",
    "SEARCH_SPECIES_SCHEMA",
    "UPDATE_PLANT_SCHEMA",
    "UPDATE_ROOM_SCHEMA",
    "plant",
    "room",
    "schedule",
]
