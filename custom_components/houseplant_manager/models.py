"""Data models for the Houseplant Manager integration.

This file defines the closed enumerations used by the watering rules and the
dataclasses that represent the objects persisted by the integration, namely
Plant and Room. Dates are kept as ISO-formatted strings so the models can be
written to the Home Assistant store as-is.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from enum import StrEnum


class Season(StrEnum):
    """Season bucket used to select a watering profile."""

    SUMMER = "summer"
    SPRING_AUTUMN = "spring_autumn"
    WINTER = "winter"


class WindowDistance(StrEnum):
    """How far a plant stands from its window."""

    NEAR = "near"
    MEDIUM = "medium"
    FAR = "far"


class PotMaterial(StrEnum):
    """Material of the pot."""

    TERRACOTTA = "terracotta"
    PLASTIC = "plastic"


class SubstrateWeight(StrEnum):
    """How heavy (water retentive) the substrate is."""

    LIGHT = "light"
    STANDARD = "standard"
    HEAVY = "heavy"


class Humidity(StrEnum):
    """Air humidity around the plant."""

    STANDARD = "standard"
    LOW = "low"


class RoomType(StrEnum):
    """Kind of room a plant can be placed in."""

    LIVING_ROOM = "living_room"
    BEDROOM = "bedroom"
    KITCHEN = "kitchen"
    BATHROOM = "bathroom"
    HALLWAY = "hallway"


class PlantSortOption(StrEnum):
    """Display sort options for the plant list."""

    CUSTOM = "custom"
    ALPHABETICAL = "alphabetical"
    SPECIES = "species"


# Single letter codes used by the rule table document, e.g. "T_S"
POT_MATERIAL_CODES: dict[PotMaterial, str] = {
    PotMaterial.TERRACOTTA: "T",
    PotMaterial.PLASTIC: "P",
}
SUBSTRATE_WEIGHT_CODES: dict[SubstrateWeight, str] = {
    SubstrateWeight.LIGHT: "L",
    SubstrateWeight.STANDARD: "S",
    SubstrateWeight.HEAVY: "T",
}

# Values written by older versions of the app
_LEGACY_CARE_VALUES: dict[str, dict[str, str]] = {
    "window_distance": {
        "blizko": WindowDistance.NEAR,
        "stredne": WindowDistance.MEDIUM,
        "daleko": WindowDistance.FAR,
    },
    "pot_material": {
        code: material for material, code in POT_MATERIAL_CODES.items()
    },
    "substrate_weight": {
        code: weight for weight, code in SUBSTRATE_WEIGHT_CODES.items()
    },
    "humidity": {
        "nižší": Humidity.LOW,
        "nizsi": Humidity.LOW,
    },
}

_LEGACY_PLANT_FIELDS = {
    "id": "plant_id",
    "scientific_name": "species",
    "is_dead": "retired",
    "last_watering": "last_watered",
    "last_fertilizing": "last_fertilized",
    "distance_from_window": "window_distance",
    "pot_type": "pot_material",
    "substrate_type": "substrate_weight",
    "room": "room_id",
    "created": "created_at",
    "updated": "updated_at",
}


def interval_key(pot_material: PotMaterial, substrate_weight: SubstrateWeight) -> str:
    """Return the rule table key for a pot material and substrate weight."""
    return (
        f"{POT_MATERIAL_CODES[pot_material]}_{SUBSTRATE_WEIGHT_CODES[substrate_weight]}"
    )


@dataclass
class Plant:
    """Represents a single tracked plant.

    Attributes:
        plant_id: A unique identifier for the plant.
        species: The species key into the watering rule table.
        custom_name: The name the user gave the plant.
        window_distance: Distance bucket from the nearest window.
        pot_material: Material of the pot.
        substrate_weight: Weight class of the substrate.
        humidity: Humidity bucket around the plant.
        last_watered: The ISO-formatted datetime of the last watering.
        next_watering: The ISO-formatted datetime the plant is next due.
            Derived from the other fields, never set directly by a user.
        order_index: Position of the plant in the custom display order.
        retired: True once the plant has been archived (e.g. it died).
        room_id: The ID of the room the plant stands in, if any.
        height: Height of the plant in centimeters.
        pot_size: Pot diameter in centimeters.
        last_fertilized: The ISO-formatted datetime of the last fertilizing.
        created_at: The ISO-formatted date the plant was created.
        updated_at: The ISO-formatted date the plant was last updated.
    """

    plant_id: str
    species: str
    custom_name: str = ""
    window_distance: str = WindowDistance.MEDIUM
    pot_material: str = PotMaterial.PLASTIC
    substrate_weight: str = SubstrateWeight.STANDARD
    humidity: str = Humidity.STANDARD
    last_watered: str | None = None
    next_watering: str | None = None
    order_index: int = 0
    retired: bool = False
    room_id: str | None = None
    height: float | None = None
    pot_size: float | None = None
    last_fertilized: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def display_name(self) -> str:
        """Return the name shown to the user."""
        return self.custom_name or self.species or "Unknown plant"

    def to_dict(self) -> dict:
        """Convert the dataclass instance to a dictionary.

        Returns:
            A dictionary representation of the Plant.
        """
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> Plant:
        """Create a Plant instance from a dictionary.

        This factory method migrates legacy field names and care values and
        filters out any keys that do not correspond to dataclass fields,
        making it robust against data from older versions.

        Args:
            data: A dictionary containing the plant data.

        Returns:
            A new instance of the Plant class.
        """
        data = data.copy()  # Don't modify original

        for old_key, new_key in _LEGACY_PLANT_FIELDS.items():
            if old_key in data and new_key not in data:
                data[new_key] = data.pop(old_key)

        for key, aliases in _LEGACY_CARE_VALUES.items():
            value = data.get(key)
            if isinstance(value, str) and value in aliases:
                data[key] = aliases[value]

        allowed_keys = {f.name for f in fields(Plant)}
        filtered_data = {k: v for k, v in data.items() if k in allowed_keys}

        return Plant(**filtered_data)


@dataclass
class Room:
    """Represents a room that plants can be assigned to.

    Attributes:
        room_id: A unique identifier for the room.
        name: The display name of the room.
        room_type: The kind of room.
        compass_direction: Direction the room's windows face, in degrees.
        created_at: The ISO-formatted datetime the room was created.
    """

    room_id: str
    name: str
    room_type: str = RoomType.LIVING_ROOM
    compass_direction: float = 0.0
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        """Convert the dataclass instance to a dictionary."""
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> Room:
        """Create a Room instance from a dictionary.

        Unknown room types fall back to the living room.
        """
        data = data.copy()

        if "id" in data and "room_id" not in data:
            data["room_id"] = data.pop("id")
        if "type" in data and "room_type" not in data:
            data["room_type"] = data.pop("type")

        if data.get("room_type") not in {t.value for t in RoomType}:
            data["room_type"] = RoomType.LIVING_ROOM

        allowed_keys = {f.name for f in fields(Room)}
        filtered_data = {k: v for k, v in data.items() if k in allowed_keys}

        return Room(**filtered_data)
