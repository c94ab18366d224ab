"""Watering rule table for Houseplant Manager.

The rule table maps a species key to the watering interval ranges for every
season, window distance and pot/substrate combination. It is loaded once from
a JSON document and passed to the coordinator; it is never modified after
loading.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from homeassistant.core import HomeAssistant

from .const import DEFAULT_INTERVAL_RANGE, WINDOW_DISTANCE_ALIASES
from .exceptions import RuleTableError
from .models import (
    POT_MATERIAL_CODES,
    SUBSTRATE_WEIGHT_CODES,
    PotMaterial,
    Season,
    SubstrateWeight,
    WindowDistance,
    interval_key,
)
from .watering_calculator import parse_interval_range

_LOGGER = logging.getLogger(__name__)

INTERVAL_KEYS = [
    f"{pot}_{substrate}"
    for pot in POT_MATERIAL_CODES.values()
    for substrate in SUBSTRATE_WEIGHT_CODES.values()
]


@dataclass(frozen=True)
class ProximityProfile:
    """Interval ranges keyed by pot/substrate code, e.g. "T_S": "4-5"."""

    intervals: Mapping[str, str] = field(default_factory=dict)

    def interval_range(
        self,
        pot_material: PotMaterial | str,
        substrate_weight: SubstrateWeight | str,
    ) -> str:
        """Return the range text for a pot/substrate pair.

        Unknown pairs and missing entries yield the default range.
        """
        try:
            key = interval_key(PotMaterial(pot_material), SubstrateWeight(substrate_weight))
        except (ValueError, KeyError):
            return DEFAULT_INTERVAL_RANGE
        return self.intervals.get(key, DEFAULT_INTERVAL_RANGE)


@dataclass(frozen=True)
class SeasonProfile:
    """Proximity profiles for one season."""

    near: ProximityProfile
    medium: ProximityProfile
    far: ProximityProfile

    def for_distance(self, distance: WindowDistance) -> ProximityProfile:
        """Return the profile for a window distance bucket."""
        return getattr(self, WindowDistance(distance).name.lower())


@dataclass(frozen=True)
class SpeciesWateringProfile:
    """Watering rules for a single species."""

    species: str
    name: str
    summer: SeasonProfile
    spring_autumn: SeasonProfile
    winter: SeasonProfile

    def for_season(self, season: Season) -> SeasonProfile:
        """Return the profile for a season bucket."""
        return getattr(self, Season(season).value)


def _parse_proximity(species: str, label: str, data: Any) -> ProximityProfile:
    if not isinstance(data, Mapping):
        raise RuleTableError(
            f"Species '{species}' {label}: expected a mapping of interval ranges"
        )
    intervals: dict[str, str] = {}
    for key in INTERVAL_KEYS:
        value = data.get(key)
        if value is None:
            _LOGGER.warning(
                "Species '%s' %s: missing interval %s, default will be used",
                species,
                label,
                key,
            )
            continue
        try:
            parse_interval_range(value)
        except ValueError:
            _LOGGER.warning(
                "Species '%s' %s: malformed interval %s=%r, default will be used",
                species,
                label,
                key,
                value,
            )
        intervals[key] = value
    return ProximityProfile(intervals=intervals)


def _parse_season(species: str, season: Season, data: Any) -> SeasonProfile:
    if not isinstance(data, Mapping):
        raise RuleTableError(f"Species '{species}' season '{season}' is not a mapping")

    normalized = {WINDOW_DISTANCE_ALIASES.get(k, k): v for k, v in data.items()}
    buckets = {}
    for distance in WindowDistance:
        if distance.value not in normalized:
            raise RuleTableError(
                f"Species '{species}' season '{season}' is missing the "
                f"'{distance}' window distance"
            )
        buckets[distance.name.lower()] = _parse_proximity(
            species, f"{season}/{distance}", normalized[distance.value]
        )
    return SeasonProfile(**buckets)


def parse_species_profile(species: str, data: Any) -> SpeciesWateringProfile:
    """Parse one species entry.

    Accepts {"name": ..., "watering": {...}} or a bare watering mapping.

    Raises:
        RuleTableError: If a season or window distance is missing.
    """
    if not isinstance(data, Mapping):
        raise RuleTableError(f"Species '{species}' must be a mapping")

    watering = data.get("watering", data)
    if not isinstance(watering, Mapping):
        raise RuleTableError(f"Species '{species}' watering must be a mapping")

    seasons = {}
    for season in Season:
        if season.value not in watering:
            raise RuleTableError(f"Species '{species}' is missing season '{season}'")
        seasons[season.value] = _parse_season(species, season, watering[season.value])

    return SpeciesWateringProfile(
        species=species,
        name=data.get("name", species),
        **seasons,
    )


class WateringRuleTable:
    """Immutable lookup of species watering profiles."""

    def __init__(self, profiles: Mapping[str, SpeciesWateringProfile]) -> None:
        """Initialize the table from parsed profiles."""
        self._profiles = dict(profiles)

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, species: object) -> bool:
        return species in self._profiles

    @property
    def species(self) -> list[str]:
        """Return all species keys, sorted."""
        return sorted(self._profiles)

    def get(self, species: str | None) -> SpeciesWateringProfile | None:
        """Return the profile for a species key, or None when unknown."""
        if not species:
            return None
        return self._profiles.get(species)

    def search(self, query: str) -> list[SpeciesWateringProfile]:
        """Case-insensitive substring search over species keys and names."""
        profiles = sorted(self._profiles.values(), key=lambda p: p.name.lower())
        needle = query.strip().lower()
        if not needle:
            return profiles
        return [
            p
            for p in profiles
            if needle in p.name.lower() or needle in p.species.lower()
        ]

    @classmethod
    def from_dict(cls, data: Any) -> WateringRuleTable:
        """Build a table from a decoded JSON document.

        The document is either a mapping of species key to profile, or a list
        of {"id", "name", "watering"} objects keyed by their name.

        Raises:
            RuleTableError: If the document is structurally invalid.
        """
        if isinstance(data, list):
            entries = {}
            for item in data:
                if not isinstance(item, Mapping):
                    raise RuleTableError("Rule table list entries must be mappings")
                key = item.get("name") or item.get("id")
                if not key:
                    raise RuleTableError("Rule table list entry has no name or id")
                entries[str(key)] = item
            data = entries

        if not isinstance(data, Mapping):
            raise RuleTableError("Rule table document must be a mapping or a list")

        profiles = {
            species: parse_species_profile(species, entry)
            for species, entry in data.items()
        }
        return cls(profiles)

    @classmethod
    def from_file(cls, path: str | Path) -> WateringRuleTable:
        """Read and parse a rule table file. Blocking."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as err:
            raise RuleTableError(f"Cannot read rule table {path}: {err}") from err
        return cls.from_dict(data)

    @classmethod
    async def async_load(cls, hass: HomeAssistant, path: str | Path) -> WateringRuleTable:
        """Load a rule table file in the executor."""
        table = await hass.async_add_executor_job(cls.from_file, path)
        _LOGGER.info("Loaded watering rules for %d species from %s", len(table), path)
        return table
