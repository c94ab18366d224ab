"""Exceptions raised by the Houseplant Manager integration."""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class HouseplantError(HomeAssistantError):
    """Base error for Houseplant Manager."""


class RuleTableError(HouseplantError):
    """The watering rule table document is structurally invalid."""


class UnknownSpeciesError(HouseplantError, ValueError):
    """A plant references a species key that has no watering profile."""

    def __init__(self, species: str | None) -> None:
        """Initialize the error with the offending species key."""
        super().__init__(f"No watering profile for species '{species}'")
        self.species = species


class PlantStoreError(HouseplantError):
    """Persisting plant data failed."""
