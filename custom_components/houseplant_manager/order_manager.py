"""Manual display ordering for Houseplant Manager."""

from __future__ import annotations

import logging

from .models import Plant, PlantSortOption

_LOGGER = logging.getLogger(__name__)


class PlantOrderManager:
    """Keeps the active plants' order indices dense.

    Active (non-retired) plants always carry order indices 0..N-1 with no
    gaps or duplicates. Retired plants keep whatever index they had last and
    are ignored here.
    """

    def __init__(self, coordinator) -> None:
        """Initialize the PlantOrderManager.

        Args:
            coordinator: The HouseplantCoordinator instance.
        """
        self.coordinator = coordinator

    def active_plants(self) -> list[Plant]:
        """Return the active plants in display order."""
        return sorted(
            (p for p in self.coordinator.plants.values() if not p.retired),
            key=lambda p: p.order_index,
        )

    def append(self, plant: Plant) -> None:
        """Place a new plant at the end of the active sequence."""
        plant.order_index = sum(
            1
            for p in self.coordinator.plants.values()
            if not p.retired and p.plant_id != plant.plant_id
        )

    def reorder(self, from_index: int, to_index: int) -> list[Plant]:
        """Move the plant at `from_index` to `to_index`.

        Raises:
            ValueError: If either index is out of range. Nothing is changed.
        """
        plants = self.active_plants()
        count = len(plants)
        for label, index in (("from_index", from_index), ("to_index", to_index)):
            if not 0 <= index < count:
                raise ValueError(
                    f"{label} {index} is out of range for {count} active plants"
                )
        if from_index == to_index:
            return plants

        moved = plants.pop(from_index)
        plants.insert(to_index, moved)
        self._enumerate(plants)
        _LOGGER.info(
            "Moved plant %s from position %d to %d",
            moved.plant_id,
            from_index,
            to_index,
        )
        return plants

    def remove(self, plant: Plant) -> None:
        """Take a plant out of the active sequence and close the gap."""
        plants = [p for p in self.active_plants() if p.plant_id != plant.plant_id]
        self._enumerate(plants)

    def normalize(self) -> bool:
        """Re-enumerate the active sequence, returning True if anything changed."""
        plants = self.active_plants()
        changed = any(p.order_index != i for i, p in enumerate(plants))
        if changed:
            _LOGGER.warning("Repairing order indices of %d active plants", len(plants))
            self._enumerate(plants)
        return changed

    def is_dense(self) -> bool:
        """Return True when active order indices are exactly 0..N-1."""
        indices = sorted(
            p.order_index for p in self.coordinator.plants.values() if not p.retired
        )
        return indices == list(range(len(indices)))

    def sorted_plants(
        self, option: PlantSortOption = PlantSortOption.CUSTOM
    ) -> list[Plant]:
        """Return the active plants sorted for display; nothing is rewritten."""
        plants = self.active_plants()
        if option == PlantSortOption.ALPHABETICAL:
            return sorted(plants, key=lambda p: p.display_name.lower())
        if option == PlantSortOption.SPECIES:
            return sorted(plants, key=lambda p: p.species.lower())
        return plants

    @staticmethod
    def _enumerate(plants: list[Plant]) -> None:
        for index, plant in enumerate(plants):
            plant.order_index = index
