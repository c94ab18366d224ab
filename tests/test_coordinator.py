"""Tests for the Houseplant Manager coordinator."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from freezegun import freeze_time
from homeassistant.core import HomeAssistant
from homeassistant.util import dt as dt_util

from custom_components.houseplant_manager.coordinator import HouseplantCoordinator
from custom_components.houseplant_manager.exceptions import (
    PlantStoreError,
    UnknownSpeciesError,
)
from custom_components.houseplant_manager.models import (
    Humidity,
    Plant,
    PotMaterial,
    RoomType,
    SubstrateWeight,
    WindowDistance,
)
from custom_components.houseplant_manager.rule_table import WateringRuleTable
from custom_components.houseplant_manager.utils import parse_date_field

from .common import build_watering

LAST_WATERED = "2024-07-01T08:00:00+00:00"


@pytest.fixture
def coordinator(hass: HomeAssistant, rule_table) -> HouseplantCoordinator:
    """A coordinator with a mocked store and notification manager."""
    coordinator = HouseplantCoordinator(hass, rule_table)
    coordinator.storage_manager.store = MagicMock()
    coordinator.storage_manager.store.async_save = AsyncMock()
    coordinator.storage_manager.store.async_load = AsyncMock(return_value=None)
    coordinator.notification_manager = MagicMock()
    return coordinator


async def _add_ficus(coordinator, name="", **kwargs) -> Plant:
    return await coordinator.async_add_plant(
        species="Ficus lyrata",
        custom_name=name,
        last_watered=kwargs.pop("last_watered", LAST_WATERED),
        **kwargs,
    )


# --------------------
# Adding plants
# --------------------
async def test_add_plant_projects_next_watering(coordinator):
    """A new plant is projected, persisted and gets a reminder."""
    plant = await _add_ficus(coordinator, "Figgy")

    assert coordinator.plants[plant.plant_id] is plant
    assert plant.custom_name == "Figgy"
    assert plant.last_watered == LAST_WATERED
    assert plant.next_watering == "2024-07-08T08:00:00+00:00"
    assert plant.order_index == 0
    assert plant.created_at is not None

    coordinator.storage_manager.store.async_save.assert_awaited_once()
    coordinator.notification_manager.schedule_reminder.assert_called_once_with(
        plant.plant_id, datetime(2024, 7, 8, 8, 0, tzinfo=timezone.utc)
    )
    assert coordinator.data["plants"] is coordinator.plants


async def test_add_plant_low_humidity(coordinator):
    """Low humidity shortens the projected interval."""
    plant = await _add_ficus(coordinator, humidity="low")
    assert plant.humidity is Humidity.LOW
    assert plant.next_watering == "2024-07-07T08:00:00+00:00"


async def test_add_plant_defaults_last_watered_to_now(coordinator):
    """Without a last watering the plant counts as watered now."""
    plant = await coordinator.async_add_plant(species="Ficus lyrata")
    assert plant.last_watered is not None
    assert plant.next_watering is not None


async def test_add_plants_append_in_order(coordinator):
    """Each new plant goes to the end of the display order."""
    first = await _add_ficus(coordinator, "one")
    second = await _add_ficus(coordinator, "two")
    third = await _add_ficus(coordinator, "three")

    assert [first.order_index, second.order_index, third.order_index] == [0, 1, 2]
    assert coordinator.get_active_plants() == [first, second, third]


async def test_add_plant_unknown_species(coordinator):
    """Unknown species are rejected and nothing is stored."""
    with pytest.raises(UnknownSpeciesError) as excinfo:
        await coordinator.async_add_plant(species="Nonexistent")

    assert excinfo.value.species == "Nonexistent"
    assert coordinator.plants == {}
    coordinator.storage_manager.store.async_save.assert_not_awaited()


async def test_add_plant_invalid_care_value(coordinator):
    """Care values outside their enumeration are rejected."""
    with pytest.raises(ValueError, match="window_distance"):
        await _add_ficus(coordinator, window_distance="sideways")
    assert coordinator.plants == {}


async def test_add_plant_unknown_room(coordinator):
    """A plant cannot be placed in a room that does not exist."""
    with pytest.raises(ValueError, match="Room"):
        await _add_ficus(coordinator, room_id="missing")


async def test_add_plant_coerces_care_values(coordinator):
    """Care values are stored as enum members."""
    plant = await _add_ficus(
        coordinator,
        window_distance="near",
        pot_material="terracotta",
        substrate_weight="light",
    )
    assert plant.window_distance is WindowDistance.NEAR
    assert plant.pot_material is PotMaterial.TERRACOTTA
    assert plant.substrate_weight is SubstrateWeight.LIGHT


# --------------------
# Recompute
# --------------------
async def test_recompute_uses_reference_season(coordinator):
    """The season of the reference date selects the profile."""
    plant = Plant(
        plant_id="p1",
        species="Monstera deliciosa",
        window_distance=WindowDistance.NEAR,
        pot_material=PotMaterial.TERRACOTTA,
        substrate_weight=SubstrateWeight.STANDARD,
        last_watered=LAST_WATERED,
    )
    due = coordinator.recompute(plant, datetime(2024, 7, 10, tzinfo=timezone.utc))
    assert due == datetime(2024, 7, 5, 8, 0, tzinfo=timezone.utc)
    assert plant.next_watering == "2024-07-05T08:00:00+00:00"

    coordinator.recompute(plant, datetime(2025, 1, 10, tzinfo=timezone.utc))
    assert plant.next_watering == "2024-07-10T08:00:00+00:00"


async def test_recompute_oversized_range_falls_back(hass: HomeAssistant):
    """A range too large to project uses the default interval."""
    table = WateringRuleTable.from_dict(
        {"Cactus": {"name": "Cactus", "watering": build_watering("99999999-99999999")}}
    )
    coordinator = HouseplantCoordinator(hass, table)
    plant = Plant(plant_id="p1", species="Cactus", last_watered=LAST_WATERED)

    due = coordinator.recompute(plant, datetime(2024, 7, 10, tzinfo=timezone.utc))

    assert due - parse_date_field(LAST_WATERED) == timedelta(days=7)


async def test_mark_watered_keeps_local_time_across_dst(
    hass: HomeAssistant, coordinator
):
    """Days are added on the local clock when summer time starts."""
    await hass.config.async_set_time_zone("Europe/Prague")
    with freeze_time("2024-03-28 22:30:00+00:00"):
        plant = await coordinator.async_add_plant(
            species="Monstera deliciosa",
            window_distance="near",
            pot_material="terracotta",
            substrate_weight="standard",
            last_watered="2024-03-21T08:00:00+01:00",
        )
        updated = await coordinator.async_mark_watered(
            plant.plant_id, "2024-03-28T23:30:00+01:00"
        )

    due = dt_util.as_local(parse_date_field(updated.next_watering))
    assert due.date() == date(2024, 4, 3)
    assert (due.hour, due.minute) == (23, 30)


async def test_recompute_without_last_watering(coordinator):
    """A plant that was never watered has no due date."""
    plant = Plant(plant_id="p1", species="Ficus lyrata", next_watering="stale")
    assert coordinator.recompute(plant) is None
    assert plant.next_watering is None


async def test_recompute_unknown_species_leaves_plant(coordinator):
    """The plant is untouched when the species is unknown."""
    plant = Plant(
        plant_id="p1",
        species="Nonexistent",
        last_watered=LAST_WATERED,
        next_watering="2024-07-08T08:00:00+00:00",
    )
    with pytest.raises(UnknownSpeciesError):
        coordinator.recompute(plant)
    assert plant.next_watering == "2024-07-08T08:00:00+00:00"


# --------------------
# Updating plants
# --------------------
async def test_mark_watered(coordinator):
    """Watering a plant moves its due date and re-arms the reminder."""
    plant = await _add_ficus(coordinator)
    coordinator.notification_manager.reset_mock()

    updated = await coordinator.async_mark_watered(
        plant.plant_id, "2024-07-10T09:30:00+00:00"
    )

    assert updated.last_watered == "2024-07-10T09:30:00+00:00"
    assert updated.next_watering == "2024-07-17T09:30:00+00:00"
    assert coordinator.plants[plant.plant_id] is updated
    coordinator.notification_manager.schedule_reminder.assert_called_once_with(
        plant.plant_id, datetime(2024, 7, 17, 9, 30, tzinfo=timezone.utc)
    )


async def test_mark_watered_unknown_plant(coordinator):
    """Watering a missing plant is an error."""
    with pytest.raises(ValueError, match="does not exist"):
        await coordinator.async_mark_watered("missing")


async def test_mark_watered_retired_plant(coordinator):
    """Retired plants cannot be watered."""
    plant = await _add_ficus(coordinator)
    await coordinator.async_retire_plant(plant.plant_id)

    with pytest.raises(ValueError, match="retired"):
        await coordinator.async_mark_watered(plant.plant_id)


async def test_update_care_field_recomputes(coordinator):
    """Changing a care attribute recomputes the due date."""
    plant = await _add_ficus(coordinator)
    coordinator.notification_manager.reset_mock()

    updated = await coordinator.async_update_plant(plant.plant_id, humidity="low")

    assert updated.humidity is Humidity.LOW
    assert updated.next_watering == "2024-07-07T08:00:00+00:00"
    coordinator.notification_manager.schedule_reminder.assert_called_once()


async def test_update_name_keeps_due_date(coordinator):
    """Non-care fields do not touch the projection or reminders."""
    plant = await _add_ficus(coordinator)
    coordinator.notification_manager.reset_mock()

    updated = await coordinator.async_update_plant(
        plant.plant_id, custom_name="Renamed", height=42.0
    )

    assert updated.custom_name == "Renamed"
    assert updated.height == 42.0
    assert updated.next_watering == "2024-07-08T08:00:00+00:00"
    coordinator.notification_manager.schedule_reminder.assert_not_called()


async def test_update_unknown_species_leaves_plant(coordinator):
    """Switching to an unknown species fails without changing the plant."""
    plant = await _add_ficus(coordinator)

    with pytest.raises(UnknownSpeciesError):
        await coordinator.async_update_plant(plant.plant_id, species="Nonexistent")

    stored = coordinator.plants[plant.plant_id]
    assert stored.species == "Ficus lyrata"
    assert stored.next_watering == "2024-07-08T08:00:00+00:00"


@pytest.mark.parametrize("field", ["next_watering", "order_index", "retired"])
async def test_update_protected_fields(coordinator, field):
    """Derived and owned fields cannot be set directly."""
    plant = await _add_ficus(coordinator)
    with pytest.raises(ValueError, match="cannot be set directly"):
        await coordinator.async_update_plant(plant.plant_id, **{field: "x"})


async def test_update_ignores_unknown_fields(coordinator, caplog):
    """Unknown fields are logged and skipped."""
    plant = await _add_ficus(coordinator)
    updated = await coordinator.async_update_plant(plant.plant_id, colour="green")
    assert not hasattr(updated, "colour")
    assert "Ignoring invalid plant field colour" in caplog.text


async def test_update_ignores_computed_attributes(coordinator, caplog):
    """Properties and methods of a plant are not fields."""
    plant = await _add_ficus(coordinator, "Figgy")
    updated = await coordinator.async_update_plant(
        plant.plant_id, display_name="Other", to_dict="x"
    )
    assert updated.display_name == "Figgy"
    assert "Ignoring invalid plant field display_name" in caplog.text


# --------------------
# Retire, remove, reorder
# --------------------
async def test_retire_plant_closes_gap(coordinator):
    """Retired plants leave the ordering and lose their reminder."""
    first = await _add_ficus(coordinator, "one")
    second = await _add_ficus(coordinator, "two")
    third = await _add_ficus(coordinator, "three")

    await coordinator.async_retire_plant(second.plant_id)

    assert second.retired is True
    assert second.plant_id in coordinator.plants
    assert coordinator.get_active_plants() == [first, third]
    assert [first.order_index, third.order_index] == [0, 1]
    coordinator.notification_manager.cancel_reminder.assert_called_with(second.plant_id)


async def test_retire_plant_twice_is_noop(coordinator):
    """Retiring is one-way and idempotent."""
    plant = await _add_ficus(coordinator)
    await coordinator.async_retire_plant(plant.plant_id)
    saves = coordinator.storage_manager.store.async_save.await_count

    await coordinator.async_retire_plant(plant.plant_id)

    assert coordinator.storage_manager.store.async_save.await_count == saves


async def test_get_retired_plants(coordinator):
    """Retired plants are listed, most recently retired first."""
    first = await _add_ficus(coordinator, "one")
    second = await _add_ficus(coordinator, "two")
    await _add_ficus(coordinator, "three")

    with freeze_time("2024-08-01 12:00:00+00:00"):
        await coordinator.async_retire_plant(first.plant_id)
    with freeze_time("2024-08-02 12:00:00+00:00"):
        await coordinator.async_retire_plant(second.plant_id)

    assert coordinator.get_retired_plants() == [second, first]


async def test_remove_plant(coordinator):
    """Removed plants are gone and the rest stay dense."""
    first = await _add_ficus(coordinator, "one")
    second = await _add_ficus(coordinator, "two")

    await coordinator.async_remove_plant(first.plant_id)

    assert first.plant_id not in coordinator.plants
    assert second.order_index == 0
    coordinator.notification_manager.cancel_reminder.assert_called_with(first.plant_id)


async def test_reorder_plants(coordinator):
    """Reordering moves the plant and persists the new order."""
    plants = [await _add_ficus(coordinator, name) for name in ("a", "b", "c")]
    saves = coordinator.storage_manager.store.async_save.await_count

    result = await coordinator.async_reorder_plants(0, 2)

    assert [p.custom_name for p in result] == ["b", "c", "a"]
    assert [p.order_index for p in plants] == [2, 0, 1]
    assert coordinator.storage_manager.store.async_save.await_count == saves + 1


async def test_reorder_same_index_does_not_save(coordinator):
    """A no-op move is not persisted."""
    await _add_ficus(coordinator)
    saves = coordinator.storage_manager.store.async_save.await_count

    await coordinator.async_reorder_plants(0, 0)

    assert coordinator.storage_manager.store.async_save.await_count == saves


async def test_reorder_out_of_range(coordinator):
    """Out of range moves raise without persisting anything."""
    await _add_ficus(coordinator)
    saves = coordinator.storage_manager.store.async_save.await_count

    with pytest.raises(ValueError, match="out of range"):
        await coordinator.async_reorder_plants(0, 5)

    assert coordinator.storage_manager.store.async_save.await_count == saves


# --------------------
# Persistence
# --------------------
async def test_save_failure_is_surfaced(coordinator):
    """A failed write raises PlantStoreError; memory keeps the change."""
    coordinator.storage_manager.store.async_save = AsyncMock(
        side_effect=OSError("disk full")
    )

    with pytest.raises(PlantStoreError):
        await _add_ficus(coordinator, "Figgy")

    assert [p.custom_name for p in coordinator.plants.values()] == ["Figgy"]
    coordinator.notification_manager.schedule_reminder.assert_not_called()


async def test_load_repairs_ordering(coordinator):
    """Loading normalizes a broken order, saves it and re-arms reminders."""
    coordinator.storage_manager.store.async_load = AsyncMock(
        return_value={
            "plants": {
                "p1": {"species": "Ficus lyrata", "order_index": 4},
                "p2": {"species": "Ficus lyrata", "order_index": 1},
                "p3": {"species": "Ficus lyrata", "order_index": 0, "retired": True},
            },
            "rooms": {"r1": {"name": "Kitchen", "room_type": "kitchen"}},
        }
    )

    await coordinator.async_load()

    assert [p.plant_id for p in coordinator.get_active_plants()] == ["p2", "p1"]
    assert coordinator.plants["p1"].order_index == 1
    assert coordinator.rooms["r1"].room_type == RoomType.KITCHEN
    coordinator.storage_manager.store.async_save.assert_awaited_once()
    coordinator.notification_manager.reschedule_all.assert_called_once()


async def test_load_dense_ordering_does_not_save(coordinator):
    """A clean store is not rewritten on load."""
    coordinator.storage_manager.store.async_load = AsyncMock(
        return_value={
            "plants": {"p1": {"species": "Ficus lyrata", "order_index": 0}},
            "rooms": {},
        }
    )

    await coordinator.async_load()

    assert "p1" in coordinator.plants
    coordinator.storage_manager.store.async_save.assert_not_awaited()


# --------------------
# Rooms
# --------------------
async def test_room_lifecycle(coordinator):
    """Rooms can be added, assigned, updated and removed."""
    room = await coordinator.async_add_room("Kitchen", RoomType.KITCHEN, 450)
    assert room.compass_direction == 90.0
    assert coordinator.get_room(room.room_id) is room

    plant = await _add_ficus(coordinator)
    await coordinator.async_assign_plant_to_room(plant.plant_id, room.room_id)
    assert coordinator.get_room_plants(room.room_id) == [plant]

    updated = await coordinator.async_update_room(room.room_id, name="Big kitchen")
    assert updated.name == "Big kitchen"
    assert updated.room_type == RoomType.KITCHEN

    await coordinator.async_remove_room(room.room_id)
    assert room.room_id not in coordinator.rooms
    assert plant.room_id is None


async def test_assign_plant_to_unknown_room(coordinator):
    """Assigning to a missing room is rejected."""
    plant = await _add_ficus(coordinator)
    with pytest.raises(ValueError, match="Room"):
        await coordinator.async_assign_plant_to_room(plant.plant_id, "missing")


# --------------------
# Season at recomputation time
# --------------------
@pytest.mark.parametrize(
    ("frozen", "interval"),
    [("2024-07-01 12:00:00+00:00", 4), ("2025-01-10 12:00:00+00:00", 9)],
)
async def test_add_plant_uses_current_season(coordinator, frozen, interval):
    """A plant watered now is projected with today's season."""
    with freeze_time(frozen):
        plant = await coordinator.async_add_plant(
            species="Monstera deliciosa",
            window_distance="near",
            pot_material="terracotta",
            substrate_weight="standard",
        )

    last = parse_date_field(plant.last_watered)
    due = parse_date_field(plant.next_watering)
    assert due - last == timedelta(days=interval)
