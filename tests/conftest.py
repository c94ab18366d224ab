"""Global fixtures for Houseplant Manager tests."""

import sys
from unittest.mock import MagicMock

import pytest

from custom_components.houseplant_manager.rule_table import WateringRuleTable

from .common import build_watering

# Mock fcntl for Windows
if sys.platform.startswith("win"):
    sys.modules["fcntl"] = MagicMock()

pytest_plugins = "pytest_homeassistant_custom_component"


@pytest.fixture
def rule_document() -> dict:
    """A rule table document with one seasonal species and one flat species."""
    return {
        "Monstera deliciosa": {
            "name": "Monstera deliciosa",
            "watering": build_watering(
                summer__near__T_S="4-5",
                spring_autumn__near__T_S="6-7",
                winter__near__T_S="9-10",
            ),
        },
        "Ficus lyrata": {
            "name": "Fiddle-leaf fig",
            "watering": build_watering("7-8"),
        },
    }


@pytest.fixture
def rule_table(rule_document) -> WateringRuleTable:
    """A parsed rule table."""
    return WateringRuleTable.from_dict(rule_document)
