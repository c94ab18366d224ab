"""Constants for the Houseplant Manager integration."""

from typing import Final

DOMAIN: Final = "houseplant_manager"
STORAGE_VERSION = 1
STORAGE_KEY = f"{DOMAIN}_storage"
PLATFORMS: list[str] = [
    "binary_sensor",
    "calendar",
    "sensor",
]

DEFAULT_NAME = "Houseplant Manager"

# Options
CONF_NOTIFICATION_TARGET = "notification_target"
CONF_REMINDER_TIME = "reminder_time"
CONF_RULE_TABLE_PATH = "rule_table_path"

# Bundled watering rule table, relative to the integration directory
DEFAULT_RULE_TABLE_FILE = "data/watering_rules.json"

# Watering interval fallback used whenever a range cannot be resolved
DEFAULT_INTERVAL_DAYS = 7
DEFAULT_INTERVAL_RANGE = f"{DEFAULT_INTERVAL_DAYS}-{DEFAULT_INTERVAL_DAYS}"
MIN_INTERVAL_DAYS = 1
MAX_INTERVAL_DAYS = 365

# Season boundaries as (month, day), Northern hemisphere
SUMMER_START = (6, 21)
SUMMER_END = (9, 22)
SPRING_START = (3, 20)
AUTUMN_END = (12, 20)

# Accepted aliases for window distance keys in rule table documents
WINDOW_DISTANCE_ALIASES = {
    "blizko": "near",
    "stredne": "medium",
    "daleko": "far",
}

# Reminder content
REMINDER_TITLE = "Time to water! 🌿"
REMINDER_MESSAGE = "{name} needs watering"
REMINDER_NOTIFICATION_ID = f"{DOMAIN}_reminder"

# Events
EVENT_PLANT_ADDED = f"{DOMAIN}_plant_added"
EVENT_PLANT_WATERED = f"{DOMAIN}_plant_watered"
EVENT_PLANT_RETIRED = f"{DOMAIN}_plant_retired"

# Fields that hold ISO datetime strings on a Plant
DATE_FIELDS = [
    "last_watered",
    "next_watering",
    "last_fertilized",
]

# Fields that feed the watering projection
CARE_FIELDS = [
    "species",
    "window_distance",
    "pot_material",
    "substrate_weight",
    "humidity",
    "last_watered",
]
