"""Shared helpers for Houseplant Manager tests."""

INTERVAL_CODES = ["T_L", "T_S", "T_T", "P_L", "P_S", "P_T"]
SEASONS = ["summer", "spring_autumn", "winter"]
DISTANCES = ["near", "medium", "far"]


def build_watering(default: str = "7-8", **overrides: str) -> dict:
    """Build a full watering mapping with every interval set to `default`.

    Overrides are keyed "<season>__<distance>__<code>", e.g.
    summer__near__T_S="4-5".
    """
    watering = {
        season: {
            distance: {code: default for code in INTERVAL_CODES}
            for distance in DISTANCES
        }
        for season in SEASONS
    }
    for key, value in overrides.items():
        season, distance, code = key.split("__")
        watering[season][distance][code] = value
    return watering
