"""
Shared pytest fixtures for the valley predictor test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- Prediction game states
- Small hand-built content tables (objects, garbage cans, weather contexts)
"""

import os
import sys

import pytest

# Ensure project root is in path
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.valley.state.rng import Random
from packages.valley.state.game_state import PredictionGameState
from packages.valley.content.game_data import GameData, LocationContextData


# =============================================================================
# RNG Fixtures
# =============================================================================

# Seed used for the recorded reference sequences.
GOLDEN_SEED = 34 + 327349652 // 2


@pytest.fixture
def golden_rng():
    """RNG seeded with the reference seed."""
    return Random(GOLDEN_SEED)


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


# =============================================================================
# Game State Fixtures
# =============================================================================

WEATHER_GAME_ID = 7269403
GARBAGE_GAME_ID = 254546202


@pytest.fixture
def fresh_state():
    """A year-one save on day 1."""
    return PredictionGameState(game_id=GARBAGE_GAME_ID, days_played=1)


@pytest.fixture
def weather_state():
    """Save used for the recorded weather and night event tables."""
    return PredictionGameState(game_id=WEATHER_GAME_ID)


# =============================================================================
# Content Fixtures
# =============================================================================

# The "Default" location context weather rules, in data order.
DEFAULT_WEATHER_CONDITIONS = [
    {"Id": "GreenRain", "Condition": "IS_GREEN_RAIN_DAY", "Weather": "GreenRain"},
    {"Id": "FirstWeekSun",
     "Condition": "SEASON_DAY Spring 0 Spring 1 Spring 2 Spring 4, YEAR 1",
     "Weather": "Sun"},
    {"Id": "FirstWeekRain", "Condition": "SEASON_DAY Spring 3, YEAR 1", "Weather": "Rain"},
    {"Id": "SummerStorm",
     "Condition": "SEASON summer, SYNCED_SUMMER_RAIN_RANDOM, RANDOM .85",
     "Weather": "Storm"},
    {"Id": "SummerStorm2",
     "Condition": "SEASON summer, SYNCED_SUMMER_RAIN_RANDOM, RANDOM .25, "
                  "DAYS_PLAYED 28, !DAY_OF_MONTH 1, !DAY_OF_MONTH 2",
     "Weather": "Storm"},
    {"Id": "FallStorm",
     "Condition": "SEASON spring fall, SYNCED_RANDOM day location_weather .183, "
                  "RANDOM .25, DAYS_PLAYED 28, !DAY_OF_MONTH 1, !DAY_OF_MONTH 2",
     "Weather": "Storm"},
    {"Id": "WinterSnow",
     "Condition": "SEASON winter, SYNCED_RANDOM day location_weather 0.63",
     "Weather": "Snow"},
    {"Id": "SummerRain",
     "Condition": "SEASON summer, SYNCED_SUMMER_RAIN_RANDOM, !DAY_OF_MONTH 1",
     "Weather": "Rain"},
    {"Id": "FallRain",
     "Condition": "SEASON spring fall, SYNCED_RANDOM day location_weather 0.183",
     "Weather": "Rain"},
    {"Id": "SpringWind", "Condition": "DAYS_PLAYED 3, SEASON spring, RANDOM .20",
     "Weather": "Wind"},
    {"Id": "FallWind", "Condition": "DAYS_PLAYED 3, SEASON fall, RANDOM .6",
     "Weather": "Wind"},
    {"Id": "Default", "Condition": None, "Weather": "Sun"},
]


@pytest.fixture
def default_context():
    """The Default location context."""
    return LocationContextData.from_dict(
        "Default", {"WeatherConditions": DEFAULT_WEATHER_CONDITIONS}
    )


def make_garbage_table(cans, default_base_chance=0.2, before_all=(), after_all=()):
    """
    Raw GarbageCans table with every known can present.

    `cans` maps can key -> {"BaseChance": ..., "Items": [...]}; missing cans
    get an empty entry.
    """
    from packages.valley.generation.garbage import GarbageCanLocation

    entries = {location.value: {"BaseChance": -1, "Items": []} for location in GarbageCanLocation}
    entries.update(cans)
    return {
        "DefaultBaseChance": default_base_chance,
        "BeforeAll": list(before_all),
        "AfterAll": list(after_all),
        "GarbageCans": entries,
    }


@pytest.fixture
def small_game_data():
    """A tiny content set covering all three tables."""
    return GameData.from_dict({
        "Objects": {
            "390": {"Name": "Stone", "Type": "Basic", "Category": 0},
            "535": {
                "Name": "Geode",
                "Type": "Basic",
                "GeodeDropsDefaultItems": True,
                "GeodeDrops": [
                    {"Id": "Quartz", "ItemId": "(O)80", "Chance": 0.5, "Precedence": 0},
                ],
            },
        },
        "GarbageCans": make_garbage_table({
            "Museum": {"BaseChance": 0.3, "Items": [{"Id": "Geode", "ItemId": "(O)535"}]},
        }),
        "LocationContexts": {
            "Default": {"WeatherConditions": DEFAULT_WEATHER_CONDITIONS},
        },
    })
