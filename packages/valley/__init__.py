"""
Valley Predictor

Reproduces the life-sim's seeded random outcomes outside the game, so future
events can be read off a save before they happen. Every draw order, seed
derivation and float rounding step must match the game exactly (verified via
golden-vector tests).

Core subsystems:
- state: subtractive RNG, seed derivation strategies, save facts
- content: item ids and typed content tables
- generation: geodes, garbage cans, weather, night events, fishing bubbles
- simulation: parallel day / game id scanning

Usage:
    from packages.valley import (
        GameData, PredictionGameState, WeatherLocation, predict_weather, HASHED_SEEDS
    )

    data = GameData.from_content_dir("Content/Data")
    location = WeatherLocation.from_context(data.location_context("Default"))
    state = PredictionGameState(game_id=7269403, days_played=31)
    print(predict_weather(location, state, HASHED_SEEDS))
"""

__version__ = "0.1.0"

# RNG + Seeds
from .state.rng import Random, to_int32
from .state.seeds import (
    SeedGenerator, LegacySeedGenerator, HashedSeedGenerator,
    LEGACY_SEEDS, HASHED_SEEDS, get_seed_generator, hash_string,
)

# Game State
from .state.game_state import PredictionGameState, Season

# Content
from .content.items import DataError, ItemId, ItemType, ItemNameCache
from .content.game_data import GameData

# Predictors
from .generation.conditions import ConditionResult, UnknownConditionError
from .generation.drops import Drop, DropReward
from .generation.geodes import Geode, GeodeType, predict_geode, predict_geodes
from .generation.garbage import (
    GarbageCan, GarbageCanLocation, GarbagePrediction, predict_garbage,
)
from .generation.weather import (
    Weather, WeatherLocation, WeatherPrediction, predict_weather,
)
from .generation.night_events import NightEvent, predict_night_event, apply_night_event
from .generation.bubbles import Bubbles, FishingMap, calculate_bubbles

# Batch scanning
from .simulation.batch import BatchConfig, BatchResult, scan_days, scan_game_ids

__all__ = [
    "__version__",
    # RNG + Seeds
    "Random", "to_int32",
    "SeedGenerator", "LegacySeedGenerator", "HashedSeedGenerator",
    "LEGACY_SEEDS", "HASHED_SEEDS", "get_seed_generator", "hash_string",
    # Game State
    "PredictionGameState", "Season",
    # Content
    "DataError", "ItemId", "ItemType", "ItemNameCache", "GameData",
    # Predictors
    "ConditionResult", "UnknownConditionError",
    "Drop", "DropReward",
    "Geode", "GeodeType", "predict_geode", "predict_geodes",
    "GarbageCan", "GarbageCanLocation", "GarbagePrediction", "predict_garbage",
    "Weather", "WeatherLocation", "WeatherPrediction", "predict_weather",
    "NightEvent", "predict_night_event", "apply_night_event",
    "Bubbles", "FishingMap", "calculate_bubbles",
    # Batch
    "BatchConfig", "BatchResult", "scan_days", "scan_game_ids",
]
