"""
Generation module - Predictors for the game's seeded random outcomes.

Contains:
- Condition evaluation (ConditionResult, closed-set registries)
- Drop resolution (item + quantity)
- Geodes, garbage cans, weather, night events, fishing bubbles
"""

from .conditions import (
    ConditionResult,
    ConditionRegistry,
    UnknownConditionError,
    daily_luck_bool,
    synced_day_random,
)
from .drops import Drop, DropReward, resolve_quantity
from .geodes import (
    Geode, GeodeType, GEODE_CONDITIONS,
    predict_geode, predict_geodes, predict_all_geodes,
)
from .garbage import (
    GarbageCan, GarbageCanLocation, GarbagePrediction, GARBAGE_CONDITIONS,
    predict_garbage, predict_all_garbage, build_garbage_cans,
)
from .weather import (
    Weather, WeatherLocation, WeatherPrediction, PartialPrediction, WEATHER_CONDITIONS,
    predict_weather, predict_weather_partials, is_green_rain_day,
)
from .night_events import (
    NightEvent, predict_night_event, predict_night_events, apply_night_event,
)
from .bubbles import (
    Bubbles, FishingMap, Point, TileGridMap, TimeSpan,
    calculate_bubbles, distance_to_land,
)

__all__ = [
    # Conditions
    "ConditionResult", "ConditionRegistry", "UnknownConditionError",
    "daily_luck_bool", "synced_day_random",
    # Drops
    "Drop", "DropReward", "resolve_quantity",
    # Geodes
    "Geode", "GeodeType", "GEODE_CONDITIONS",
    "predict_geode", "predict_geodes", "predict_all_geodes",
    # Garbage
    "GarbageCan", "GarbageCanLocation", "GarbagePrediction", "GARBAGE_CONDITIONS",
    "predict_garbage", "predict_all_garbage", "build_garbage_cans",
    # Weather
    "Weather", "WeatherLocation", "WeatherPrediction", "PartialPrediction",
    "WEATHER_CONDITIONS", "predict_weather", "predict_weather_partials",
    "is_green_rain_day",
    # Night events
    "NightEvent", "predict_night_event", "predict_night_events", "apply_night_event",
    # Bubbles
    "Bubbles", "FishingMap", "Point", "TileGridMap", "TimeSpan",
    "calculate_bubbles", "distance_to_land",
]
