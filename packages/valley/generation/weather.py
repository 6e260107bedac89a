"""
Weather Prediction

Predicts tomorrow's weather for a location context.

The host decides weather in two steps. Hard-coded modifications for the date
(getWeatherModificationsForDate) win outright; they are checked here first,
in an order that gives the same answer:
1. Festival day -> festival
2. Summer day divisible by 13 -> storm
3. The year's green rain day -> green rain
4. Third day of the save -> rain
5. First day of a month, or first four days of the save -> sun

Otherwise UpdateDailyWeather walks the context's ordered weather conditions,
evaluated against the previous day. Some conditions end in an unsynced
RANDOM roll that can't be predicted, so each matching condition contributes
its chance of the probability mass earlier conditions left over. Whatever
mass remains is sun.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ..content.game_data import LocationContextData
from ..content.items import DataError
from ..state.game_state import PredictionGameState, Season
from ..state.seeds import HASHED_SEEDS, SeedGenerator, hash_string
from .conditions import ConditionRegistry, synced_day_random


# ============================================================================
# CONSTANTS
# ============================================================================

class Weather(Enum):
    """Weather categories, by the names used in LocationContexts data."""
    SUN = "Sun"
    RAIN = "Rain"
    WIND = "Wind"
    STORM = "Storm"
    SNOW = "Snow"
    FESTIVAL = "Festival"
    GREEN_RAIN = "GreenRain"


GREEN_RAIN_DAYS = (5, 6, 7, 14, 15, 16, 18, 23)
GREEN_RAIN_YEAR_MULTIPLIER = 777
STORM_DAY_DIVISOR = 13

SUMMER_RAIN_KEY = "summer_rain_chance"
SUMMER_RAIN_BASE = np.float32(0.12)
SUMMER_RAIN_PER_DAY = np.float32(0.003)

WEATHER_CONDITIONS = ConditionRegistry("weather")


# ============================================================================
# CONDITIONS
# ============================================================================
#
# Evaluators return the condition's chance when it matches, else None.

def summer_rain_chance(state: PredictionGameState) -> float:
    """0.12 + day * 0.003, in 32-bit floats."""
    chance = SUMMER_RAIN_BASE + np.float32(state.day_of_month()) * SUMMER_RAIN_PER_DAY
    return float(np.float32(chance))


def synced_summer_rain(state: PredictionGameState, seeds: SeedGenerator) -> bool:
    rng = state.create_day_save_random(seeds, hash_string(SUMMER_RAIN_KEY))
    return rng.next_weighted_bool(summer_rain_chance(state))


def synced_location_weather(state: PredictionGameState, seeds: SeedGenerator,
                            chance: float) -> bool:
    return synced_day_random(seeds, state, "location_weather").next_weighted_bool(chance)


def is_green_rain_day(state: PredictionGameState, seeds: SeedGenerator) -> bool:
    """Exactly one summer day per year has green rain."""
    if not state.is_season(Season.SUMMER):
        return False
    rng = seeds.create_random(state.year() * GREEN_RAIN_YEAR_MULTIPLIER, state.game_id)
    return state.day_of_month() == rng.choose_from(GREEN_RAIN_DAYS)


@WEATHER_CONDITIONS.condition("IS_GREEN_RAIN_DAY")
def green_rain(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    # Conditions see the previous day, and green rain can't fall two days in
    # a row, so this never matches here. The short-circuit handles it.
    return None


@WEATHER_CONDITIONS.condition("SEASON_DAY Spring 0 Spring 1 Spring 2 Spring 4, YEAR 1")
def first_week_sun(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if any(state.is_season_day(Season.SPRING, d) for d in (0, 1, 2, 4)) and state.is_year(1):
        return 1.0
    return None


@WEATHER_CONDITIONS.condition("SEASON_DAY Spring 3, YEAR 1")
def first_week_rain(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if state.is_season_day(Season.SPRING, 3) and state.is_year(1):
        return 1.0
    return None


@WEATHER_CONDITIONS.condition("SEASON summer, SYNCED_SUMMER_RAIN_RANDOM, RANDOM .85")
def summer_storm(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if state.is_season(Season.SUMMER) and synced_summer_rain(state, seeds):
        return 0.85
    return None


@WEATHER_CONDITIONS.condition(
    "SEASON summer, SYNCED_SUMMER_RAIN_RANDOM, RANDOM .25, "
    "DAYS_PLAYED 28, !DAY_OF_MONTH 1, !DAY_OF_MONTH 2"
)
def summer_storm_late(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if (state.is_season(Season.SUMMER)
            and synced_summer_rain(state, seeds)
            and state.days_played > 28
            and not state.is_day_of_month(1)
            and not state.is_day_of_month(2)):
        return 0.25
    return None


@WEATHER_CONDITIONS.condition(
    "SEASON spring fall, SYNCED_RANDOM day location_weather .183, "
    "RANDOM .25, DAYS_PLAYED 28, !DAY_OF_MONTH 1, !DAY_OF_MONTH 2"
)
def fall_storm(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if ((state.is_season(Season.SPRING) or state.is_season(Season.FALL))
            and synced_location_weather(state, seeds, 0.183)
            and state.days_played > 28
            and not state.is_day_of_month(1)
            and not state.is_day_of_month(2)):
        return 0.25
    return None


@WEATHER_CONDITIONS.condition("SEASON winter, SYNCED_RANDOM day location_weather 0.63")
def winter_snow(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if state.is_season(Season.WINTER) and synced_location_weather(state, seeds, 0.63):
        return 1.0
    return None


@WEATHER_CONDITIONS.condition("SEASON summer, SYNCED_SUMMER_RAIN_RANDOM, !DAY_OF_MONTH 1")
def summer_rain(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if (state.is_season(Season.SUMMER)
            and synced_summer_rain(state, seeds)
            and not state.is_day_of_month(1)):
        return 1.0
    return None


@WEATHER_CONDITIONS.condition("SEASON spring fall, SYNCED_RANDOM day location_weather 0.183")
def fall_rain(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if ((state.is_season(Season.SPRING) or state.is_season(Season.FALL))
            and synced_location_weather(state, seeds, 0.183)):
        return 1.0
    return None


@WEATHER_CONDITIONS.condition("DAYS_PLAYED 3, SEASON spring, RANDOM .20")
def spring_wind(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if state.days_played > 3 and state.is_season(Season.SPRING):
        return 0.2
    return None


@WEATHER_CONDITIONS.condition("DAYS_PLAYED 3, SEASON fall, RANDOM .6")
def fall_wind(state: PredictionGameState, seeds: SeedGenerator) -> Optional[float]:
    if state.days_played > 3 and state.is_season(Season.FALL):
        return 0.6
    return None


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass(frozen=True)
class WeatherRule:
    condition: Optional[str]
    weather: Weather
    id: str = ""


@dataclass(frozen=True)
class WeatherLocation:
    """Cached, ordered weather rules of one location context."""
    context_id: str
    rules: Tuple[WeatherRule, ...] = ()

    @classmethod
    def from_context(cls, context: LocationContextData) -> "WeatherLocation":
        rules = []
        for raw in context.weather_conditions:
            try:
                weather = Weather(raw.weather)
            except ValueError:
                raise DataError(
                    f"LocationContexts[{context.id!r}]/{raw.id}: unknown weather {raw.weather!r}"
                ) from None
            WEATHER_CONDITIONS.require(raw.condition)
            rules.append(WeatherRule(raw.condition, weather, raw.id))
        return cls(context_id=context.id, rules=tuple(rules))


@dataclass(frozen=True)
class PartialPrediction:
    """One rule's share of the probability mass."""
    weather: Weather
    chance: float
    source: str = "Code"


@dataclass(frozen=True)
class WeatherPrediction:
    """Probability of each weather category for the day."""
    sun: float = 0.0
    rain: float = 0.0
    wind: float = 0.0
    storm: float = 0.0
    snow: float = 0.0
    festival: float = 0.0
    green_rain: float = 0.0

    @classmethod
    def certain(cls, weather: Weather) -> "WeatherPrediction":
        return cls(**{_FIELDS[weather]: 1.0})

    @classmethod
    def from_partials(cls, partials: List[PartialPrediction]) -> "WeatherPrediction":
        """Sum partial chances per category, in list order, from 0.0."""
        totals = dict.fromkeys(_FIELDS.values(), 0.0)
        for partial in partials:
            totals[_FIELDS[partial.weather]] += partial.chance
        return cls(**totals)

    def probability(self, weather: Weather) -> float:
        return getattr(self, _FIELDS[weather])

    def most_likely(self) -> Weather:
        return max(Weather, key=self.probability)

    def is_certain(self, weather: Weather) -> bool:
        return self.probability(weather) == 1.0


_FIELDS = {
    Weather.SUN: "sun",
    Weather.RAIN: "rain",
    Weather.WIND: "wind",
    Weather.STORM: "storm",
    Weather.SNOW: "snow",
    Weather.FESTIVAL: "festival",
    Weather.GREEN_RAIN: "green_rain",
}


# ============================================================================
# PREDICTION
# ============================================================================

def _rule_chance(rule: WeatherRule, state: PredictionGameState,
                 seeds: SeedGenerator) -> Optional[float]:
    if rule.condition is None:
        return 1.0
    return WEATHER_CONDITIONS.evaluate(rule.condition, state, seeds)


def predict_weather_partials(location: WeatherLocation, state: PredictionGameState,
                             seeds: SeedGenerator = HASHED_SEEDS) -> List[PartialPrediction]:
    """
    The per-rule contributions behind predict_weather.

    Short-circuit days yield a single certain partial.
    """
    if state.is_festival_day():
        return [PartialPrediction(Weather.FESTIVAL, 1.0)]
    if state.is_season(Season.SUMMER) and state.day_of_month() % STORM_DAY_DIVISOR == 0:
        return [PartialPrediction(Weather.STORM, 1.0)]
    if is_green_rain_day(state, seeds):
        return [PartialPrediction(Weather.GREEN_RAIN, 1.0)]
    if state.days_played == 3:
        return [PartialPrediction(Weather.RAIN, 1.0)]
    if state.is_day_of_month(1) or state.days_played <= 4:
        return [PartialPrediction(Weather.SUN, 1.0)]

    previous = state.previous_day()
    partials = []
    remaining = 1.0
    for rule in location.rules:
        base_chance = _rule_chance(rule, previous, seeds)
        if base_chance is None:
            continue
        chance = base_chance * remaining
        remaining *= 1.0 - base_chance
        if chance > 0.0:
            partials.append(PartialPrediction(rule.weather, chance, rule.id or "Default"))

    if remaining > 0.0:
        partials.append(PartialPrediction(Weather.SUN, remaining))

    return partials


def predict_weather(location: WeatherLocation, state: PredictionGameState,
                    seeds: SeedGenerator = HASHED_SEEDS) -> WeatherPrediction:
    """
    Predict the weather for `state.days_played`.

    Args:
        location: Cached weather rules (usually the "Default" context)
        state: Save facts; days_played is the day being predicted
        seeds: Seed strategy of the host version
    """
    return WeatherPrediction.from_partials(predict_weather_partials(location, state, seeds))
