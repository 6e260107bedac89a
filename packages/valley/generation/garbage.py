"""
Garbage Can Prediction

Predicts what checking a town garbage can yields today.

Mechanics (GameLocation.CheckGarbage / TryGetGarbageItem):
1. Seed: day-save seed with (777 + hash(can id)) as the extra fact
2. Prewarm: twice, draw n in [0, 100) and discard n doubles
3. Base roll: one luck-adjusted roll against the can's base chance
4. Items: walk BeforeAll + the can's items + AfterAll in data order. An
   item is tried when the base roll passed or the item ignores it; the item
   wins when its condition (folded with the base roll) passes.

Many outcomes depend on daily luck. Instead of taking the luck as given,
a prediction reports the minimum luck the player needs for the reward, so a
single prediction covers every luck value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..content.game_data import GarbageCanData
from ..content.items import DataError
from ..state.game_state import PredictionGameState
from ..state.rng import Random, to_int32
from ..state.seeds import HASHED_SEEDS, SeedGenerator, hash_string
from .conditions import (
    STATIC_TRUE,
    ConditionRegistry,
    ConditionResult,
    daily_luck_bool,
    synced_day_random,
)
from .drops import Drop, DropReward


# ============================================================================
# CONSTANTS
# ============================================================================

class GarbageCanLocation(Enum):
    """Town garbage cans, by GarbageCans table key."""
    JODI_AND_KENT = "JodiAndKent"
    EMILY_AND_HALEY = "EmilyAndHaley"
    MAYOR = "Mayor"
    MUSEUM = "Museum"
    BLACKSMITH = "Blacksmith"
    SALOON = "Saloon"
    EVELYN = "Evelyn"
    JOJA_MART = "JojaMart"


# Added to the can's base chance once the trash book has been read.
TRASH_BOOK_BONUS = np.float32(0.2)

# Offset added to the can id hash when seeding.
CAN_SEED_OFFSET = 777

PREWARM_LOW = 0
PREWARM_HIGH = 100

GARBAGE_CONDITIONS = ConditionRegistry("garbage")


# ============================================================================
# CONDITIONS
# ============================================================================

@GARBAGE_CONDITIONS.condition("PLAYER_STAT Current trashCansChecked 20, RANDOM .002")
def checked_20_rare(rng: Random, state: PredictionGameState,
                    seeds: SeedGenerator) -> ConditionResult:
    return ConditionResult.static(
        state.trash_cans_checked >= 20 and rng.next_weighted_bool(0.002))


@GARBAGE_CONDITIONS.condition("PLAYER_STAT Current trashCansChecked 50, RANDOM .002")
def checked_50_rare(rng: Random, state: PredictionGameState,
                    seeds: SeedGenerator) -> ConditionResult:
    return ConditionResult.static(
        state.trash_cans_checked >= 50 and rng.next_weighted_bool(0.002))


@GARBAGE_CONDITIONS.condition("PLAYER_SPECIAL_ORDER_RULE_ACTIVE Current DROP_QI_BEANS, RANDOM 0.25")
def qi_beans(rng: Random, state: PredictionGameState,
             seeds: SeedGenerator) -> ConditionResult:
    return ConditionResult.static(
        state.qi_beans_quest_active and rng.next_weighted_bool(0.25))


@GARBAGE_CONDITIONS.condition("PLAYER_STAT Current trashCansChecked 20, RANDOM .01")
def checked_20_uncommon(rng: Random, state: PredictionGameState,
                        seeds: SeedGenerator) -> ConditionResult:
    return ConditionResult.static(
        state.trash_cans_checked >= 20 and rng.next_weighted_bool(0.01))


@GARBAGE_CONDITIONS.condition("RANDOM 0.2 @addDailyLuck")
def random_with_luck(rng: Random, state: PredictionGameState,
                     seeds: SeedGenerator) -> ConditionResult:
    return daily_luck_bool(rng, 0.2)


@GARBAGE_CONDITIONS.condition(
    "SYNCED_RANDOM day garbage_joja 0.2, "
    "PLAYER_HAS_MAIL Host ccMovieTheater, "
    "!PLAYER_HAS_MAIL Host ccMovieTheaterJoja"
)
def joja_movie_theater(rng: Random, state: PredictionGameState,
                       seeds: SeedGenerator) -> ConditionResult:
    roll = synced_day_random(seeds, state, "garbage_joja").next_weighted_bool(0.2)
    return (ConditionResult.static(roll)
            .and_(state.has_cc_movie_theater_mail)
            .and_(not state.has_cc_movie_theater_joja_mail))


@GARBAGE_CONDITIONS.condition("SYNCED_RANDOM day garbage_joja 0.2, !PLAYER_HAS_SEEN_EVENT Any 191393")
def joja_before_event(rng: Random, state: PredictionGameState,
                      seeds: SeedGenerator) -> ConditionResult:
    roll = synced_day_random(seeds, state, "garbage_joja").next_weighted_bool(0.2)
    return ConditionResult.static(roll).and_(not state.seen_event_191393)


@GARBAGE_CONDITIONS.condition(
    "SYNCED_RANDOM day garbage_museum_535 0.2 @addDailyLuck, "
    "SYNCED_RANDOM day garbage_museum_749 0.05"
)
def museum_omni_geode(rng: Random, state: PredictionGameState,
                      seeds: SeedGenerator) -> ConditionResult:
    geode = daily_luck_bool(synced_day_random(seeds, state, "garbage_museum_535"), 0.2)
    omni = synced_day_random(seeds, state, "garbage_museum_749").next_weighted_bool(0.05)
    return geode.and_result(ConditionResult.static(omni))


@GARBAGE_CONDITIONS.condition("SYNCED_RANDOM day garbage_museum_535 0.2 @addDailyLuck")
def museum_geode(rng: Random, state: PredictionGameState,
                 seeds: SeedGenerator) -> ConditionResult:
    return daily_luck_bool(synced_day_random(seeds, state, "garbage_museum_535"), 0.2)


@GARBAGE_CONDITIONS.condition("SYNCED_RANDOM day garbage_saloon_dish 0.2 @addDailyLuck")
def saloon_dish(rng: Random, state: PredictionGameState,
                seeds: SeedGenerator) -> ConditionResult:
    return daily_luck_bool(synced_day_random(seeds, state, "garbage_saloon_dish"), 0.2)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass(frozen=True)
class GarbageDrop:
    drop: Drop
    ignore_base_chance: bool = False


@dataclass(frozen=True)
class GarbageCan:
    """
    Cached table for one can.

    base_chance already includes the default fallback and the trash book
    bonus, computed in 32-bit floats like the host.
    """
    location: GarbageCanLocation
    base_chance: float
    hashed_id: int
    items: Tuple[GarbageDrop, ...] = ()

    @classmethod
    def build(cls, location: GarbageCanLocation, data: GarbageCanData,
              state: PredictionGameState) -> "GarbageCan":
        key = location.value
        try:
            can_data = data.garbage_cans[key]
        except KeyError:
            raise DataError(f"GarbageCans[{key!r}]: no data for garbage can") from None

        if np.float32(can_data.base_chance) > 0:
            base_chance = np.float32(can_data.base_chance)
        else:
            base_chance = np.float32(data.default_base_chance)
        if state.has_trash_book:
            base_chance = np.float32(base_chance + TRASH_BOOK_BONUS)

        items = []
        for raw in data.before_all + can_data.items + data.after_all:
            GARBAGE_CONDITIONS.require(raw.spawn.condition)
            items.append(GarbageDrop(
                drop=Drop.from_spawn_data(raw.spawn, table="GarbageCans", key=key),
                ignore_base_chance=raw.ignore_base_chance,
            ))

        return cls(
            location=location,
            base_chance=float(base_chance),
            hashed_id=to_int32(CAN_SEED_OFFSET + hash_string(key)),
            items=tuple(items),
        )


@dataclass(frozen=True)
class GarbagePrediction:
    """
    A can's reward for the day.

    min_daily_luck is None when the reward doesn't depend on luck; otherwise
    the player needs daily luck strictly greater than it.
    """
    location: GarbageCanLocation
    reward: DropReward
    min_daily_luck: Optional[float] = None


# ============================================================================
# PREDICTION
# ============================================================================

def _evaluate(condition: Optional[str], rng: Random, state: PredictionGameState,
              seeds: SeedGenerator) -> ConditionResult:
    if condition is None:
        return STATIC_TRUE
    return GARBAGE_CONDITIONS.evaluate(condition, rng, state, seeds)


def predict_garbage(can: GarbageCan, state: PredictionGameState,
                    seeds: SeedGenerator = HASHED_SEEDS) -> Optional[GarbagePrediction]:
    """
    Predict today's reward for `can`.

    Returns None when nothing is found for any attainable luck, which is a
    normal outcome.
    """
    rng = state.create_day_save_random(seeds, can.hashed_id)
    rng.prewarm(PREWARM_LOW, PREWARM_HIGH)

    base = daily_luck_bool(rng, can.base_chance)

    for entry in can.items:
        if not (base or entry.ignore_base_chance):
            continue
        result = _evaluate(entry.drop.condition, rng, state, seeds).and_result(base)
        if result.is_static:
            if result.value:
                return GarbagePrediction(can.location, entry.drop.resolve(rng))
        elif state.daily_luck > result.min_luck:
            return GarbagePrediction(can.location, entry.drop.resolve(rng), result.min_luck)

    return None


def build_garbage_cans(data: GarbageCanData,
                       state: PredictionGameState) -> Dict[GarbageCanLocation, GarbageCan]:
    """Cached tables for every known can."""
    return {location: GarbageCan.build(location, data, state) for location in GarbageCanLocation}


def predict_all_garbage(cans: Dict[GarbageCanLocation, GarbageCan],
                        state: PredictionGameState,
                        seeds: SeedGenerator = HASHED_SEEDS) -> List[GarbagePrediction]:
    """Predictions for every can that yields something, in can order."""
    predictions = []
    for can in cans.values():
        prediction = predict_garbage(can, state, seeds)
        if prediction is not None:
            predictions.append(prediction)
    return predictions
