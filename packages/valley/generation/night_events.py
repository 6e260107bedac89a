"""
Night Event Prediction

Predicts the special event (if any) that happens overnight.

The host picks tonight's event while setting up tomorrow, so every check
reads tomorrow's date:
1. Seed: day-save seed for days_played + 1 with zero extra facts
2. Warm up: 10 discarded doubles
3. Checks, first match wins:
   - Raccoon stump: pantry bundle done, < 0.1, once per save
   - Fairy: < 0.01 (+0.007 if a fairy rose matured), not winter, not day 1
   - Witch: < 0.01 after day 20
   - Meteorite: < 0.01 after day 5
   - Owl: < 0.005
   - Strange capsule: < 0.008 from year 2, once per save

The stump roll is only drawn when the pantry is complete, so that flag
shifts every later roll.
"""

from dataclasses import replace
from enum import Enum
from typing import List, Tuple

from ..state.game_state import PredictionGameState, Season
from ..state.seeds import HASHED_SEEDS, SeedGenerator


class NightEvent(Enum):
    RACCOON_STUMP = "RaccoonStump"
    FAIRY = "Fairy"
    WITCH = "Witch"
    METEORITE = "Meteorite"
    OWL = "Owl"
    CAPSULE = "Capsule"
    NONE = "None"


WARMUP_DRAWS = 10

RACCOON_STUMP_CHANCE = 0.1
FAIRY_CHANCE = 0.01
FAIRY_ROSE_BONUS = 0.007
WITCH_CHANCE = 0.01
WITCH_MIN_DAY = 20
METEORITE_CHANCE = 0.01
METEORITE_MIN_DAY = 5
OWL_CHANCE = 0.005
CAPSULE_CHANCE = 0.008
CAPSULE_MIN_YEAR = 1


def predict_night_event(state: PredictionGameState,
                        seeds: SeedGenerator = HASHED_SEEDS) -> NightEvent:
    """
    Predict tonight's event for a save on `state.days_played`.

    Pure: the once-per-save flags are not touched. Apply the outcome with
    apply_night_event before predicting the next night.
    """
    tomorrow = state.next_day()
    rng = tomorrow.create_day_save_random(seeds)
    rng.skip(WARMUP_DRAWS)

    if (tomorrow.cc_pantry_complete
            and rng.next_double() < RACCOON_STUMP_CHANCE
            and not tomorrow.raccoon_tree_fallen):
        return NightEvent.RACCOON_STUMP

    fairy_chance = FAIRY_CHANCE + (FAIRY_ROSE_BONUS if tomorrow.has_fairy_rose else 0.0)
    if (rng.next_double() < fairy_chance
            and not tomorrow.is_season(Season.WINTER)
            and not tomorrow.is_day_of_month(1)):
        return NightEvent.FAIRY

    if rng.next_double() < WITCH_CHANCE and tomorrow.days_played > WITCH_MIN_DAY:
        return NightEvent.WITCH

    if rng.next_double() < METEORITE_CHANCE and tomorrow.days_played > METEORITE_MIN_DAY:
        return NightEvent.METEORITE

    if rng.next_double() < OWL_CHANCE:
        return NightEvent.OWL

    if (rng.next_double() < CAPSULE_CHANCE
            and tomorrow.year() > CAPSULE_MIN_YEAR
            and not tomorrow.has_mail_got_capsule):
        return NightEvent.CAPSULE

    return NightEvent.NONE


def apply_night_event(state: PredictionGameState, event: NightEvent) -> PredictionGameState:
    """
    State after tonight's event.

    Sets the once-per-save flag for the stump or capsule. The fairy rose
    bonus is used up by the fairy check, which every night except a stump
    night reaches.
    """
    if event is NightEvent.RACCOON_STUMP:
        return replace(state, raccoon_tree_fallen=True)
    changes = {"has_fairy_rose": False}
    if event is NightEvent.CAPSULE:
        changes["has_mail_got_capsule"] = True
    return replace(state, **changes)


def predict_night_events(state: PredictionGameState, nights: int,
                         seeds: SeedGenerator = HASHED_SEEDS) -> List[Tuple[int, NightEvent]]:
    """
    Predict `nights` consecutive nights, carrying the once-per-save flags.

    Returns (day the event is seen, event) pairs for nights with an event.
    """
    events = []
    for _ in range(nights):
        event = predict_night_event(state, seeds)
        state = apply_night_event(state, event)
        state = state.next_day()
        if event is not NightEvent.NONE:
            events.append((state.days_played, event))
    return events
