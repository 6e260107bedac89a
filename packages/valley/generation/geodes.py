"""
Geode Prediction

Predicts what cracking a geode-like container at the blacksmith yields.

Cracking Mechanics (Utility.getTreasureFromGeode):
1. Seed: (GeodesCracked, uniqueIDForThisGame / 2, UniqueMultiplayerID / 2)
2. Prewarm: twice, draw n in [1, 10) and discard n doubles
3. Qi beans: one double always drawn; <= 0.1 with the Qi beans special
   order active gives Qi beans (5 of them on a further < 0.25 roll)
4. Data drops: if the container has GeodeDrops and either it doesn't also
   use the default items or a coin flip says to use the data, walk the drops
   in precedence order. Each drop rolls its own chance, then its condition.
   The first that passes is the reward.
5. Default items: stone / clay / a mineral, or an ore picked by container
   type and how deep the player has been in the mines.

Because the counter in step 1 is the number of geodes cracked so far, the
next N cracks can be predicted by bumping it (predict_geodes).
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..content.game_data import ObjectData
from ..content.items import (
    CLAY, COAL, COPPER_ORE, DataError, EARTH_CRYSTAL, FIRE_QUARTZ, FROZEN_TEAR,
    GOLD_ORE, IRIDIUM_ORE, IRON_ORE, ItemId, QI_BEANS, STONE,
)
from ..state.game_state import PredictionGameState
from ..state.rng import Random
from ..state.seeds import HASHED_SEEDS, SeedGenerator
from .conditions import ConditionRegistry
from .drops import Drop, DropReward


# ============================================================================
# CONSTANTS
# ============================================================================

class GeodeType(Enum):
    """Crackable containers, keyed by object id."""
    GEODE = "535"
    FROZEN_GEODE = "536"
    MAGMA_GEODE = "537"
    OMNI_GEODE = "749"
    ARTIFACT_TROVE = "275"
    GOLDEN_COCONUT = "791"


# Qi beans special order
QI_BEANS_CHANCE = 0.1
QI_BEANS_BONUS_CHANCE = 0.25
QI_BEANS_BONUS_QUANTITY = 5

# Default item quantity bonuses
STACK_OF_TEN_CHANCE = 0.1
STACK_OF_TWENTY_CHANCE = 0.01

# Mine depth milestones that unlock better ore
IRON_ORE_DEPTH = 25
GOLD_ORE_DEPTH = 75

# Mineral dropped by each container type on the mineral branch.
MINERAL_BY_TYPE: Dict[GeodeType, ItemId] = {
    GeodeType.GEODE: EARTH_CRYSTAL,
    GeodeType.FROZEN_GEODE: FROZEN_TEAR,
}

GEODE_CONDITIONS = ConditionRegistry("geode")


@GEODE_CONDITIONS.condition("PLAYER_STAT Current GeodesCracked 16")
def geodes_cracked_16(rng: Random, state: PredictionGameState) -> bool:
    return state.geodes_cracked >= 16


@GEODE_CONDITIONS.condition("!PLAYER_HAS_MAIL Current goldenCoconutHat")
def no_golden_coconut_hat(rng: Random, state: PredictionGameState) -> bool:
    return not state.has_golden_coconut_hat_mail


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass(frozen=True)
class GeodeDrop:
    """A data drop with its own chance roll."""
    drop: Drop
    chance: float
    precedence: int = 0


@dataclass(frozen=True)
class Geode:
    """
    Cached drop table for one container type.

    Drops are sorted by precedence once at build time (stable, so equal
    precedence keeps data order).
    """
    geode_type: GeodeType
    drops: Tuple[GeodeDrop, ...] = ()
    uses_default_items: bool = False

    @classmethod
    def from_object_data(cls, object_id: str, data: ObjectData) -> "Geode":
        try:
            geode_type = GeodeType(object_id)
        except ValueError:
            raise DataError(f"Objects[{object_id!r}]: not a geode type") from None

        drops = []
        for raw in sorted(data.geode_drops or (), key=lambda d: d.precedence):
            GEODE_CONDITIONS.require(raw.spawn.condition)
            drops.append(GeodeDrop(
                drop=Drop.from_spawn_data(raw.spawn, table="Objects", key=object_id),
                chance=raw.chance,
                precedence=raw.precedence,
            ))

        return cls(
            geode_type=geode_type,
            drops=tuple(drops),
            uses_default_items=data.geode_drops_default_items,
        )


# ============================================================================
# PREDICTION
# ============================================================================

def _half(value: int) -> int:
    """Integer division by 2 truncating toward zero, as the host does."""
    return -((-value) // 2) if value < 0 else value // 2


def _roll_data_drops(geode: Geode, rng: Random,
                     state: PredictionGameState) -> Optional[DropReward]:
    for entry in geode.drops:
        if not rng.next_weighted_bool(entry.chance):
            continue
        condition = entry.drop.condition
        if condition is not None and not GEODE_CONDITIONS.evaluate(condition, rng, state):
            continue
        return entry.drop.resolve(rng)
    return None


def _roll_default_items(geode: Geode, rng: Random,
                        state: PredictionGameState) -> DropReward:
    amount = rng.next_max(3) * 2 + 1
    if rng.next_double() < STACK_OF_TEN_CHANCE:
        amount = 10
    if rng.next_double() < STACK_OF_TWENTY_CHANCE:
        amount = 20

    geode_type = geode.geode_type

    if rng.next_bool():
        roll = rng.next_max(4)
        if roll in (0, 1):
            return DropReward(STONE, amount)
        if roll == 2:
            return DropReward(CLAY, 1)
        if geode_type is GeodeType.OMNI_GEODE:
            return DropReward(ItemId.object(str(82 + rng.next_max(3) * 2)), 1)
        return DropReward(MINERAL_BY_TYPE.get(geode_type, FIRE_QUARTZ), 1)

    deep = state.deepest_mine_level
    if geode_type is GeodeType.GEODE:
        roll = rng.next_max(3)
        if roll == 0:
            item = COPPER_ORE
        elif roll == 1:
            item = IRON_ORE if deep > IRON_ORE_DEPTH else COPPER_ORE
        else:
            item = COAL
    elif geode_type is GeodeType.FROZEN_GEODE:
        roll = rng.next_max(4)
        if roll == 0:
            item = COPPER_ORE
        elif roll == 1:
            item = IRON_ORE
        elif roll == 2:
            item = COAL
        else:
            item = GOLD_ORE if deep > GOLD_ORE_DEPTH else IRON_ORE
    else:
        roll = rng.next_max(5)
        if roll == 0:
            item = COPPER_ORE
        elif roll == 1:
            item = IRON_ORE
        elif roll == 2:
            item = COAL
        elif roll == 3:
            item = GOLD_ORE
        else:
            item = IRIDIUM_ORE
            amount = amount // 2 + 1

    return DropReward(item, amount)


def predict_geode(geode: Geode, state: PredictionGameState,
                  seeds: SeedGenerator = HASHED_SEEDS) -> DropReward:
    """
    Predict the reward for the next crack of `geode`.

    Args:
        geode: Cached container table
        state: Save facts; geodes_cracked is the count before this crack
        seeds: Seed strategy of the host version

    Returns:
        The reward. There is always one; the default items never fail.
    """
    rng = seeds.create_random(
        state.geodes_cracked,
        state.game_id // 2,
        _half(state.multiplayer_id),
    )
    rng.prewarm(1, 10)

    # The roll happens whether or not the special order is active.
    if rng.next_double() <= QI_BEANS_CHANCE and state.qi_beans_quest_active:
        quantity = QI_BEANS_BONUS_QUANTITY if rng.next_double() < QI_BEANS_BONUS_CHANCE else 1
        return DropReward(QI_BEANS, quantity)

    if geode.drops and (not geode.uses_default_items or rng.next_bool()):
        reward = _roll_data_drops(geode, rng, state)
        if reward is not None:
            return reward

    return _roll_default_items(geode, rng, state)


def predict_geodes(geode: Geode, state: PredictionGameState, count: int,
                   offset: int = 0,
                   seeds: SeedGenerator = HASHED_SEEDS) -> List[DropReward]:
    """
    Predict `count` consecutive cracks, starting `offset` cracks from now.
    """
    return [
        predict_geode(
            geode,
            replace(state, geodes_cracked=state.geodes_cracked + offset + i),
            seeds,
        )
        for i in range(count)
    ]


def predict_all_geodes(geodes: Dict[GeodeType, Geode], state: PredictionGameState,
                       count: int, offset: int = 0,
                       seeds: SeedGenerator = HASHED_SEEDS) -> Dict[GeodeType, List[DropReward]]:
    """predict_geodes for every cached container type."""
    return {
        geode_type: predict_geodes(geode, state, count, offset, seeds)
        for geode_type, geode in geodes.items()
    }
