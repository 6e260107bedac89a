"""
Content module - Item ids and typed game data tables.
"""

# Items
from .items import (
    DataError, ItemId, ItemType, ItemNameCache,
    STONE, CLAY, COPPER_ORE, IRON_ORE, COAL, GOLD_ORE, IRIDIUM_ORE,
    FIRE_QUARTZ, FROZEN_TEAR, EARTH_CRYSTAL, PRISMATIC_SHARD,
    GEODE, FROZEN_GEODE, MAGMA_GEODE, OMNI_GEODE, ARTIFACT_TROVE, GOLDEN_COCONUT,
    QI_BEANS, RANDOM_BASE_SEASON_ITEM,
)

# Game Data
from .game_data import (
    GameData,
    GenericSpawnItemData,
    ObjectGeodeDropData,
    ObjectData,
    GarbageCanItemData,
    GarbageCanEntryData,
    GarbageCanData,
    WeatherCondition,
    LocationContextData,
)

__all__ = [
    # Items
    "DataError", "ItemId", "ItemType", "ItemNameCache",
    "STONE", "CLAY", "COPPER_ORE", "IRON_ORE", "COAL", "GOLD_ORE", "IRIDIUM_ORE",
    "FIRE_QUARTZ", "FROZEN_TEAR", "EARTH_CRYSTAL", "PRISMATIC_SHARD",
    "GEODE", "FROZEN_GEODE", "MAGMA_GEODE", "OMNI_GEODE", "ARTIFACT_TROVE",
    "GOLDEN_COCONUT", "QI_BEANS", "RANDOM_BASE_SEASON_ITEM",
    # Game Data
    "GameData",
    "GenericSpawnItemData",
    "ObjectGeodeDropData",
    "ObjectData",
    "GarbageCanItemData",
    "GarbageCanEntryData",
    "GarbageCanData",
    "WeatherCondition",
    "LocationContextData",
]
