"""
State module - RNG, seed derivation and prediction game state.

Contains:
- RNG system (subtractive Random, int32 wrapping)
- Seed derivation strategies (legacy additive, hashed)
- Save-derived facts snapshot (PredictionGameState)
"""

# RNG System
from .rng import Random, to_int32, MBIG, MSEED

# Seed Derivation
from .seeds import (
    SeedGenerator,
    LegacySeedGenerator,
    HashedSeedGenerator,
    LEGACY_SEEDS,
    HASHED_SEEDS,
    get_seed_generator,
    hash_string,
)

# Game State
from .game_state import (
    PredictionGameState,
    Season,
    FESTIVAL_DAYS,
    DAYS_PER_SEASON,
    DAYS_PER_YEAR,
)

__all__ = [
    # RNG
    "Random", "to_int32", "MBIG", "MSEED",
    # Seeds
    "SeedGenerator",
    "LegacySeedGenerator",
    "HashedSeedGenerator",
    "LEGACY_SEEDS",
    "HASHED_SEEDS",
    "get_seed_generator",
    "hash_string",
    # Game State
    "PredictionGameState",
    "Season",
    "FESTIVAL_DAYS",
    "DAYS_PER_SEASON",
    "DAYS_PER_YEAR",
]
