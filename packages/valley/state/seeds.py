"""
Seed derivation - how the game turns save facts into a Random seed.

The game never keeps a long-lived RNG for the things we predict. Each roll
builds a fresh Random from up to five numeric facts (day counter, game id,
location hash, ...). Two combination strategies exist depending on the host
version:

- Legacy: reduce each fact mod int.MaxValue, sum, reduce again, truncate.
- Hashed: reduce and truncate each fact to an int, then xxHash32 the
  little-endian bytes of all five ints.

A prediction context uses exactly one strategy. Predictors take the strategy
as a parameter (`seeds=`) and never branch on it.
"""

import math
import struct
from abc import ABC, abstractmethod
from typing import Sequence

import xxhash

from .rng import Random, to_int32

SEED_MODULUS = 2147483647.0


def hash_bytes(data: bytes) -> int:
    """Signed 32-bit xxHash32 (seed 0) of raw bytes."""
    return to_int32(xxhash.xxh32(data, seed=0).intdigest())


def hash_string(key: str) -> int:
    """
    Signed 32-bit hash of a UTF-8 key.

    Used for synced-random keys ("garbage_joja", "location_weather", ...) and
    garbage can ids. The signed reinterpretation matters: the value is later
    promoted to a double and reduced like any other seed fact.
    """
    return hash_bytes(key.encode("utf-8"))


class SeedGenerator(ABC):
    """Strategy for combining up to five facts into a 32-bit seed."""

    name: str = "abstract"

    @abstractmethod
    def combine(self, values: Sequence[float]) -> int:
        """Combine exactly five facts (already promoted to float)."""

    def generate_seed(self, a: float, b: float = 0.0, c: float = 0.0,
                      d: float = 0.0, e: float = 0.0) -> int:
        """Seed from up to five facts; unused facts are zero."""
        return self.combine([float(a), float(b), float(c), float(d), float(e)])

    def generate_day_save_seed(self, days_played: int, game_id: int,
                               a: float = 0.0, b: float = 0.0,
                               c: float = 0.0) -> int:
        """
        Seed for a per-day, per-save roll.

        Substitutes (days_played, game_id / 2, a, b, c). The halving is
        unsigned integer division on the game id.
        """
        return self.generate_seed(days_played, game_id // 2, a, b, c)

    def create_random(self, a: float, b: float = 0.0, c: float = 0.0,
                      d: float = 0.0, e: float = 0.0) -> Random:
        """Fresh Random for generate_seed(a, b, c, d, e)."""
        return Random(self.generate_seed(a, b, c, d, e))

    def create_day_save_random(self, days_played: int, game_id: int,
                               a: float = 0.0, b: float = 0.0,
                               c: float = 0.0) -> Random:
        """Fresh Random for generate_day_save_seed(...)."""
        return Random(self.generate_day_save_seed(days_played, game_id, a, b, c))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LegacySeedGenerator(SeedGenerator):
    """
    Additive seed combination used by older hosts.

    C#:
    ```
    (int)((seedA % 2147483647.0 + seedB % 2147483647.0 + seedC % 2147483647.0
           + seedD % 2147483647.0 + seedE % 2147483647.0) % 2147483647.0)
    ```
    """

    name = "legacy"

    def combine(self, values: Sequence[float]) -> int:
        total = 0.0
        for value in values:
            total += math.fmod(value, SEED_MODULUS)
        return to_int32(int(math.fmod(total, SEED_MODULUS)))


class HashedSeedGenerator(SeedGenerator):
    """
    Hashed seed combination used by current hosts.

    Each fact is reduced mod int.MaxValue and truncated to an int; the five
    ints are streamed little-endian into xxHash32 (seed 0) and the digest is
    reinterpreted as a signed int.
    """

    name = "hashed"

    def combine(self, values: Sequence[float]) -> int:
        hasher = xxhash.xxh32(seed=0)
        for value in values:
            reduced = to_int32(int(math.fmod(value, SEED_MODULUS)))
            hasher.update(struct.pack("<i", reduced))
        return to_int32(hasher.intdigest())


# Strategies are stateless, so a single shared instance of each is enough.
LEGACY_SEEDS = LegacySeedGenerator()
HASHED_SEEDS = HashedSeedGenerator()

SEED_GENERATORS = {
    LEGACY_SEEDS.name: LEGACY_SEEDS,
    HASHED_SEEDS.name: HASHED_SEEDS,
}


def get_seed_generator(name: str) -> SeedGenerator:
    """Look up a strategy by name ("legacy" or "hashed")."""
    try:
        return SEED_GENERATORS[name]
    except KeyError:
        raise ValueError(
            f"Unknown seed generator: {name!r}. Expected one of {sorted(SEED_GENERATORS)}"
        ) from None
