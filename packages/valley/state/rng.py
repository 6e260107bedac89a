"""
Subtractive RNG - Exact replication of the host runtime's seeded Random class.

The game seeds every prediction-relevant roll through the runtime's legacy
`System.Random(int seed)` implementation: Knuth's subtractive generator
(Numerical Recipes in C, 2nd edition) with a 56-slot seed array and two
rotating cursors.

Every prediction builds a fresh Random from a derived seed (see seeds.py) and
makes a fixed sequence of calls on it. The order of calls is part of the
observable behaviour: one extra or missing draw shifts every later roll.
"""

from typing import List, Sequence, TypeVar

T = TypeVar("T")

# Knuth's MSEED (golden ratio digits) and the runtime's MBIG (int.MaxValue).
MSEED = 161803398
MBIG = 2147483647
INT32_MIN = -2147483648

SEED_ARRAY_LEN = 56

# Index multiplier and lag used by the initialisation recurrence.
_INIT_STEP = 21
_MIX_LAG = 30


def to_int32(value: int) -> int:
    """Wrap an arbitrary Python int to a signed 32-bit value (unchecked int)."""
    value &= 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


class Random:
    """
    Seeded subtractive generator.

    Matches the runtime's legacy seeded Random exactly, including integer
    overflow during seeding and the `MBIG - 1` quirk of InternalSample.

    Method names follow the runtime overloads:
    - Next()                  -> next_i32()
    - Next(max)               -> next_max(max)
    - Next(min, max)          -> next_range(min, max)
    - NextDouble()            -> next_double()
    - NextBool()              -> next_bool()
    - NextBool(chance)        -> next_weighted_bool(chance)
    - ChooseFrom(list)        -> choose_from(list)

    `counter` tracks primitive draws made, which is handy when lining a
    prediction up against a trace from the game.
    """

    def __init__(self, seed: int):
        """
        Initialise the seed array from a 32-bit seed.

        C#:
        ```
        int subtraction = (Seed == Int32.MinValue) ? Int32.MaxValue : Math.Abs(Seed);
        mj = MSEED - subtraction;
        SeedArray[55] = mj;
        mk = 1;
        for (int i = 1; i < 55; i++) {
            ii = (21 * i) % 55;
            SeedArray[ii] = mk;
            mk = mj - mk;
            if (mk < 0) mk += MBIG;
            mj = SeedArray[ii];
        }
        for (int k = 1; k < 5; k++) {
            for (int i = 1; i < 56; i++) {
                SeedArray[i] -= SeedArray[1 + (i + 30) % 55];
                if (SeedArray[i] < 0) SeedArray[i] += MBIG;
            }
        }
        inext = 0;
        inextp = 21;
        ```
        """
        seed = to_int32(seed)
        subtraction = MBIG if seed == INT32_MIN else abs(seed)

        seed_array = [0] * SEED_ARRAY_LEN
        mj = to_int32(MSEED - subtraction)
        seed_array[SEED_ARRAY_LEN - 1] = mj
        mk = 1

        for i in range(1, SEED_ARRAY_LEN - 1):
            ii = (_INIT_STEP * i) % (SEED_ARRAY_LEN - 1)
            seed_array[ii] = mk
            mk = to_int32(mj - mk)
            if mk < 0:
                mk += MBIG
            mj = seed_array[ii]

        for _ in range(1, 5):
            for i in range(1, SEED_ARRAY_LEN):
                j = 1 + (i + _MIX_LAG) % (SEED_ARRAY_LEN - 1)
                value = to_int32(seed_array[i] - seed_array[j])
                if value < 0:
                    value += MBIG
                seed_array[i] = value

        self._seed_array = seed_array
        self._next = 0
        self._next_p = _INIT_STEP
        self.seed = seed
        self.counter = 0

    # ============ CORE ALGORITHM ============

    def internal_sample(self) -> int:
        """
        Advance the generator one step.

        C#:
        ```
        if (++locINext >= 56) locINext = 1;
        if (++locINextp >= 56) locINextp = 1;
        retVal = SeedArray[locINext] - SeedArray[locINextp];
        if (retVal == MBIG) retVal--;
        if (retVal < 0) retVal += MBIG;
        SeedArray[locINext] = retVal;
        ```
        """
        next_i = self._next + 1
        next_p = self._next_p + 1
        if next_i >= SEED_ARRAY_LEN:
            next_i = 1
        if next_p >= SEED_ARRAY_LEN:
            next_p = 1

        value = to_int32(self._seed_array[next_i] - self._seed_array[next_p])
        if value == MBIG:
            value -= 1
        if value < 0:
            value += MBIG

        self._seed_array[next_i] = value
        self._next = next_i
        self._next_p = next_p
        self.counter += 1
        return value

    def sample(self) -> float:
        """Float in [0, 1) with 31 bits of entropy: InternalSample() * (1.0 / MBIG)."""
        return self.internal_sample() * (1.0 / MBIG)

    def sample_large_range(self) -> float:
        """
        Float in [0, 1) with 32 bits of entropy, used for spans > int.MaxValue.

        Consumes two raw draws; the parity of the second picks the sign of the
        first.
        """
        result = self.internal_sample()
        if self.internal_sample() % 2 == 0:
            result = -result
        d = float(result)
        d += MBIG - 1
        d /= 2 * MBIG - 1
        return d

    # ============ PUBLIC DRAWS ============

    def next_i32(self) -> int:
        """Raw int in [0, int.MaxValue)."""
        return self.internal_sample()

    def next_double(self) -> float:
        """Float in [0, 1)."""
        return self.sample()

    def next_bool(self) -> bool:
        """Fair coin flip: NextDouble() < 0.5."""
        return self.sample() < 0.5

    def next_weighted_bool(self, chance: float) -> bool:
        """True with probability `chance`: NextDouble() < chance."""
        return self.sample() < chance

    def next_max(self, max_val: int) -> int:
        """Int in [0, max_val)."""
        return int(self.sample() * max_val)

    def next_range(self, min_val: int, max_val: int) -> int:
        """
        Int in [min_val, max_val).

        C#:
        ```
        long range = (long)maxValue - minValue;
        if (range <= (long)Int32.MaxValue)
            return ((int)(Sample() * range) + minValue);
        else
            return (int)((long)(GetSampleForLargeRange() * range) + minValue);
        ```
        """
        if min_val > max_val:
            raise ValueError(
                f"max_val ({max_val}) must be larger than min_val ({min_val})"
            )

        span = max_val - min_val
        if span <= MBIG:
            return int(self.sample() * span) + min_val
        return to_int32(int(self.sample_large_range() * span) + min_val)

    def choose_from(self, values: Sequence[T]) -> T:
        """Pick one element: values[Next(values.Count)]."""
        if not values:
            raise ValueError("Cannot choose from empty list")
        return values[self.next_max(len(values))]

    def skip(self, count: int) -> None:
        """Discard `count` doubles (the game's prewarm loops)."""
        for _ in range(count):
            self.next_double()

    def prewarm(self, low: int, high: int, rounds: int = 2) -> None:
        """
        Run the game's prewarm: `rounds` times draw n in [low, high) and
        discard n doubles.
        """
        for _ in range(rounds):
            self.skip(self.next_range(low, high))

    def copy(self) -> "Random":
        """Independent copy with identical state."""
        new = Random.__new__(Random)
        new._seed_array = list(self._seed_array)
        new._next = self._next
        new._next_p = self._next_p
        new.seed = self.seed
        new.counter = self.counter
        return new

    def peek(self, count: int) -> List[int]:
        """The next `count` raw values without advancing this generator."""
        clone = self.copy()
        return [clone.next_i32() for _ in range(count)]

    def __repr__(self) -> str:
        return f"Random(seed={self.seed}, counter={self.counter})"
