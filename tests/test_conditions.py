"""
Condition Tests

ConditionResult algebra, luck-adjusted rolls, and the registry dispatch.
"""

import pytest

from packages.valley.generation.conditions import (
    MAX_DAILY_LUCK_THRESHOLD,
    STATIC_FALSE,
    STATIC_TRUE,
    ConditionRegistry,
    ConditionResult,
    UnknownConditionError,
    daily_luck_bool,
    synced_day_random,
)
from packages.valley.state.game_state import PredictionGameState
from packages.valley.state.rng import Random
from packages.valley.state.seeds import HASHED_SEEDS, LEGACY_SEEDS, hash_string


def luck(value):
    return ConditionResult.with_daily_luck(value)


class TestConditionResultAnd:
    """AND-ing with bools and with other results."""

    def test_and_false_forces_static_false(self):
        assert luck(-0.05).and_(False) == STATIC_FALSE
        assert STATIC_TRUE.and_(False) == STATIC_FALSE

    def test_and_true_keeps_result(self):
        assert luck(-0.05).and_(True) == luck(-0.05)
        assert STATIC_FALSE.and_(True) == STATIC_FALSE

    def test_static_static(self):
        assert STATIC_TRUE.and_result(STATIC_TRUE) == STATIC_TRUE
        assert STATIC_TRUE.and_result(STATIC_FALSE) == STATIC_FALSE
        assert STATIC_FALSE.and_result(STATIC_TRUE) == STATIC_FALSE
        assert STATIC_FALSE.and_result(STATIC_FALSE) == STATIC_FALSE

    def test_static_true_yields_other(self):
        assert STATIC_TRUE.and_result(luck(0.03)) == luck(0.03)
        assert luck(0.03).and_result(STATIC_TRUE) == luck(0.03)

    def test_static_false_wins(self):
        assert STATIC_FALSE.and_result(luck(-0.5)) == STATIC_FALSE
        assert luck(-0.5).and_result(STATIC_FALSE) == STATIC_FALSE

    def test_luck_luck_takes_max(self):
        assert luck(-0.02).and_result(luck(0.04)) == luck(0.04)
        assert luck(0.04).and_result(luck(-0.02)) == luck(0.04)


class TestConditionResultTruth:
    """bool() and passes()."""

    def test_static_truth(self):
        assert bool(STATIC_TRUE)
        assert not bool(STATIC_FALSE)

    def test_luck_truth_threshold(self):
        assert bool(luck(0.1))
        assert bool(luck(-3.0))
        assert not bool(luck(MAX_DAILY_LUCK_THRESHOLD))
        assert not bool(luck(0.5))

    def test_passes_is_strict(self):
        assert luck(0.02).passes(0.03)
        assert not luck(0.02).passes(0.02)
        assert not luck(0.02).passes(-0.1)

    def test_passes_static(self):
        assert STATIC_TRUE.passes(-1.0)
        assert not STATIC_FALSE.passes(1.0)

    def test_is_static(self):
        assert STATIC_TRUE.is_static
        assert not luck(0.0).is_static

    def test_repr(self):
        assert repr(STATIC_TRUE) == "ConditionResult.static(True)"
        assert repr(luck(0.25)) == "ConditionResult.with_daily_luck(0.25)"


class TestDailyLuckBool:
    """Luck-adjusted rolls draw once and return roll - chance."""

    def test_threshold_is_roll_minus_chance(self):
        rng = Random(1234)
        expected = rng.copy().next_double() - 0.2
        result = daily_luck_bool(rng, 0.2)
        assert result == luck(expected)
        assert rng.counter == 1

    def test_passes_matches_direct_roll(self):
        for seed in range(30):
            roll = Random(seed).next_double()
            result = daily_luck_bool(Random(seed), 0.5)
            for daily_luck in (-0.1, 0.0, 0.1):
                assert result.passes(daily_luck) == (roll < 0.5 + daily_luck)


class TestSyncedDayRandom:
    """Shared per-day Random for a key."""

    @pytest.mark.parametrize("seeds", [LEGACY_SEEDS, HASHED_SEEDS], ids=["legacy", "hashed"])
    def test_seed(self, seeds):
        state = PredictionGameState(game_id=99, days_played=40)
        rng = synced_day_random(seeds, state, "location_weather")
        expected = seeds.create_random(hash_string("location_weather"), 99, 40)
        assert rng.peek(4) == expected.peek(4)


class TestConditionRegistry:
    """Decorator registration and dispatch."""

    def test_decorator_registers_all_strings(self):
        registry = ConditionRegistry("test")

        @registry.condition("A", "B")
        def always(x):
            return x + 1

        assert "A" in registry
        assert registry.has_condition("B")
        assert len(registry) == 2
        assert registry.list_conditions() == ["A", "B"]
        assert registry.evaluate("A", 1) == 2
        assert always(4) == 5

    def test_decorator_returns_function(self):
        registry = ConditionRegistry("test")

        def evaluator(x):
            return x

        assert registry.condition("A")(evaluator) is evaluator
        assert registry.get("A") is evaluator

    def test_duplicate(self):
        registry = ConditionRegistry("test")
        registry.register("A", lambda: True)
        with pytest.raises(ValueError, match="Duplicate"):
            registry.register("A", lambda: False)

    def test_unknown_condition(self):
        registry = ConditionRegistry("garbage")
        with pytest.raises(UnknownConditionError) as info:
            registry.get("RANDOM 0.5")
        assert isinstance(info.value, KeyError)
        assert info.value.registry == "garbage"
        assert info.value.condition == "RANDOM 0.5"
        assert str(info.value) == "Unknown garbage condition: 'RANDOM 0.5'"

    def test_require(self):
        registry = ConditionRegistry("test")
        registry.register("A", lambda: True)
        registry.require(None)
        registry.require("A")
        with pytest.raises(UnknownConditionError):
            registry.require("B")
