"""
Condition evaluation - closed-set dispatch for the host's condition strings.

Drop tables and weather rules carry game-state query strings such as
"PLAYER_STAT Current trashCansChecked 20, RANDOM .002". Only the strings that
actually appear in the data are supported. Each predictor owns a
ConditionRegistry mapping the exact string to an evaluator; an unregistered
string is an error, never a silent false, because a mis-evaluated condition
gives a wrong prediction that looks like a right one.

Evaluators are registered with a decorator:

    GARBAGE_CONDITIONS = ConditionRegistry("garbage")

    @GARBAGE_CONDITIONS.condition("RANDOM 0.2 @addDailyLuck")
    def random_with_luck(rng, state, seeds) -> ConditionResult:
        return daily_luck_bool(rng, 0.2)

Some conditions depend on the player's daily luck. Rather than needing the
luck value up front, those yield a ConditionResult holding the minimum luck
required, which can be folded with other results and compared at the end.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from ..state.rng import Random
from ..state.seeds import hash_string

if TYPE_CHECKING:
    from ..state.game_state import PredictionGameState
    from ..state.seeds import SeedGenerator


# Highest attainable daily luck is 0.1; the epsilon absorbs its float
# representation.
MAX_DAILY_LUCK_THRESHOLD = 0.100001


class UnknownConditionError(KeyError):
    """A condition string outside the closed set a predictor understands."""

    def __init__(self, registry: str, condition: str):
        super().__init__(f"Unknown {registry} condition: {condition!r}")
        self.registry = registry
        self.condition = condition

    def __str__(self) -> str:
        return self.args[0]


# ============================================================================
# CONDITION RESULT
# ============================================================================

@dataclass(frozen=True)
class ConditionResult:
    """
    Outcome of a condition: a fixed bool, or a minimum daily luck.

    A luck result with threshold t passes for a player whose daily luck is
    strictly greater than t. Exactly one of `value` / `min_luck` is set.
    """
    value: Optional[bool] = None
    min_luck: Optional[float] = None

    @classmethod
    def static(cls, value: bool) -> "ConditionResult":
        return cls(value=bool(value))

    @classmethod
    def with_daily_luck(cls, min_luck: float) -> "ConditionResult":
        return cls(min_luck=min_luck)

    @property
    def is_static(self) -> bool:
        return self.min_luck is None

    def and_(self, other: bool) -> "ConditionResult":
        """AND with a plain bool: false forces static false."""
        if not other:
            return STATIC_FALSE
        return self

    def and_result(self, other: "ConditionResult") -> "ConditionResult":
        """
        AND two results.

        static & static -> static AND
        static(True) & x -> x
        static(False) & x -> static(False)
        luck(a) & luck(b) -> luck(max(a, b))
        """
        if self.is_static:
            if other.is_static:
                return ConditionResult.static(self.value and other.value)
            return other if self.value else self
        if other.is_static:
            return self if other.value else STATIC_FALSE
        return ConditionResult.with_daily_luck(max(self.min_luck, other.min_luck))

    def passes(self, daily_luck: float) -> bool:
        """Final check against an actual daily luck value."""
        if self.is_static:
            return self.value
        return daily_luck > self.min_luck

    def __bool__(self) -> bool:
        # Luck results count as passing while some attainable luck can pass
        # them, so thresholds keep accumulating.
        if self.is_static:
            return self.value
        return self.min_luck < MAX_DAILY_LUCK_THRESHOLD

    def __repr__(self) -> str:
        if self.is_static:
            return f"ConditionResult.static({self.value})"
        return f"ConditionResult.with_daily_luck({self.min_luck})"


STATIC_TRUE = ConditionResult.static(True)
STATIC_FALSE = ConditionResult.static(False)


def daily_luck_bool(rng: Random, chance: float) -> ConditionResult:
    """
    Luck-adjusted roll: passes when roll < chance + daily_luck.

    Draws one double and returns the luck the player needs.
    """
    roll = rng.next_double()
    return ConditionResult.with_daily_luck(roll - chance)


def synced_day_random(seeds: "SeedGenerator", state: "PredictionGameState",
                      key: str) -> Random:
    """
    Random shared by all players for a key on the current day.

    Seeded from (hash(key), game_id, days_played). The key hash is the
    signed value; using the unsigned digest gives a different seed.
    """
    return seeds.create_random(hash_string(key), state.game_id, state.days_played)


# ============================================================================
# REGISTRY
# ============================================================================

class ConditionRegistry:
    """Dispatch table from exact condition strings to evaluators."""

    def __init__(self, name: str):
        self.name = name
        self._evaluators: Dict[str, Callable[..., Any]] = {}

    def register(self, condition: str, evaluator: Callable[..., Any]) -> None:
        """Register an evaluator for an exact condition string."""
        if condition in self._evaluators:
            raise ValueError(f"Duplicate {self.name} condition: {condition!r}")
        self._evaluators[condition] = evaluator

    def condition(self, *conditions: str):
        """
        Decorator registering an evaluator for one or more condition strings.

        Usage:
            @WEATHER_CONDITIONS.condition("SEASON_DAY Spring 3, YEAR 1")
            def first_week_rain(state, seeds) -> Optional[float]:
                ...
        """
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            for text in conditions:
                self.register(text, func)
            return func
        return decorator

    def get(self, condition: str) -> Callable[..., Any]:
        try:
            return self._evaluators[condition]
        except KeyError:
            raise UnknownConditionError(self.name, condition) from None

    def require(self, condition: Optional[str]) -> None:
        """Fail now if a table references a condition we can't evaluate."""
        if condition is not None:
            self.get(condition)

    def evaluate(self, condition: str, *args: Any) -> Any:
        """Run the evaluator for `condition` with predictor-specific args."""
        return self.get(condition)(*args)

    def has_condition(self, condition: str) -> bool:
        return condition in self._evaluators

    def list_conditions(self) -> List[str]:
        return list(self._evaluators.keys())

    def __len__(self) -> int:
        return len(self._evaluators)

    def __contains__(self, condition: object) -> bool:
        return condition in self._evaluators
