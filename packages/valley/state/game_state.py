"""
Prediction game state - the save facts every predictor reads.

A PredictionGameState is an immutable snapshot supplied fresh for each
prediction. Predictors never mutate it; the few once-per-save flags the night
events set are applied by the caller (see generation.night_events).

Calendar: 28-day months, 4 seasons per year, days_played starts at 1.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Dict, Tuple

from .rng import Random

if TYPE_CHECKING:
    from .seeds import SeedGenerator


DAYS_PER_SEASON = 28
SEASONS_PER_YEAR = 4
DAYS_PER_YEAR = DAYS_PER_SEASON * SEASONS_PER_YEAR


class Season(Enum):
    """The four seasons, in calendar order."""
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"

    @classmethod
    def from_index(cls, index: int) -> "Season":
        return _SEASON_ORDER[index % SEASONS_PER_YEAR]

    @classmethod
    def parse(cls, name: str) -> "Season":
        """Parse a case-insensitive season name ("Spring", "fall", ...)."""
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown season: {name!r}") from None


_SEASON_ORDER: Tuple[Season, ...] = (
    Season.SPRING,
    Season.SUMMER,
    Season.FALL,
    Season.WINTER,
)

# Scripted festival days, which always have festival weather.
FESTIVAL_DAYS: Dict[Season, Tuple[int, ...]] = {
    Season.SPRING: (13, 24),
    Season.SUMMER: (11, 28),
    Season.FALL: (16, 27),
    Season.WINTER: (8, 25),
}


@dataclass(frozen=True)
class PredictionGameState:
    """
    Save-derived facts relevant to the predictors.

    Fields default to a fresh save so tests and callers only need to set the
    facts a given predictor reads.
    """

    game_id: int = 0
    days_played: int = 1
    daily_luck: float = 0.0

    # Geodes
    multiplayer_id: int = 0
    geodes_cracked: int = 0
    deepest_mine_level: int = 0
    has_golden_coconut_hat_mail: bool = False

    # Garbage cans
    has_trash_book: bool = False
    trash_cans_checked: int = 0
    qi_beans_quest_active: bool = False
    has_cc_movie_theater_mail: bool = False
    has_cc_movie_theater_joja_mail: bool = False
    seen_event_191393: bool = False

    # Night events (raccoon stump and capsule are once per save)
    cc_pantry_complete: bool = False
    raccoon_tree_fallen: bool = False
    has_fairy_rose: bool = False
    has_mail_got_capsule: bool = False

    # ============ CALENDAR ============

    def year(self) -> int:
        return (self.days_played - 1) // DAYS_PER_YEAR + 1

    def season(self) -> Season:
        return Season.from_index((self.days_played - 1) // DAYS_PER_SEASON)

    def day_of_month(self) -> int:
        return (self.days_played - 1) % DAYS_PER_SEASON + 1

    def is_season(self, season: Season) -> bool:
        return self.season() is season

    def is_day_of_month(self, day: int) -> bool:
        return self.day_of_month() == day

    def is_season_day(self, season: Season, day: int) -> bool:
        return self.is_season(season) and self.is_day_of_month(day)

    def is_year(self, year: int) -> bool:
        return self.year() == year

    def is_festival_day(self) -> bool:
        return self.day_of_month() in FESTIVAL_DAYS[self.season()]

    # ============ DERIVED STATES ============

    def previous_day(self) -> "PredictionGameState":
        """Same save, one day earlier (weather conditions read this)."""
        return replace(self, days_played=self.days_played - 1)

    def next_day(self) -> "PredictionGameState":
        """Same save, one day later (night events read this)."""
        return replace(self, days_played=self.days_played + 1)

    def with_days_played(self, days_played: int) -> "PredictionGameState":
        return replace(self, days_played=days_played)

    def create_day_save_random(self, seeds: "SeedGenerator", a: float = 0.0,
                               b: float = 0.0, c: float = 0.0) -> Random:
        """Random seeded from (days_played, game_id / 2, a, b, c)."""
        return seeds.create_day_save_random(self.days_played, self.game_id, a, b, c)

    def describe_date(self) -> str:
        """Human readable date, e.g. "Y1 Spring 3"."""
        return f"Y{self.year()} {self.season().value.capitalize()} {self.day_of_month()}"
