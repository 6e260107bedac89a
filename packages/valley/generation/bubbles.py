"""
Fishing Bubble Prediction

Predicts where and when bubbling fishing spots appear on a map for a day.

Every ten in-game minutes from 6:10 to 25:50 the host reseeds from the day,
the time and the map width, then either tries to spawn a spot (when there is
none) or rolls to remove the current one:
- Spawn: coin flip, then up to two random tiles. A tile qualifies if it is
  open water, fishable, and 2-4 tiles from land. One extra draw on success.
- Despawn: 0.1 + minutes_alive / 1800, but only after 60 minutes.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from ..state.seeds import HASHED_SEEDS, SeedGenerator

logger = logging.getLogger("Bubbles")

FIRST_CHECK_TIME = 610
LAST_CHECK_TIME = 2600
CHECK_INTERVAL = 10

SPAWN_TRIES = 2
MIN_DISTANCE_TO_LAND = 1   # exclusive
MAX_DISTANCE_TO_LAND = 5   # exclusive
DESPAWN_BASE_CHANCE = 0.1
DESPAWN_MINUTES_SCALE = np.float32(1800)
MIN_SPOT_MINUTES = 60

# Widest search box used when looking for land; beyond it land is "far".
MAX_LAND_SEARCH_WIDTH = 11
FAR_FROM_LAND = 6

OPEN_WATER_SHEET = "outdoors"
OPEN_WATER_BUILDING_TILES = (628, 629, 734, 759)


class FishingMap(Protocol):
    """The tile queries bubble prediction needs from a map."""

    width: int
    height: int

    def is_water(self, x: int, y: int) -> bool:
        ...

    def has_no_fishing(self, x: int, y: int) -> bool:
        ...

    def building_tile(self, x: int, y: int) -> Optional[Tuple[str, int]]:
        """(tilesheet id, tile index) on the Buildings layer, if any."""
        ...


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class TimeSpan:
    """In-game clock times (e.g. 1350 for 1:50pm)."""
    start: int
    end: int


@dataclass(frozen=True)
class Bubbles:
    location: Point
    span: TimeSpan


class TileGridMap:
    """
    Simple FishingMap backed by rows of characters.

    '~' is water, 'x' is water marked NoFishing, anything else is land.
    Buildings tiles are given separately as {(x, y): (sheet, index)}.
    """

    WATER = "~"
    NO_FISHING = "x"

    def __init__(self, rows: Sequence[str],
                 buildings: Optional[Dict[Tuple[int, int], Tuple[str, int]]] = None):
        if not rows or len({len(r) for r in rows}) != 1:
            raise ValueError("rows must be non-empty and of equal length")
        self.rows = list(rows)
        self.width = len(rows[0])
        self.height = len(rows)
        self.buildings = dict(buildings or {})

    def is_water(self, x: int, y: int) -> bool:
        return self.rows[y][x] in (self.WATER, self.NO_FISHING)

    def has_no_fishing(self, x: int, y: int) -> bool:
        return self.rows[y][x] == self.NO_FISHING

    def building_tile(self, x: int, y: int) -> Optional[Tuple[str, int]]:
        return self.buildings.get((x, y))


# ============================================================================
# TIME
# ============================================================================

def time_to_minutes(time: int) -> int:
    return time // 100 * 60 + time % 100


def minutes_between(start: int, end: int) -> int:
    return time_to_minutes(end) - time_to_minutes(start)


def check_times() -> Iterator[int]:
    """Clock times at which the spot is updated (skips e.g. 670..690)."""
    for time in range(FIRST_CHECK_TIME, LAST_CHECK_TIME, CHECK_INTERVAL):
        if time % 100 < 60:
            yield time


# ============================================================================
# TILES
# ============================================================================

def in_bounds(fishing_map: FishingMap, x: int, y: int) -> bool:
    return 0 <= x < fishing_map.width and 0 <= y < fishing_map.height


def is_open_water(fishing_map: FishingMap, x: int, y: int) -> bool:
    """Water with no building tile, or only a water-like one from the outdoors sheet."""
    if not fishing_map.is_water(x, y):
        return False
    tile = fishing_map.building_tile(x, y)
    if tile is None:
        return True
    sheet, index = tile
    return sheet == OPEN_WATER_SHEET and index in OPEN_WATER_BUILDING_TILES


def _border_points(left: int, top: int, size: int) -> Iterator[Tuple[int, int]]:
    right = left + size - 1
    bottom = top + size - 1
    for x in range(left, right + 1):
        yield x, top
        yield x, bottom
    for y in range(top + 1, bottom):
        yield left, y
        yield right, y


def distance_to_land(fishing_map: FishingMap, x: int, y: int) -> int:
    """
    Distance from (x, y) to the nearest land tile.

    Grows a square around the tile one ring at a time. Off-map tiles don't
    count as land. Land found on the widest ring (or not at all) reads as
    FAR_FROM_LAND, matching the host's loop.
    """
    left, top, size = x - 1, y - 1, 3
    found_land = False
    distance = 1
    while not found_land and size <= MAX_LAND_SEARCH_WIDTH:
        for px, py in _border_points(left, top, size):
            if not in_bounds(fishing_map, px, py) or fishing_map.is_water(px, py):
                continue
            found_land = True
            distance = size // 2
            break
        left, top, size = left - 1, top - 1, size + 2

    if size > MAX_LAND_SEARCH_WIDTH:
        return FAR_FROM_LAND
    return distance - 1


# ============================================================================
# PREDICTION
# ============================================================================

def calculate_bubbles(fishing_map: FishingMap, days_played: int, game_id: int,
                      seeds: SeedGenerator = HASHED_SEEDS) -> List[Bubbles]:
    """All bubble spots for a day on one map, in order of appearance."""
    spot: Optional[Point] = None
    spot_time = 0
    bubbles = []

    for time in check_times():
        rng = seeds.create_day_save_random(days_played, game_id, time, fishing_map.width, 0)
        minutes_alive = minutes_between(spot_time, time)

        if spot is None:
            if not rng.next_bool():
                continue
            for _ in range(SPAWN_TRIES):
                x = rng.next_range(0, fishing_map.width)
                y = rng.next_range(0, fishing_map.height)
                if not is_open_water(fishing_map, x, y) or fishing_map.has_no_fishing(x, y):
                    continue
                to_land = distance_to_land(fishing_map, x, y)
                if to_land <= MIN_DISTANCE_TO_LAND or to_land >= MAX_DISTANCE_TO_LAND:
                    continue
                # Frenzy roll; frenzies are not modelled.
                rng.next_double()
                spot = Point(x, y)
                spot_time = time
                logger.debug(f"{time}: bubbles spawn at ({x}, {y})")
                break
        else:
            despawn_chance = DESPAWN_BASE_CHANCE + float(
                np.float32(minutes_alive) / DESPAWN_MINUTES_SCALE)
            if rng.next_double() < despawn_chance and minutes_alive > MIN_SPOT_MINUTES:
                bubbles.append(Bubbles(spot, TimeSpan(spot_time, time)))
                logger.debug(f"{time}: bubbles at ({spot.x}, {spot.y}) end")
                spot = None
                spot_time = 0

    return bubbles
