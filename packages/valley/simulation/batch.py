"""
Batch scanning - run many independent predictions in parallel.

Every prediction builds its own RNG from its inputs and only reads the
cached tables, so days, game ids or crack counts can be fanned out across
workers with no locking. Results are merged back into input order.

Usage:
    from functools import partial

    location = WeatherLocation.from_context(data.location_context("Default"))
    fn = partial(weather_on_day, location, state, HASHED_SEEDS)
    result = scan_days(fn, range(1, 113), BatchConfig(max_workers=8))

With use_processes=True the function and its bound arguments must be
picklable: use module-level functions and functools.partial, not lambdas.
"""

import logging
import time
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..generation.garbage import GarbageCan, GarbageCanLocation, GarbagePrediction, predict_all_garbage
from ..generation.night_events import NightEvent, predict_night_event
from ..generation.weather import WeatherLocation, WeatherPrediction, predict_weather
from ..state.game_state import PredictionGameState
from ..state.seeds import SeedGenerator

logger = logging.getLogger("SeedSearch")


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class BatchConfig:
    """Configuration for batch scanning."""

    max_workers: Optional[int] = None  # None = executor default
    use_processes: bool = False  # Processes for CPU-bound scans, threads otherwise
    chunk_size: int = 1000  # Tasks submitted per round, bounds pending futures
    report_interval: int = 10000  # Log progress every N completed tasks

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be >= 1, got {self.chunk_size}")


@dataclass
class BatchResult:
    """Result of a batch scan, in input order."""

    inputs: List[Any]
    results: List[Any]
    total_time_ms: float
    tasks_per_second: float

    @property
    def total_tasks(self) -> int:
        return len(self.inputs)

    def items(self) -> List[Tuple[Any, Any]]:
        """(input, result) pairs."""
        return list(zip(self.inputs, self.results))

    def matching(self, predicate: Callable[[Any], bool]) -> List[Any]:
        """Inputs whose result satisfies `predicate`."""
        return [i for i, r in zip(self.inputs, self.results) if predicate(r)]


@dataclass
class _Progress:
    total: int
    interval: int
    done: int = 0
    started: float = field(default_factory=time.perf_counter)

    def tick(self) -> None:
        self.done += 1
        if self.interval and self.done % self.interval == 0:
            elapsed = max(time.perf_counter() - self.started, 1e-9)
            logger.info(f"{self.done}/{self.total} predictions ({self.done / elapsed:.0f}/s)")


# =============================================================================
# Scanning
# =============================================================================

def _make_executor(config: BatchConfig) -> Executor:
    if config.use_processes:
        return ProcessPoolExecutor(max_workers=config.max_workers)
    return ThreadPoolExecutor(max_workers=config.max_workers)


def run_batch(fn: Callable[[Any], Any], inputs: Iterable[Any],
              config: Optional[BatchConfig] = None) -> BatchResult:
    """
    Apply `fn` to every input, one task per input.

    A worker exception propagates out of this call.
    """
    config = config or BatchConfig()
    inputs = list(inputs)
    results: List[Any] = [None] * len(inputs)
    progress = _Progress(total=len(inputs), interval=config.report_interval)

    start = time.perf_counter()
    if config.max_workers == 1:
        for index, value in enumerate(inputs):
            results[index] = fn(value)
            progress.tick()
    else:
        with _make_executor(config) as executor:
            for chunk_start in range(0, len(inputs), config.chunk_size):
                chunk = inputs[chunk_start:chunk_start + config.chunk_size]
                futures = {
                    executor.submit(fn, value): chunk_start + offset
                    for offset, value in enumerate(chunk)
                }
                for future in as_completed(futures):
                    results[futures[future]] = future.result()
                    progress.tick()
    elapsed = time.perf_counter() - start

    logger.debug(f"Batch of {len(inputs)} finished in {elapsed * 1000:.1f}ms")
    return BatchResult(
        inputs=inputs,
        results=results,
        total_time_ms=elapsed * 1000,
        tasks_per_second=len(inputs) / elapsed if elapsed > 0 else 0.0,
    )


def scan_days(fn: Callable[[int], Any], days: Iterable[int],
              config: Optional[BatchConfig] = None) -> BatchResult:
    """Run a per-day prediction for each day (days_played values)."""
    return run_batch(fn, days, config)


def scan_game_ids(fn: Callable[[int], Any], game_ids: Iterable[int],
                  config: Optional[BatchConfig] = None) -> BatchResult:
    """Run a per-save prediction for each candidate game id."""
    return run_batch(fn, game_ids, config)


def find_game_ids(predicate: Callable[[int], bool], game_ids: Iterable[int],
                  config: Optional[BatchConfig] = None) -> List[int]:
    """
    Seed search: the candidate game ids for which `predicate` holds.
    """
    result = scan_game_ids(predicate, game_ids, config)
    found = result.matching(bool)
    logger.info(f"Seed search: {len(found)}/{result.total_tasks} game ids match")
    return found



# =============================================================================
# Prediction tasks
# =============================================================================
#
# Module-level so they pickle; bind the leading arguments with partial().

def weather_on_day(location: WeatherLocation, state: PredictionGameState,
                   seeds: SeedGenerator, day: int) -> WeatherPrediction:
    return predict_weather(location, state.with_days_played(day), seeds)


def night_event_on_day(state: PredictionGameState, seeds: SeedGenerator,
                       day: int) -> NightEvent:
    """Tonight's event for a save on `day` (flags as given, not carried)."""
    return predict_night_event(state.with_days_played(day), seeds)


def garbage_on_day(cans: Dict[GarbageCanLocation, GarbageCan], state: PredictionGameState,
                   seeds: SeedGenerator, day: int) -> List[GarbagePrediction]:
    return predict_all_garbage(cans, state.with_days_played(day), seeds)


def night_event_for_game(state: PredictionGameState, seeds: SeedGenerator,
                         game_id: int) -> NightEvent:
    """Tonight's event for the same day in another save."""
    return predict_night_event(replace(state, game_id=game_id), seeds)
