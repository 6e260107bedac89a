"""
Simulation module - Parallel day and seed scanning.
"""

from .batch import (
    BatchConfig,
    BatchResult,
    run_batch,
    scan_days,
    scan_game_ids,
    find_game_ids,
    weather_on_day,
    night_event_on_day,
    garbage_on_day,
    night_event_for_game,
)

__all__ = [
    "BatchConfig",
    "BatchResult",
    "run_batch",
    "scan_days",
    "scan_game_ids",
    "find_game_ids",
    "weather_on_day",
    "night_event_on_day",
    "garbage_on_day",
    "night_event_for_game",
]
