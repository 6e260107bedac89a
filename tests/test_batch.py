"""
Batch Scanning Tests
"""

from functools import partial

import pytest

from packages.valley.content.game_data import GarbageCanData
from packages.valley.generation.garbage import build_garbage_cans, predict_all_garbage
from packages.valley.generation.night_events import NightEvent, predict_night_event
from packages.valley.generation.weather import WeatherLocation, predict_weather
from packages.valley.simulation.batch import (
    BatchConfig,
    find_game_ids,
    garbage_on_day,
    night_event_for_game,
    night_event_on_day,
    run_batch,
    scan_days,
    scan_game_ids,
    weather_on_day,
)
from packages.valley.state.game_state import PredictionGameState
from packages.valley.state.seeds import HASHED_SEEDS

from conftest import make_garbage_table


def square(x):
    return x * x


def fail_on_seven(x):
    if x == 7:
        raise RuntimeError("seven")
    return x


def is_even(game_id):
    return game_id % 2 == 0


class TestBatchConfig:
    """Validation."""

    def test_defaults(self):
        config = BatchConfig()
        assert config.max_workers is None
        assert not config.use_processes

    def test_bad_workers(self):
        with pytest.raises(ValueError):
            BatchConfig(max_workers=0)

    def test_bad_chunk_size(self):
        with pytest.raises(ValueError):
            BatchConfig(chunk_size=0)


class TestRunBatch:
    """Ordering, errors and the result object."""

    def test_threads_keep_order(self):
        result = run_batch(square, range(50), BatchConfig(max_workers=4, chunk_size=7))
        assert result.results == [x * x for x in range(50)]
        assert result.total_tasks == 50

    def test_inline(self):
        result = run_batch(square, [3, 1, 2], BatchConfig(max_workers=1))
        assert result.items() == [(3, 9), (1, 1), (2, 4)]

    def test_empty(self):
        result = run_batch(square, [])
        assert result.results == []
        assert result.total_tasks == 0

    def test_exception_propagates(self):
        with pytest.raises(RuntimeError, match="seven"):
            run_batch(fail_on_seven, range(10), BatchConfig(max_workers=2))

    def test_exception_propagates_inline(self):
        with pytest.raises(RuntimeError):
            run_batch(fail_on_seven, range(10), BatchConfig(max_workers=1))

    def test_matching(self):
        result = run_batch(square, range(6), BatchConfig(max_workers=2))
        assert result.matching(lambda r: r > 10) == [4, 5]


class TestScans:
    """Per-day and per-save prediction tasks."""

    def test_scan_days_weather(self, default_context, weather_state):
        location = WeatherLocation.from_context(default_context)
        fn = partial(weather_on_day, location, weather_state, HASHED_SEEDS)
        result = scan_days(fn, range(1, 60), BatchConfig(max_workers=4))
        for day, prediction in result.items():
            assert prediction == predict_weather(
                location, weather_state.with_days_played(day), HASHED_SEEDS)

    def test_scan_days_night_events(self, weather_state):
        fn = partial(night_event_on_day, weather_state, HASHED_SEEDS)
        result = scan_days(fn, range(0, 40), BatchConfig(max_workers=2))
        for day, event in result.items():
            assert event is predict_night_event(weather_state.with_days_played(day))

    def test_scan_days_garbage(self, fresh_state):
        data = GarbageCanData.from_dict(make_garbage_table(
            {"Museum": {"BaseChance": 5.0, "Items": [{"Id": "a", "ItemId": "(O)535"}]}},
        ))
        cans = build_garbage_cans(data, fresh_state)
        fn = partial(garbage_on_day, cans, fresh_state, HASHED_SEEDS)
        result = scan_days(fn, range(1, 10), BatchConfig(max_workers=1))
        for day, predictions in result.items():
            assert predictions == predict_all_garbage(cans, fresh_state.with_days_played(day))

    def test_scan_game_ids(self, weather_state):
        fn = partial(night_event_for_game, weather_state.with_days_played(30), HASHED_SEEDS)
        result = scan_game_ids(fn, range(100, 120), BatchConfig(max_workers=3))
        for game_id, event in result.items():
            state = PredictionGameState(game_id=game_id, days_played=30)
            assert event is predict_night_event(state)
            assert isinstance(event, NightEvent)

    def test_find_game_ids(self):
        assert find_game_ids(is_even, range(10), BatchConfig(max_workers=2)) == [0, 2, 4, 6, 8]
