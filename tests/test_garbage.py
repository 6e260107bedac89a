"""
Garbage Can Prediction Tests

Base chance math, luck thresholds and item fall-through.
"""

from dataclasses import replace

import numpy as np
import pytest

from packages.valley.content.game_data import GarbageCanData
from packages.valley.content.items import DataError, ItemId
from packages.valley.generation.conditions import (
    UnknownConditionError,
    daily_luck_bool,
    synced_day_random,
)
from packages.valley.generation.garbage import (
    GarbageCan,
    GarbageCanLocation,
    build_garbage_cans,
    predict_all_garbage,
    predict_garbage,
)
from packages.valley.state.rng import to_int32
from packages.valley.state.seeds import HASHED_SEEDS, LEGACY_SEEDS, hash_string

from conftest import GARBAGE_GAME_ID, make_garbage_table


MUSEUM = GarbageCanLocation.MUSEUM
QI_CONDITION = "PLAYER_SPECIAL_ORDER_RULE_ACTIVE Current DROP_QI_BEANS, RANDOM 0.25"


def build_can(cans, state, location=MUSEUM, **table_kwargs):
    data = GarbageCanData.from_dict(make_garbage_table(cans, **table_kwargs))
    return GarbageCan.build(location, data, state)


def museum(base_chance, items):
    return {"Museum": {"BaseChance": base_chance, "Items": items}}


class TestGarbageCanTable:
    """Building the cached table."""

    def test_hashed_id(self, fresh_state):
        can = build_can(museum(0.3, []), fresh_state)
        assert can.hashed_id == to_int32(777 + hash_string("Museum"))

    def test_own_base_chance(self, fresh_state):
        can = build_can(museum(0.3, []), fresh_state)
        assert can.base_chance == float(np.float32(0.3))

    def test_default_base_chance(self, fresh_state):
        can = build_can(museum(-1, []), fresh_state, default_base_chance=0.15)
        assert can.base_chance == float(np.float32(0.15))

    def test_trash_book_in_single_precision(self, fresh_state):
        reader = replace(fresh_state, has_trash_book=True)
        can = build_can(museum(0.1, []), reader)
        assert can.base_chance == float(np.float32(0.1) + np.float32(0.2))
        assert can.base_chance != 0.1 + 0.2

    def test_item_order(self, fresh_state):
        can = build_can(
            museum(0.3, [{"Id": "mid", "ItemId": "(O)2"}]),
            fresh_state,
            before_all=[{"Id": "first", "ItemId": "(O)1"}],
            after_all=[{"Id": "last", "ItemId": "(O)3"}],
        )
        assert [i.drop.item.key for i in can.items] == ["1", "2", "3"]

    def test_missing_can(self, fresh_state):
        data = GarbageCanData.from_dict({"GarbageCans": {}})
        with pytest.raises(DataError, match=r"GarbageCans\['Museum'\]"):
            GarbageCan.build(MUSEUM, data, fresh_state)

    def test_unknown_condition(self, fresh_state):
        with pytest.raises(UnknownConditionError):
            build_can(museum(0.3, [{"Id": "a", "ItemId": "(O)1", "Condition": "RANDOM 0.5"}]),
                      fresh_state)

    def test_build_all(self, fresh_state):
        data = GarbageCanData.from_dict(make_garbage_table({}))
        cans = build_garbage_cans(data, fresh_state)
        assert list(cans) == list(GarbageCanLocation)


class TestPredictGarbage:
    """Walking a can's items."""

    def test_certain_base_reports_threshold(self, fresh_state):
        can = build_can(museum(5.0, [{"Id": "a", "ItemId": "(O)535"}]), fresh_state)
        for day in range(1, 30):
            state = fresh_state.with_days_played(day)
            prediction = predict_garbage(can, state)
            assert prediction is not None
            assert prediction.reward.item == ItemId.object("535")
            assert -5.0 <= prediction.min_daily_luck < -4.0

            rng = HASHED_SEEDS.create_day_save_random(day, GARBAGE_GAME_ID, can.hashed_id)
            rng.prewarm(0, 100)
            assert prediction.min_daily_luck == rng.next_double() - can.base_chance

    def test_impossible_base(self, fresh_state):
        can = build_can(museum(-1, [{"Id": "a", "ItemId": "(O)535"}]), fresh_state,
                        default_base_chance=-5.0)
        for day in range(1, 30):
            assert predict_garbage(can, fresh_state.with_days_played(day)) is None

    def test_ignore_base_chance(self, fresh_state):
        items = [{"Id": "a", "ItemId": "(O)535", "IgnoreBaseChance": True}]
        can = build_can(museum(-1, items), fresh_state, default_base_chance=-5.0)
        lucky = replace(fresh_state, daily_luck=10.0)
        prediction = predict_garbage(can, lucky)
        assert prediction is not None
        assert prediction.min_daily_luck >= 5.0
        assert predict_garbage(can, fresh_state) is None

    def test_ignore_base_chance_flag_required(self, fresh_state):
        can = build_can(museum(-1, [{"Id": "a", "ItemId": "(O)535"}]), fresh_state,
                        default_base_chance=-5.0)
        assert predict_garbage(can, replace(fresh_state, daily_luck=10.0)) is None

    def test_inactive_qi_falls_through(self, fresh_state):
        items = [
            {"Id": "qi", "ItemId": "(O)890", "Condition": QI_CONDITION},
            {"Id": "plain", "ItemId": "(O)535"},
        ]
        can = build_can(museum(5.0, items), fresh_state)
        for day in range(1, 20):
            prediction = predict_garbage(can, fresh_state.with_days_played(day))
            assert prediction.reward.item == ItemId.object("535")

    def test_failed_static_condition(self, fresh_state):
        items = [{"Id": "a", "ItemId": "(O)535", "IgnoreBaseChance": True,
                  "Condition": "PLAYER_STAT Current trashCansChecked 20, RANDOM .002"}]
        can = build_can(museum(-1, items), fresh_state, default_base_chance=-5.0)
        assert predict_garbage(can, replace(fresh_state, trash_cans_checked=0)) is None

    def test_stack_size(self, fresh_state):
        items = [{"Id": "a", "ItemId": "(O)535", "MinStack": 2, "MaxStack": 3}]
        can = build_can(museum(5.0, items), fresh_state)
        for day in range(1, 20):
            quantity = predict_garbage(can, fresh_state.with_days_played(day)).reward.quantity
            assert quantity in (2, 3)

    def test_deterministic(self, fresh_state):
        can = build_can(museum(0.5, [{"Id": "a", "ItemId": "(O)535"}]), fresh_state)
        for day in range(1, 20):
            state = fresh_state.with_days_played(day)
            assert predict_garbage(can, state) == predict_garbage(can, state)

    def test_seed_strategy_matters(self, fresh_state):
        can = build_can(museum(5.0, [{"Id": "a", "ItemId": "(O)535"}]), fresh_state)
        hashed = [predict_garbage(can, fresh_state.with_days_played(d), HASHED_SEEDS)
                  for d in range(1, 10)]
        legacy = [predict_garbage(can, fresh_state.with_days_played(d), LEGACY_SEEDS)
                  for d in range(1, 10)]
        assert hashed != legacy


class TestSyncedConditions:
    """Conditions shared across the whole town for a day."""

    def test_museum_geode_luck(self, fresh_state):
        items = [{"Id": "geode", "ItemId": "(O)535",
                  "Condition": "SYNCED_RANDOM day garbage_museum_535 0.2 @addDailyLuck"}]
        can = build_can(museum(5.0, items), replace(fresh_state, daily_luck=10.0))
        for day in range(1, 20):
            state = replace(fresh_state, days_played=day, daily_luck=10.0)
            prediction = predict_garbage(can, state)
            assert prediction is not None
            # Folded with the base roll, so at least as strict as either.
            assert prediction.min_daily_luck >= -0.2

    def test_joja_needs_mail(self, fresh_state):
        condition = ("SYNCED_RANDOM day garbage_joja 0.2, "
                     "PLAYER_HAS_MAIL Host ccMovieTheater, "
                     "!PLAYER_HAS_MAIL Host ccMovieTheaterJoja")
        items = [{"Id": "joja", "ItemId": "(O)167", "Condition": condition}]
        cans = {"JojaMart": {"BaseChance": 5.0, "Items": items}}
        can = build_can(cans, fresh_state, location=GarbageCanLocation.JOJA_MART)
        for day in range(1, 40):
            assert predict_garbage(can, fresh_state.with_days_played(day)) is None

        with_mail = replace(fresh_state, has_cc_movie_theater_mail=True)
        hits = [predict_garbage(can, with_mail.with_days_played(day)) for day in range(1, 80)]
        assert any(hits)


class TestPredictAllGarbage:
    """Every can at once."""

    def test_only_cans_with_rewards(self, fresh_state):
        data = GarbageCanData.from_dict(make_garbage_table(
            museum(5.0, [{"Id": "a", "ItemId": "(O)535"}]),
            default_base_chance=-5.0,
        ))
        cans = build_garbage_cans(data, fresh_state)
        predictions = predict_all_garbage(cans, fresh_state)
        assert [p.location for p in predictions] == [MUSEUM]


# (day, can) -> minimum luck for the base roll, recorded from the game.
RECORDED_BASE_THRESHOLDS = {
    (1, GarbageCanLocation.JODI_AND_KENT): -0.004689127581514935,
    (1, GarbageCanLocation.SALOON): -0.09639927181247587,
    (2, GarbageCanLocation.EMILY_AND_HALEY): 0.01593356915560251,
    (2, GarbageCanLocation.BLACKSMITH): 0.06764924492111862,
    (3, GarbageCanLocation.EMILY_AND_HALEY): -0.09772658250188761,
    (4, GarbageCanLocation.JODI_AND_KENT): 0.04146529512548133,
    (4, GarbageCanLocation.MAYOR): 0.05827249505476678,
}


class TestRecordedDays:
    """Luck thresholds for a known save's first days."""

    @pytest.mark.parametrize(
        "day,location,expected",
        [(day, location, luck) for (day, location), luck in RECORDED_BASE_THRESHOLDS.items()],
    )
    def test_base_threshold(self, fresh_state, day, location, expected):
        cans = {location.value: {"BaseChance": -1, "Items": [{"Id": "a", "ItemId": "(O)168"}]}}
        can = build_can(cans, fresh_state, location=location, default_base_chance=0.2)
        lucky = replace(fresh_state, days_played=day, daily_luck=1.0)
        prediction = predict_garbage(can, lucky, HASHED_SEEDS)
        assert prediction is not None
        assert prediction.min_daily_luck == expected

    def test_museum_synced_threshold(self, fresh_state):
        rng = synced_day_random(HASHED_SEEDS, fresh_state, "garbage_museum_535")
        assert daily_luck_bool(rng, 0.2).min_luck == -0.05895514341953917
