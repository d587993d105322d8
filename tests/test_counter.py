import datetime as dt
import json

import pytest

from smoke_buddy.counter import (
    RewardTier,
    adjust,
    apply_rollover_if_needed,
    evaluate_day,
    load_rewards,
    reset_today,
)
from smoke_buddy.store import CounterRecord

from conftest import REWARDS


@pytest.mark.parametrize(
    "start, delta",
    [(0, 1), (3, 2), (3, -1), (3, -3), (3, -10), (0, -1), (5, 0), (21, 1000)],
)
def test_adjust_clamps_at_zero(start, delta):
    record = CounterRecord(date="2024-05-02", today=start)
    assert adjust(record, delta).today == max(0, start + delta)


def test_rollover_moves_today_into_yesterday():
    record = CounterRecord(date="2024-05-01", today=7, yesterday=9, streak=1)
    apply_rollover_if_needed(record, dt.date(2024, 5, 2))
    assert record == CounterRecord(date="2024-05-02", today=0, yesterday=7, streak=1)


def test_rollover_is_idempotent_within_a_day():
    once = apply_rollover_if_needed(
        CounterRecord(date="2024-05-01", today=4, yesterday=2), dt.date(2024, 5, 2)
    )
    snapshot = CounterRecord(**once.to_dict())
    twice = apply_rollover_if_needed(once, dt.date(2024, 5, 2))
    assert twice == snapshot


def test_rollover_same_day_is_noop():
    record = CounterRecord(date="2024-05-02", today=4, yesterday=2)
    apply_rollover_if_needed(record, dt.date(2024, 5, 2))
    assert (record.today, record.yesterday) == (4, 2)


def test_reset_today_keeps_yesterday_and_streak():
    record = reset_today(CounterRecord(date="2024-05-02", today=8, yesterday=6, streak=4))
    assert (record.today, record.yesterday, record.streak) == (0, 6, 4)


def test_evaluate_day_extends_streak_and_picks_tier():
    record = CounterRecord(date="2024-05-02", today=3, yesterday=5, streak=2)
    record, reward = evaluate_day(record, REWARDS)
    assert record.streak == 3
    assert reward == REWARDS[min(3, len(REWARDS)) - 1]


def test_evaluate_day_caps_at_last_tier():
    record = CounterRecord(date="2024-05-02", today=1, yesterday=2, streak=10)
    record, reward = evaluate_day(record, REWARDS)
    assert record.streak == 11
    assert reward == REWARDS[-1]


def test_evaluate_day_equal_counts_breaks_streak():
    record = CounterRecord(date="2024-05-02", today=5, yesterday=5, streak=4)
    record, reward = evaluate_day(record, REWARDS)
    assert record.streak == 0
    assert reward is None


def test_evaluate_day_empty_catalog_still_counts_streak():
    record = CounterRecord(date="2024-05-02", today=0, yesterday=1)
    record, reward = evaluate_day(record, [])
    assert record.streak == 1
    assert reward is None


def test_load_rewards_reads_ordered_catalog(tmp_path):
    path = tmp_path / "rewards.json"
    path.write_text(
        json.dumps([{"image": "a.png", "text": "A"}, {"image": "b.png", "text": "B"}]),
        encoding="utf-8",
    )
    assert load_rewards(str(path)) == [RewardTier("a.png", "A"), RewardTier("b.png", "B")]


def test_shipped_catalog_loads():
    from smoke_buddy.config import rewards_path

    catalog = load_rewards(rewards_path())
    assert len(catalog) >= 1
    assert all(tier.image.startswith("https://") and tier.text for tier in catalog)
