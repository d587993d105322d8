# Daily counter rules: rollover, adjustments, streak rewards
import datetime as dt
import json
from dataclasses import dataclass

from smoke_buddy.store import CounterRecord


@dataclass(frozen=True)
class RewardTier:
    image: str
    text: str


def load_rewards(path: str) -> list[RewardTier]:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    return [RewardTier(image=r["image"], text=r["text"]) for r in raw]


def apply_rollover_if_needed(record: CounterRecord, current_date: dt.date) -> CounterRecord:
    """Move today's count into yesterday when the stored date is stale.

    Safe to call any number of times per day: once the date matches it does nothing.
    """
    today = current_date.isoformat()
    if record.date != today:
        record.yesterday = record.today
        record.today = 0
        record.date = today
    return record


def adjust(record: CounterRecord, delta: int) -> CounterRecord:
    record.today = max(0, record.today + delta)
    return record


def reset_today(record: CounterRecord) -> CounterRecord:
    record.today = 0
    return record


def evaluate_day(
    record: CounterRecord, catalog: list[RewardTier]
) -> tuple[CounterRecord, RewardTier | None]:
    """Day-end check: fewer than yesterday extends the streak and earns a reward."""
    if record.today < record.yesterday:
        record.streak += 1
        if not catalog:
            return record, None
        stage = min(record.streak, len(catalog))
        return record, catalog[stage - 1]
    record.streak = 0
    return record, None
