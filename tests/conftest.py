import datetime as dt

import pytest

from smoke_buddy.counter import RewardTier
from smoke_buddy.handlers import BotContext
from smoke_buddy.store import CounterRecord, JsonCounterStore

DAY = dt.date(2024, 5, 2)


class FixedDayContext(BotContext):
    day: dt.date = DAY

    def current_date(self) -> dt.date:
        return self.day


class RecordingChannel:
    def __init__(self):
        self.sent = []

    def send(self, messages):
        self.sent.extend(messages)

    @property
    def texts(self) -> list[str]:
        return [m.content for m in self.sent if m.kind == "text"]


class FirstChoice:
    """Deterministic stand-in for random.Random: always picks the first item."""

    def choice(self, seq):
        return seq[0]


REWARDS = [
    RewardTier(image="https://img.test/1.png", text="stage one"),
    RewardTier(image="https://img.test/2.png", text="stage two"),
    RewardTier(image="https://img.test/3.png", text="stage three"),
]


@pytest.fixture(autouse=True)
def _isolated_data_dir(tmp_path, monkeypatch):
    # keep data/log.jsonl writes out of the repo
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))


@pytest.fixture
def store(tmp_path):
    return JsonCounterStore(str(tmp_path / "counter.json"))


@pytest.fixture
def seed(store):
    def _seed(**fields) -> CounterRecord:
        record = CounterRecord(date=fields.pop("date", DAY.isoformat()), **fields)
        store.save(record)
        return record

    return _seed


@pytest.fixture
def ctx(store):
    return FixedDayContext(store=store, rewards=list(REWARDS), rng_factory=FirstChoice)


@pytest.fixture
def channel():
    return RecordingChannel()
