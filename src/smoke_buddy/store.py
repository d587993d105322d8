"""
Counter persistence.

One JSON document holds the whole state of the bot:

    {"date": "2024-05-01", "today": 3, "yesterday": 5, "streak": 2}

`last_summary` is added once the day-end summary has run for `date`.

It is overwritten wholesale on every save. There is no locking; concurrent
requests race and the last write wins.
"""

import datetime as dt
import json
import os
import tempfile
from dataclasses import asdict, dataclass
from typing import Protocol

from smoke_buddy.errors import StorageError


@dataclass
class CounterRecord:
    date: str
    today: int = 0
    yesterday: int = 0
    streak: int = 0
    last_summary: str | None = None

    @classmethod
    def fresh(cls, day: dt.date) -> "CounterRecord":
        return cls(date=day.isoformat())

    @classmethod
    def from_dict(cls, raw: dict) -> "CounterRecord":
        try:
            date = raw["date"]
            counts = {k: raw[k] for k in ("today", "yesterday", "streak")}
        except (KeyError, TypeError) as e:
            raise StorageError(f"Counter record is missing a field: {e}") from e
        if not isinstance(date, str):
            raise StorageError(f"Counter record has a non-string date: {date!r}")
        for key, val in counts.items():
            # bool is an int subclass; reject it explicitly
            if not isinstance(val, int) or isinstance(val, bool) or val < 0:
                raise StorageError(f"Counter field {key} must be a non-negative int, got {val!r}")
        last_summary = raw.get("last_summary")
        if last_summary is not None and not isinstance(last_summary, str):
            raise StorageError(f"Counter record has a non-string last_summary: {last_summary!r}")
        return cls(date=date, **counts, last_summary=last_summary)

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        if data["last_summary"] is None:
            del data["last_summary"]
        return data


class CounterStore(Protocol):
    def load(self) -> CounterRecord: ...

    def save(self, record: CounterRecord) -> None: ...


class JsonCounterStore:
    """File-backed store; creates a default record on first load."""

    def __init__(self, path: str, *, tz: dt.tzinfo = dt.timezone.utc):
        self.path = path
        self.tz = tz

    def load(self) -> CounterRecord:
        if not os.path.exists(self.path):
            record = CounterRecord.fresh(dt.datetime.now(self.tz).date())
            self.save(record)
            return record
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageError(f"Could not read counter file {self.path}: {e}") from e
        return CounterRecord.from_dict(raw)

    def save(self, record: CounterRecord) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".data-", suffix=".json", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record.to_dict(), f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Could not write counter file {self.path}: {e}") from e
