# Console lines and the data/log.jsonl event journal
import datetime as dt
import json
import os
import sys

from smoke_buddy.config import bot_tz, data_dir


def log(message: str, *, error: bool = False) -> None:
    stream = sys.stderr if error else sys.stdout
    print(f"[{dt.datetime.now(bot_tz())}] {message}", file=stream)


def log_event(event: dict[str, object]) -> None:
    """Append to data/log.jsonl; a failed write is printed, never raised."""
    event.setdefault("ts", dt.datetime.now(dt.timezone.utc).isoformat())
    try:
        path = os.path.join(data_dir(), "log.jsonl")
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")
    except OSError as e:
        log(f"Could not write event journal: {e}", error=True)


def log_error(where: str, err: BaseException) -> None:
    log(f"Error in {where}: {err}", error=True)
    log_event({"type": "error", "where": where, "error": str(err)})
