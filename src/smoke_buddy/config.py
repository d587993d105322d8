# Environment-driven settings for smoke-buddy
import datetime as dt
import os


def env_required(name: str) -> str:
    val = os.getenv(name)
    if not val:
        raise RuntimeError(f"Missing required env: {name}")
    return val


def env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def bot_tz() -> dt.timezone:
    # Asia/Taipei by default; no DST there, so a fixed offset is exact
    hours = float(os.getenv("TZ_OFFSET_HOURS", "8"))
    return dt.timezone(dt.timedelta(hours=hours))


def data_dir() -> str:
    override = os.getenv("DATA_DIR")
    if override:
        os.makedirs(override, exist_ok=True)
        return override
    root = os.path.dirname(os.path.abspath(__file__))
    # repo_root/data; from src/smoke_buddy that's ../../data
    path = os.path.abspath(os.path.join(root, "..", "..", "data"))
    os.makedirs(path, exist_ok=True)
    return path


def counter_path() -> str:
    return os.getenv("COUNTER_PATH") or os.path.join(data_dir(), "data.json")


def rewards_path() -> str:
    default = os.path.join(os.path.dirname(os.path.abspath(__file__)), "rewards.json")
    return os.getenv("REWARDS_PATH") or default


def parse_hhmm(value: str) -> tuple[int, int]:
    """Parse "HH:MM" into (hour, minute); raises ValueError on bad input."""
    hh, _, mm = value.strip().partition(":")
    hour, minute = int(hh), int(mm)
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hour, minute


def schedule_time(task: str) -> tuple[int, int]:
    defaults = {"reset": "00:05", "summary": "23:50", "weather": "07:30"}
    env_names = {"reset": "RESET_AT", "summary": "SUMMARY_AT", "weather": "WEATHER_AT"}
    return parse_hhmm(os.getenv(env_names[task], defaults[task]))
