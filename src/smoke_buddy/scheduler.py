"""
Minute-tick scheduler for the daily jobs.

Runs every minute and checks which tasks are due in the bot time zone:
  reset    RESET_AT    (default 00:05)  roll the counter over
  summary  SUMMARY_AT  (default 23:50)  streak evaluation + reward push
  weather  WEATHER_AT  (default 07:30)  weather push, only if WEATHER_PUSH_ENABLED
"""

import asyncio
import datetime as dt
import threading
from collections.abc import Callable

from smoke_buddy import config
from smoke_buddy.clients.slack import SlackChannel
from smoke_buddy.handlers import BotContext, push_weather, reset_daily, summarize_day
from smoke_buddy.journal import log, log_error


def should_run_task(task: str, now: dt.datetime) -> bool:
    """Check if a task should run at the current (bot-local) time."""
    if task == "weather" and not config.env_flag("WEATHER_PUSH_ENABLED"):
        return False
    if task not in ("reset", "summary", "weather"):
        return False
    hour, minute = config.schedule_time(task)
    return now.hour == hour and now.minute == minute


def run_task_safe(task_name: str, task_func: Callable[[], object]) -> bool:
    """Run a task and log (never raise) its failure so later runs still fire."""
    try:
        log(f"Running task: {task_name}")
        task_func()
        log(f"Completed: {task_name}")
        return True
    except Exception as e:
        log_error(f"task:{task_name}", e)
        return False


def build_tasks(ctx: BotContext) -> dict[str, Callable[[], object]]:
    return {
        "reset": lambda: reset_daily(ctx),
        "summary": lambda: summarize_day(SlackChannel.from_env(), ctx),
        "weather": lambda: asyncio.run(push_weather(SlackChannel.from_env(), ctx)),
    }


def main_loop(ctx: BotContext, *, stop: threading.Event | None = None) -> None:
    """Check due tasks once a minute until `stop` is set."""
    stop = stop or threading.Event()
    tasks = build_tasks(ctx)
    last_run: dict[str, dt.datetime] = {}

    log("Scheduler started")
    while not stop.is_set():
        now = dt.datetime.now(ctx.tz)
        current_minute = now.replace(second=0, microsecond=0)

        for task_name, task_func in tasks.items():
            if should_run_task(task_name, now):
                # Only run once per minute
                if last_run.get(task_name) != current_minute:
                    last_run[task_name] = current_minute
                    thread = threading.Thread(
                        target=run_task_safe, args=(task_name, task_func), daemon=True
                    )
                    thread.start()

        # Wake just after the next minute boundary
        stop.wait(60 - now.second - now.microsecond / 1_000_000 + 0.5)


def start_scheduler(ctx: BotContext) -> threading.Thread:
    thread = threading.Thread(target=main_loop, args=(ctx,), daemon=True, name="scheduler")
    thread.start()
    return thread
