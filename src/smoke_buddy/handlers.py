"""
Message handlers and scheduled jobs.

Every handler does one load -> rollover -> mutate -> save cycle against the
injected store, replies through the channel it was given and returns the
messages it sent.

    +3 / -1 / /+2        -> handle_adjust
    /查詢, /重設, ...     -> handle_command
    anything else        -> handle_interaction
"""

import datetime as dt
import random
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Literal

from fastapi.concurrency import run_in_threadpool

from smoke_buddy import config
from smoke_buddy.clients.slack import Message, ReplyChannel
from smoke_buddy.clients.weather import Weather, fetch_weather
from smoke_buddy.counter import (
    RewardTier,
    adjust,
    apply_rollover_if_needed,
    evaluate_day,
    load_rewards,
    reset_today,
)
from smoke_buddy.errors import ExternalFetchError
from smoke_buddy.journal import log, log_error, log_event
from smoke_buddy.reactions import (
    WEATHER_FAILED,
    Chooser,
    compose_count_response,
    compose_interaction_response,
    compose_weather_report,
)
from smoke_buddy.store import CounterRecord, CounterStore, JsonCounterStore

ADJUST_RE = re.compile(r"^/?[+-]\d+$")

INVALID_COMMAND = "無效指令。"
RESET_DONE = "今日紀錄已重設為 0。"

HELP_TEXT = "\n".join(
    [
        "可用指令：",
        "+1 或 +n：增加今日抽菸數",
        "-1 或 -n：減少今日抽菸數",
        "/查詢 或 /查詢今日：查看今日與昨日抽菸數以及連續減量天數",
        "/查詢昨日：查看昨日抽菸數",
        "/重設：重設今日計數為 0",
        "/說明：顯示這段說明",
        "/天氣 或 /weather：查詢台北市今日氣象",
        "其他訊息將視為對悠悠的互動，牠會以可愛的動作回應喔",
    ]
)


@dataclass
class BotContext:
    store: CounterStore
    rewards: list[RewardTier] = field(default_factory=list)
    weather: Callable[[], Awaitable[Weather]] = fetch_weather
    rng_factory: Callable[[], Chooser] = random.Random
    tz: dt.tzinfo = dt.timezone.utc

    @classmethod
    def from_env(cls) -> "BotContext":
        tz = config.bot_tz()
        return cls(
            store=JsonCounterStore(config.counter_path(), tz=tz),
            rewards=load_rewards(config.rewards_path()),
            tz=tz,
        )

    def current_date(self) -> dt.date:
        return dt.datetime.now(self.tz).date()


def parse_message(text: str) -> tuple[Literal["adjust", "command", "interaction", "empty"], object]:
    """Split an inbound text into (kind, payload)."""
    msg = text.strip()
    if not msg:
        return "empty", None
    if ADJUST_RE.match(msg):
        return "adjust", int(msg.lstrip("/"))
    if msg.startswith("/"):
        return "command", msg
    return "interaction", msg


def _load_current(ctx: BotContext) -> CounterRecord:
    """Load the record and persist a lazy rollover if the day changed."""
    record = ctx.store.load()
    before = record.date
    apply_rollover_if_needed(record, ctx.current_date())
    if record.date != before:
        ctx.store.save(record)
    return record


def _reply(channel: ReplyChannel, *texts: str) -> list[Message]:
    messages = [Message.text(t) for t in texts]
    channel.send(messages)
    return messages


# ---- Handlers ----


def handle_adjust(event: dict, channel: ReplyChannel, amount: int, ctx: BotContext) -> list[Message]:
    record = _load_current(ctx)
    adjust(record, amount)
    ctx.store.save(record)
    log_event({"type": "adjust", "amount": amount, "today": record.today, "user": event.get("user")})
    return _reply(channel, compose_count_response(record))


async def weather_report(ctx: BotContext) -> str:
    try:
        weather = await ctx.weather()
    except ExternalFetchError as e:
        log_error("weather", e)
        return WEATHER_FAILED
    return compose_weather_report(weather, ctx.rng_factory())


async def handle_command(
    event: dict, channel: ReplyChannel, command: str, ctx: BotContext
) -> list[Message]:
    command = command.strip()
    if command == "/天氣" or command.lower() == "/weather":
        await run_in_threadpool(_load_current, ctx)
        text = await weather_report(ctx)
        return await run_in_threadpool(_reply, channel, text)
    return await run_in_threadpool(_run_command, event, channel, command, ctx)


def _run_command(event: dict, channel: ReplyChannel, command: str, ctx: BotContext) -> list[Message]:
    record = _load_current(ctx)
    if command in ("/查詢", "/查詢今日"):
        return _reply(
            channel,
            f"今日已抽 {record.today} 支，昨日 {record.yesterday} 支，連續減量天數：{record.streak} 天。",
        )
    if command == "/查詢昨日":
        return _reply(channel, f"昨日抽了 {record.yesterday} 支。")
    if command == "/重設":
        reset_today(record)
        ctx.store.save(record)
        log_event({"type": "reset_today", "user": event.get("user")})
        return _reply(channel, RESET_DONE)
    if command == "/說明":
        return _reply(channel, HELP_TEXT)
    return _reply(channel, INVALID_COMMAND)


def handle_interaction(
    event: dict, channel: ReplyChannel, message: str, ctx: BotContext
) -> list[Message]:
    _load_current(ctx)
    return _reply(channel, compose_interaction_response(message, ctx.rng_factory()))


async def dispatch(event: dict, channel: ReplyChannel, ctx: BotContext) -> list[Message] | None:
    """Route one inbound text event; None when there was nothing to answer.

    Store and channel calls block, so they run in the threadpool and keep
    the event loop free.
    """
    kind, payload = parse_message(event.get("text") or "")
    if kind == "adjust":
        return await run_in_threadpool(handle_adjust, event, channel, payload, ctx)
    if kind == "command":
        return await handle_command(event, channel, payload, ctx)
    if kind == "interaction":
        return await run_in_threadpool(handle_interaction, event, channel, payload, ctx)
    return None


# ---- Scheduled jobs ----


def reset_daily(ctx: BotContext) -> CounterRecord:
    """Roll the counter over for the current date; a no-op if already rolled."""
    record = _load_current(ctx)
    log(f"Daily reset done ({record.date}: yesterday={record.yesterday})")
    return record


def summarize_day(channel: ReplyChannel, ctx: BotContext) -> list[Message]:
    """Evaluate and push the day-end summary at most once per date."""
    record = _load_current(ctx)
    if record.last_summary == record.date:
        log(f"Day summary for {record.date} already sent, skipping")
        return []
    record, reward = evaluate_day(record, ctx.rewards)
    record.last_summary = record.date
    ctx.store.save(record)

    messages = [
        Message.text(
            f"今日抽 {record.today} 支，昨日 {record.yesterday} 支，連續減量：{record.streak} 天。"
        )
    ]
    if reward:
        messages.append(Message.image(reward.image, alt_text=f"streak {record.streak}"))
        messages.append(Message.text(reward.text))
    channel.send(messages)
    log_event({"type": "summary", **record.to_dict(), "rewarded": reward is not None})
    log("Day summary sent")
    return messages


async def push_weather(channel: ReplyChannel, ctx: BotContext) -> list[Message]:
    text = await weather_report(ctx)
    return await run_in_threadpool(_reply, channel, text)
