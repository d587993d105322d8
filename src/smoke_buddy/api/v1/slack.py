import os
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict, ValidationError
from slack_sdk.signature import SignatureVerifier

from smoke_buddy.clients.slack import SlackChannel, slack_client
from smoke_buddy.errors import StorageError
from smoke_buddy.handlers import BotContext, dispatch
from smoke_buddy.journal import log_error

router = APIRouter(prefix="/v1/slack", tags=["slack"])


class SlackEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = ""
    subtype: str | None = None
    bot_id: str | None = None
    channel: str | None = None
    user: str | None = None
    text: str = ""


class SlackEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    challenge: str | None = None
    event: SlackEvent | None = None


@lru_cache(maxsize=1)
def get_context() -> BotContext:
    return BotContext.from_env()


def get_channel_factory():
    return lambda channel_id: SlackChannel(slack_client(), channel_id)


def _verify(request: Request, body: bytes) -> None:
    secret = os.getenv("SLACK_SIGNING_SECRET")
    if not secret:
        return
    verifier = SignatureVerifier(signing_secret=secret)
    if not verifier.is_valid_request(body, dict(request.headers)):
        raise HTTPException(status_code=401, detail="invalid Slack signature")


def _is_user_message(event: SlackEvent) -> bool:
    return event.type == "message" and not event.subtype and not event.bot_id and bool(event.channel)


@router.post("/events")
async def events(
    request: Request,
    ctx: BotContext = Depends(get_context),
    channel_factory=Depends(get_channel_factory),
) -> dict[str, object]:
    body = await request.body()
    _verify(request, body)
    try:
        envelope = SlackEnvelope.model_validate_json(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail="malformed Slack payload") from e

    if envelope.type == "url_verification":
        return {"challenge": envelope.challenge or ""}
    # Slack redelivers when we are slow to ack; the first delivery already counted.
    if request.headers.get("x-slack-retry-num"):
        return {"ok": True, "handled": False}
    event = envelope.event
    if envelope.type != "event_callback" or event is None or not _is_user_message(event):
        return {"ok": True, "handled": False}

    try:
        sent = await dispatch(event.model_dump(), channel_factory(event.channel), ctx)
    except StorageError as e:
        log_error("slack_events", e)
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"ok": True, "handled": sent is not None}
