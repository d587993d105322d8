from dataclasses import dataclass
from typing import Literal, Protocol

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

from smoke_buddy.config import env_required


@dataclass(frozen=True)
class Message:
    kind: Literal["text", "image"]
    content: str
    alt_text: str = ""

    @classmethod
    def text(cls, content: str) -> "Message":
        return cls(kind="text", content=content)

    @classmethod
    def image(cls, url: str, alt_text: str = "reward") -> "Message":
        return cls(kind="image", content=url, alt_text=alt_text)


class ReplyChannel(Protocol):
    def send(self, messages: list[Message]) -> None: ...


def slack_client() -> WebClient:
    return WebClient(token=env_required("SLACK_BOT_TOKEN"))


class SlackChannel:
    """Posts messages into one Slack conversation."""

    def __init__(self, client: WebClient, channel_id: str):
        self.client = client
        self.channel_id = channel_id

    @classmethod
    def from_env(cls, channel_env: str = "SLACK_CHANNEL_ID") -> "SlackChannel":
        return cls(slack_client(), env_required(channel_env))

    def send(self, messages: list[Message]) -> None:
        for msg in messages:
            self._post(msg)

    def _post(self, msg: Message) -> str:
        kwargs: dict[str, object] = {"channel": self.channel_id}
        if msg.kind == "image":
            kwargs["text"] = msg.alt_text
            kwargs["blocks"] = [
                {"type": "image", "image_url": msg.content, "alt_text": msg.alt_text}
            ]
        else:
            kwargs["text"] = msg.content
        try:
            resp = self.client.chat_postMessage(**kwargs)
            return resp["ts"]
        except SlackApiError as e:
            raise RuntimeError(f"Slack post failed: {e.response['error']}") from e
