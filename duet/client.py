from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from duet.adapters.http_adapter import HttpTransport
from duet.adapters.llm_base import ChatMessage, ChatTransport
from duet.adapters.openai_adapter import OpenAISdkTransport, is_official_host
from duet.config import Config
from duet.errors import ConfigError, DeepSeekError, ParseError
from duet.prompts import load_prompt
from duet.utils.cancel import CancelToken
from duet.utils.time import utc_now_rfc3339

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
INITIAL_BACKOFF_SECONDS = 0.5


@dataclass(frozen=True)
class ChatReply:
    title: str
    description: str
    content: str
    category: Optional[str] = None
    timestamp: Optional[str] = None
    confidence: Optional[float] = None

    @classmethod
    def from_json(cls, raw_text: str) -> "ChatReply":
        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise ParseError(f"Failed to parse JSON response from DeepSeek: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseError("Failed to parse JSON response from DeepSeek: expected an object")
        missing = [key for key in ("title", "description", "content") if not isinstance(data.get(key), str)]
        if missing:
            raise ParseError(
                f"Failed to parse JSON response from DeepSeek: missing fields {', '.join(missing)}"
            )
        confidence = data.get("confidence")
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            confidence = None
        return cls(
            title=data["title"],
            description=data["description"],
            content=data["content"],
            category=data.get("category") if isinstance(data.get("category"), str) else None,
            timestamp=data.get("timestamp") if isinstance(data.get("timestamp"), str) else None,
            confidence=float(confidence) if confidence is not None else None,
        )


def select_transport(config: Config) -> ChatTransport:
    """Pick the SDK strategy for the official host, direct HTTP otherwise.

    A failure to build the SDK client is logged and never surfaced.
    """
    if config.use_sdk and is_official_host(config.base_url):
        try:
            return OpenAISdkTransport(config)
        except Exception as exc:
            logger.warning(
                "Failed to initialize the OpenAI SDK client; falling back to internal HTTP: %s", exc
            )
    return HttpTransport(config)


class DeepSeekClient:
    def __init__(
        self,
        config: Config,
        *,
        transport: Optional[ChatTransport] = None,
        cancel: Optional[CancelToken] = None,
    ) -> None:
        try:
            config.validate()
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        self.config = config
        self.cancel = cancel or CancelToken()
        self.transport = transport or select_transport(config)
        logger.debug("DeepSeekClient ready: %r via %s transport", config, self.transport.name)

    @property
    def model(self) -> str:
        return self.config.model

    def send_messages_raw(self, messages: Sequence[ChatMessage]) -> str:
        """Send a chat turn sequence and return the raw first-choice content.

        No retry happens here; every classified failure goes straight to the caller.
        """
        if not messages:
            raise ValueError("messages must not be empty")
        if messages[-1].role != "user":
            raise ValueError("the last message must be the caller's user turn")
        return self.transport.complete(list(messages))

    def send_request_once(self, user_input: str) -> ChatReply:
        format_prompt = load_prompt("chat_format").replace("{timestamp}", utc_now_rfc3339())
        raw = self.send_messages_raw(
            [
                ChatMessage.system(load_prompt("chat_system")),
                ChatMessage.user(f"{user_input}\n\n{format_prompt}"),
            ]
        )
        return ChatReply.from_json(raw)

    def send_request(self, user_input: str) -> ChatReply:
        """Single-turn request with retry on ``ServerBusy`` and ``NetworkError``.

        At most ``MAX_ATTEMPTS`` attempts, backing off 0.5s, 1s, ... between
        them. Cancelling the token during a backoff re-raises the last failure.
        """
        attempts = 0
        backoff = INITIAL_BACKOFF_SECONDS
        while True:
            try:
                return self.send_request_once(user_input)
            except DeepSeekError as exc:
                if not exc.retryable or attempts >= MAX_ATTEMPTS - 1:
                    raise
                attempts += 1
                logger.warning(
                    "Request attempt %d failed: %s, retrying in %.1fs", attempts, exc, backoff
                )
                if self.cancel.wait(backoff):
                    logger.info("Retry cancelled during backoff")
                    raise
                backoff *= 2

    def close(self) -> None:
        self.transport.close()
