from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from openai import APIConnectionError, APIError, APIStatusError, APITimeoutError, OpenAI

from duet.adapters.http_adapter import classify_status
from duet.adapters.llm_base import ChatMessage, serialize_messages
from duet.config import Config
from duet.errors import DeepSeekError, NetworkError, ParseError, Timeout

logger = logging.getLogger(__name__)

OFFICIAL_HOST_PREFIX = "https://api.deepseek.com"
SDK_MAX_TOKENS = 8192


def is_official_host(base_url: str) -> bool:
    # Covers both https://api.deepseek.com and https://api.deepseek.com/v1
    return base_url.startswith(OFFICIAL_HOST_PREFIX)


def sdk_model_name(model: str) -> str:
    if model == "deepseek-reasoner":
        return model
    return "deepseek-chat"


class OpenAISdkTransport:
    """Vendor SDK path, used only for the official DeepSeek host."""

    name = "sdk"

    def __init__(self, config: Config, *, client: Optional[Any] = None) -> None:
        self.config = config
        self.client = client or OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=float(config.timeout),
            max_retries=0,
        )

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        max_tokens = min(max(self.config.max_tokens, 1), SDK_MAX_TOKENS)
        temperature = min(max(self.config.temperature, 0.0), 2.0)
        try:
            response = self.client.chat.completions.create(
                model=sdk_model_name(self.config.model),
                messages=serialize_messages(messages),
                max_tokens=max_tokens,
                temperature=temperature,
                response_format={"type": "json_object"},
            )
        except APIError as exc:
            raise self._classify(exc) from exc

        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ParseError("No choices in API response")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if content is None:
            raise ParseError("Empty content in API response")
        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.debug(
                "[sdk] model=%s prompt_tokens=%s completion_tokens=%s",
                self.config.model,
                getattr(usage, "prompt_tokens", None),
                getattr(usage, "completion_tokens", None),
            )
        return content

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()

    def _classify(self, exc: APIError) -> DeepSeekError:
        if isinstance(exc, APITimeoutError):
            return Timeout(self.config.timeout)
        if isinstance(exc, APIConnectionError):
            return NetworkError(str(exc) or "Failed to connect to server")
        if isinstance(exc, APIStatusError):
            body = exc.response.text if exc.response is not None else ""
            return classify_status(exc.status_code, body or exc.message)
        return ParseError(str(exc))
