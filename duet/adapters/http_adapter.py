from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from duet import __version__
from duet.adapters.llm_base import ChatMessage, serialize_messages
from duet.config import Config
from duet.errors import ApiError, ConfigError, DeepSeekError, NetworkError, ParseError, ServerBusy, Timeout

logger = logging.getLogger(__name__)

BUSY_STATUSES = {429, 502, 503, 504}


class HttpTransport:
    """Direct POST to ``{base_url}/chat/completions`` with httpx.

    Works against any OpenAI-compatible endpoint, including local test servers.
    """

    name = "http"

    def __init__(
        self,
        config: Config,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        stop: Optional[List[str]] = None,
    ) -> None:
        self.config = config
        self.stop = stop
        try:
            self.client = httpx.Client(
                base_url=config.base_url,
                timeout=httpx.Timeout(float(config.timeout)),
                headers={
                    "Authorization": f"Bearer {config.api_key}",
                    "Content-Type": "application/json",
                    "User-Agent": f"duet/{__version__}",
                },
                transport=transport,
            )
        except (TypeError, ValueError, httpx.InvalidURL, httpx.HTTPError) as exc:
            raise ConfigError(f"Failed to create HTTP client: {exc}") from exc

    def build_payload(self, messages: Sequence[ChatMessage]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": serialize_messages(messages),
            "response_format": {"type": "json_object"},
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }
        if self.stop:
            payload["stop"] = list(self.stop)
        return payload

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        try:
            response = self.client.post("/chat/completions", json=self.build_payload(messages))
        except httpx.HTTPError as exc:
            raise self._classify_transport_error(exc) from exc

        if not response.is_success:
            raise classify_status(response.status_code, response.text or "Unknown error")

        try:
            body = response.json()
        except ValueError as exc:
            raise ParseError(f"Failed to parse API response: {exc}") from exc
        return first_choice_content(body)

    def close(self) -> None:
        self.client.close()

    def _classify_transport_error(self, exc: httpx.HTTPError) -> DeepSeekError:
        if isinstance(exc, httpx.TimeoutException):
            return Timeout(self.config.timeout)
        if isinstance(exc, httpx.ConnectError):
            text = str(exc).lower()
            if "name or service not known" in text or "nodename" in text or "dns" in text:
                return NetworkError("DNS resolution failed")
            if "connection refused" in text:
                return NetworkError("Connection refused by server")
            return NetworkError("Failed to connect to server")
        if isinstance(exc, httpx.RequestError):
            return NetworkError(f"Request error: {exc}")
        return NetworkError(str(exc))


def classify_status(status: int, body: str) -> DeepSeekError:
    if status in BUSY_STATUSES:
        logger.debug("Server busy (HTTP %s): %s", status, body)
        return ServerBusy()
    return ApiError(status, body)


def first_choice_content(body: Any) -> str:
    if not isinstance(body, dict) or not isinstance(body.get("choices"), list):
        raise ParseError("Failed to parse API response: missing 'choices' array")
    choices = body["choices"]
    if not choices:
        raise ParseError("No choices in API response")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise ParseError("Empty content in API response")
    return content
