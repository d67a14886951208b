from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv

DEFAULT_BASE_URL = "https://api.deepseek.com"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_REASONER_MODEL = "deepseek-reasoner"
DEFAULT_TIMEOUT_SECONDS = 60
DEFAULT_MAX_TOKENS = 2048
DEFAULT_TEMPERATURE = 0.2


@dataclass(frozen=True)
class Config:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    use_sdk: bool = True

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """Build a config from process env, after loading ``.env`` if present.

        Without ``env_file`` the nearest ``.env`` at or above the working
        directory is used. Values already set in the environment win over the file.
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))
        return cls(
            api_key=os.getenv("DEEPSEEK_API_KEY", "").strip(),
            base_url=_env("DEEPSEEK_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            model=_env("DEEPSEEK_MODEL", DEFAULT_MODEL),
            timeout=int(_env("DEEPSEEK_TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))),
            max_tokens=int(_env("DEEPSEEK_MAX_TOKENS", str(DEFAULT_MAX_TOKENS))),
            temperature=float(_env("DEEPSEEK_TEMPERATURE", str(DEFAULT_TEMPERATURE))),
            use_sdk=_env("DEEPSEEK_USE_SDK", "true").lower() not in {"0", "false", "no", "off"},
        )

    def with_model(self, model: str) -> "Config":
        return replace(self, model=model)

    def validate(self) -> None:
        if not self.api_key:
            raise ValueError("DEEPSEEK_API_KEY is not set.")
        parsed = urlparse(self.base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"Invalid base URL: {self.base_url!r}")
        if not self.model:
            raise ValueError("Model name must not be empty.")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.temperature < 0:
            raise ValueError(f"temperature must not be negative, got {self.temperature}")

    def __repr__(self) -> str:
        return (
            f"Config(base_url={self.base_url!r}, model={self.model!r}, "
            f"timeout={self.timeout}, max_tokens={self.max_tokens}, "
            f"temperature={self.temperature}, use_sdk={self.use_sdk})"
        )


def reasoner_model_from_env() -> str:
    return _env("DEEPSEEK_REASONER_MODEL", DEFAULT_REASONER_MODEL)


def _env(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()
