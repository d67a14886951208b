from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence, Union

import pytest

from duet.adapters.llm_base import ChatMessage
from duet.config import Config
from duet.models import DeliverableType, TaskSpec
from duet.utils.cancel import CancelToken

TASK_ID = "task-001"
SOLUTION_ID = "sol-001"


class RecordingCancel(CancelToken):
    """Cancel token that never sleeps and remembers every backoff delay."""

    def __init__(self, cancel_after: int = -1) -> None:
        super().__init__()
        self.waits: List[float] = []
        self.cancel_after = cancel_after

    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        if self.cancel_after >= 0 and len(self.waits) > self.cancel_after:
            self.cancel()
        return self.cancelled


class ScriptedTransport:
    """Replays queued replies; exceptions in the queue are raised instead."""

    name = "scripted"

    def __init__(self, *replies: Union[str, Exception]) -> None:
        self.replies = list(replies)
        self.calls: List[List[ChatMessage]] = []
        self.closed = False

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> Config:
    return Config(api_key="test-key", base_url="http://llm.test/v1", model="deepseek-chat", use_sdk=False)


@pytest.fixture
def task() -> TaskSpec:
    return TaskSpec(
        task_id=TASK_ID,
        goal="Summarize into 3 bullets",
        input="Two agents: one produces a deliverable, the other audits it.",
        acceptance_criteria=("exactly 3 bullets", "<=80 words", "no fluff"),
        deliverable_type=DeliverableType.TEXT,
    )


@pytest.fixture
def solution_payload() -> Dict[str, Any]:
    return {
        "schema_version": "solution_v1",
        "task_id": TASK_ID,
        "solution_id": SOLUTION_ID,
        "model_used": {"name": "deepseek-chat", "temperature": 0.2},
        "deliverable_type": "text",
        "deliverable": {"text": "- one\n- two\n- three"},
        "evidence": {"system_prompt": "You are Agent 1.", "usage_note": "short"},
        "usage": {"prompt_tokens": 120, "completion_tokens": 30},
        "created_at": "2026-10-18T10:00:00+00:00",
    }


@pytest.fixture
def validation_payload() -> Dict[str, Any]:
    return {
        "schema_version": "validation_v1",
        "task_id": TASK_ID,
        "solution_id": SOLUTION_ID,
        "verdict": "pass",
        "score": 0.9,
        "checks": [
            {"criterion": "exactly 3 bullets", "pass": True, "reason": "Three bullets.", "severity": "minor"},
            {"criterion": "<=80 words", "pass": True, "reason": "Six words.", "severity": "minor"},
            {
                "criterion": "no fluff",
                "pass": True,
                "reason": "Plain wording.",
                "severity": "minor",
                "suggested_fix": None,
            },
        ],
        "model_used": {"name": "deepseek-reasoner", "temperature": 0.2},
        "created_at": "2026-10-18T10:00:05+00:00",
    }


@pytest.fixture
def chat_reply_json() -> str:
    return json.dumps({"title": "Hi", "description": "Greeting", "content": "Hello there"})


def completion_body(content: str) -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


ENV_KEYS = (
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_BASE_URL",
    "DEEPSEEK_MODEL",
    "DEEPSEEK_REASONER_MODEL",
    "DEEPSEEK_TIMEOUT",
    "DEEPSEEK_MAX_TOKENS",
    "DEEPSEEK_TEMPERATURE",
    "DEEPSEEK_USE_SDK",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> pytest.MonkeyPatch:
    for key in ENV_KEYS:
        # Record the key so values loaded from a .env file are undone on teardown.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
