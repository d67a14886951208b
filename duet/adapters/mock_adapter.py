from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from typing import Dict, List, Sequence

from duet.adapters.llm_base import ChatMessage


@dataclass
class MockTransport:
    """Offline stand-in for the remote model.

    Picks a canned reply from the system prompt's schema name and echoes
    identifiers from the user turn so the pipeline stays consistent.
    """

    model: str = "mock-chat"
    temperature: float = 0.2
    name: str = "mock"

    def complete(self, messages: Sequence[ChatMessage]) -> str:
        system = next((m.content for m in messages if m.role == "system"), "")
        user = messages[-1].content if messages else ""
        if "ValidationV1" in system:
            payload = self._validation(_load(user))
        elif "SolutionV1" in system:
            payload = self._solution(_load(user))
        else:
            payload = self._chat(user)
        return json.dumps(payload)

    def close(self) -> None:
        return None

    def _solution(self, request: Dict) -> Dict:
        task = request.get("task_spec", {})
        deliverable_type = task.get("deliverable_type", "text")
        if deliverable_type == "json":
            deliverable = {"json": {"goal": task.get("goal", ""), "items": []}}
        elif deliverable_type == "code":
            deliverable = {"code": {"language": "py", "content": "print('mock deliverable')\n"}}
        else:
            deliverable = {"text": "- Mock point one\n- Mock point two\n- Mock point three"}
        return {
            "schema_version": "solution_v1",
            "task_id": task.get("task_id", ""),
            "solution_id": str(uuid.uuid4()),
            "model_used": {"name": self.model, "temperature": self.temperature},
            "deliverable_type": deliverable_type,
            "deliverable": deliverable,
            "evidence": {"system_prompt": "mock", "usage_note": "Generated offline by the mock transport."},
            "usage": {"prompt_tokens": 0, "completion_tokens": 0},
            "created_at": "",
        }

    def _validation(self, request: Dict) -> Dict:
        task = request.get("task_spec", {})
        solution = request.get("solution", {})
        checks: List[Dict] = [
            {
                "criterion": criterion,
                "pass": True,
                "reason": "Mock audit accepts every criterion.",
                "severity": "minor",
            }
            for criterion in task.get("acceptance_criteria", [])
        ]
        return {
            "schema_version": "validation_v1",
            "task_id": task.get("task_id", ""),
            "solution_id": solution.get("solution_id", ""),
            "verdict": "pass",
            "score": 0.9,
            "checks": checks,
            "model_used": {"name": self.model, "temperature": self.temperature},
            "created_at": "",
        }

    def _chat(self, user: str) -> Dict:
        first_line = user.strip().splitlines()[0] if user.strip() else ""
        return {
            "title": "Mock reply",
            "description": "Offline response from the mock transport.",
            "content": first_line,
            "category": "mock",
            "confidence": 1.0,
        }


def _load(text: str) -> Dict:
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return {}
    return value if isinstance(value, dict) else {}
