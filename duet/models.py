from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

SOLUTION_SCHEMA_VERSION = "solution_v1"
VALIDATION_SCHEMA_VERSION = "validation_v1"


class DeliverableType(str, Enum):
    TEXT = "text"
    JSON = "json"
    CODE = "code"


class Verdict(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"

    def __str__(self) -> str:
        return self.value


class Severity(str, Enum):
    MINOR = "minor"
    MAJOR = "major"


@dataclass(frozen=True)
class TaskSpec:
    task_id: str
    goal: str
    input: str
    acceptance_criteria: Tuple[str, ...]
    deliverable_type: DeliverableType
    hints: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskSpec":
        return cls(
            task_id=data["task_id"],
            goal=data["goal"],
            input=data["input"],
            acceptance_criteria=tuple(data["acceptance_criteria"]),
            deliverable_type=DeliverableType(data["deliverable_type"]),
            hints=data.get("hints"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "task_id": self.task_id,
            "goal": self.goal,
            "input": self.input,
            "acceptance_criteria": list(self.acceptance_criteria),
            "deliverable_type": self.deliverable_type.value,
        }
        if self.hints is not None:
            payload["hints"] = self.hints
        return payload


@dataclass(frozen=True)
class ModelUsed:
    name: str
    temperature: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelUsed":
        return cls(name=data["name"], temperature=float(data["temperature"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "temperature": self.temperature}


# Deliverable variants. Exactly one exists per Solution and its ``kind``
# always equals the Solution's deliverable_type.


@dataclass(frozen=True)
class TextDeliverable:
    text: str
    kind: ClassVar[DeliverableType] = DeliverableType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class JsonDeliverable:
    value: Any
    kind: ClassVar[DeliverableType] = DeliverableType.JSON

    def to_dict(self) -> Dict[str, Any]:
        return {"json": self.value}


@dataclass(frozen=True)
class CodeDeliverable:
    language: str
    content: str
    kind: ClassVar[DeliverableType] = DeliverableType.CODE

    def to_dict(self) -> Dict[str, Any]:
        return {"code": {"language": self.language, "content": self.content}}


Deliverable = Union[TextDeliverable, JsonDeliverable, CodeDeliverable]


def deliverable_from_dict(deliverable_type: DeliverableType, data: Dict[str, Any]) -> Deliverable:
    populated = [key for key in ("text", "json", "code") if data.get(key) is not None]
    if len(populated) != 1:
        found = ", ".join(populated) or "none"
        raise ValueError(f"deliverable must populate exactly one variant, found: {found}")
    if populated[0] != deliverable_type.value:
        raise ValueError(
            f"deliverable_type is '{deliverable_type.value}' but deliverable.{populated[0]} is populated"
        )
    if deliverable_type is DeliverableType.TEXT:
        return TextDeliverable(text=data["text"])
    if deliverable_type is DeliverableType.JSON:
        return JsonDeliverable(value=data["json"])
    code = data["code"]
    return CodeDeliverable(language=code["language"], content=code["content"])


@dataclass(frozen=True)
class Evidence:
    system_prompt: str
    usage_note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"system_prompt": self.system_prompt}
        if self.usage_note is not None:
            payload["usage_note"] = self.usage_note
        return payload


@dataclass(frozen=True)
class Usage:
    prompt_tokens: int = 0
    completion_tokens: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"prompt_tokens": self.prompt_tokens, "completion_tokens": self.completion_tokens}


@dataclass(frozen=True)
class Solution:
    schema_version: str
    task_id: str
    solution_id: str
    model_used: ModelUsed
    deliverable: Deliverable
    evidence: Evidence
    usage: Usage
    created_at: str

    @property
    def deliverable_type(self) -> DeliverableType:
        return self.deliverable.kind

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Solution":
        deliverable_type = DeliverableType(data["deliverable_type"])
        evidence = data["evidence"]
        usage = data["usage"]
        return cls(
            schema_version=data.get("schema_version") or "",
            task_id=data["task_id"],
            solution_id=data["solution_id"],
            model_used=ModelUsed.from_dict(data["model_used"]),
            deliverable=deliverable_from_dict(deliverable_type, data["deliverable"]),
            evidence=Evidence(
                system_prompt=evidence["system_prompt"],
                usage_note=evidence.get("usage_note"),
            ),
            usage=Usage(
                prompt_tokens=usage["prompt_tokens"],
                completion_tokens=usage["completion_tokens"],
            ),
            created_at=data.get("created_at") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "task_id": self.task_id,
            "solution_id": self.solution_id,
            "model_used": self.model_used.to_dict(),
            "deliverable_type": self.deliverable_type.value,
            "deliverable": self.deliverable.to_dict(),
            "evidence": self.evidence.to_dict(),
            "usage": self.usage.to_dict(),
            "created_at": self.created_at,
        }

    def with_defaults(self, created_at: str) -> "Solution":
        """Fill an empty schema_version / created_at; leave anything else as is."""
        changes: Dict[str, str] = {}
        if not self.schema_version:
            changes["schema_version"] = SOLUTION_SCHEMA_VERSION
        if not self.created_at.strip():
            changes["created_at"] = created_at
        return replace(self, **changes) if changes else self


@dataclass(frozen=True)
class CheckResult:
    criterion: str
    passed: bool
    reason: str
    severity: Severity
    suggested_fix: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckResult":
        return cls(
            criterion=data["criterion"],
            passed=data["pass"],
            reason=data["reason"],
            severity=Severity(data["severity"]),
            suggested_fix=data.get("suggested_fix"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "criterion": self.criterion,
            "pass": self.passed,
            "reason": self.reason,
            "severity": self.severity.value,
        }
        if self.suggested_fix is not None:
            payload["suggested_fix"] = self.suggested_fix
        return payload


@dataclass(frozen=True)
class Validation:
    schema_version: str
    task_id: str
    solution_id: str
    verdict: Verdict
    score: float
    checks: Tuple[CheckResult, ...]
    model_used: ModelUsed
    created_at: str
    suggested_rewrite: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Validation":
        return cls(
            schema_version=data.get("schema_version") or "",
            task_id=data["task_id"],
            solution_id=data["solution_id"],
            verdict=Verdict(data["verdict"]),
            score=float(data["score"]),
            checks=tuple(CheckResult.from_dict(item) for item in data["checks"]),
            model_used=ModelUsed.from_dict(data["model_used"]),
            created_at=data.get("created_at") or "",
            suggested_rewrite=data.get("suggested_rewrite"),
        )

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "schema_version": self.schema_version,
            "task_id": self.task_id,
            "solution_id": self.solution_id,
            "verdict": self.verdict.value,
            "score": self.score,
            "checks": [check.to_dict() for check in self.checks],
        }
        if self.suggested_rewrite is not None:
            payload["suggested_rewrite"] = self.suggested_rewrite
        payload["model_used"] = self.model_used.to_dict()
        payload["created_at"] = self.created_at
        return payload

    @property
    def failed_checks(self) -> List[CheckResult]:
        return [check for check in self.checks if not check.passed]

    def with_defaults(self, created_at: str) -> "Validation":
        changes: Dict[str, str] = {}
        if not self.schema_version:
            changes["schema_version"] = VALIDATION_SCHEMA_VERSION
        if not self.created_at.strip():
            changes["created_at"] = created_at
        return replace(self, **changes) if changes else self
