from __future__ import annotations

import json

import pytest

from duet.contracts import parse_solution, parse_validation, repair_solution, repair_validation
from duet.errors import DecodeError
from duet.models import (
    CodeDeliverable,
    DeliverableType,
    JsonDeliverable,
    Severity,
    Solution,
    TextDeliverable,
    Validation,
    Verdict,
)

NOW = "2026-10-18T12:00:00+00:00"


def test_solution_round_trip(solution_payload) -> None:
    solution = parse_solution(json.dumps(solution_payload))
    assert solution.to_dict() == solution_payload
    assert Solution.from_dict(solution.to_dict()) == solution


def test_validation_round_trip(validation_payload) -> None:
    validation = parse_validation(json.dumps(validation_payload))
    again = Validation.from_dict(json.loads(json.dumps(validation.to_dict())))
    assert again == validation
    assert validation.verdict is Verdict.PASS
    assert validation.checks[0].passed is True
    assert validation.checks[0].severity is Severity.MINOR


def test_validation_keeps_suggested_rewrite_of_any_shape(validation_payload) -> None:
    validation_payload["suggested_rewrite"] = {"bullets": ["a", "b", "c"]}
    validation = parse_validation(json.dumps(validation_payload))
    assert validation.suggested_rewrite == {"bullets": ["a", "b", "c"]}
    assert validation.to_dict()["suggested_rewrite"] == {"bullets": ["a", "b", "c"]}


@pytest.mark.parametrize(
    ("deliverable_type", "deliverable", "expected"),
    [
        ("text", {"text": "hello", "json": None, "code": None}, TextDeliverable("hello")),
        ("json", {"json": {"k": [1, 2]}}, JsonDeliverable({"k": [1, 2]})),
        ("json", {"json": False}, JsonDeliverable(False)),
        ("code", {"code": {"language": "py", "content": "x = 1"}}, CodeDeliverable("py", "x = 1")),
    ],
)
def test_deliverable_variant_matches_tag(solution_payload, deliverable_type, deliverable, expected) -> None:
    solution_payload["deliverable_type"] = deliverable_type
    solution_payload["deliverable"] = deliverable
    solution = parse_solution(json.dumps(solution_payload))
    assert solution.deliverable == expected
    assert solution.deliverable_type is DeliverableType(deliverable_type)
    assert list(solution.to_dict()["deliverable"]) == [deliverable_type]


@pytest.mark.parametrize(
    ("deliverable_type", "deliverable"),
    [
        ("text", {}),
        ("text", {"text": None}),
        ("text", {"json": {"a": 1}}),
        ("code", {"text": "x", "code": {"language": "py", "content": "x"}}),
    ],
)
def test_deliverable_contradicting_tag_is_rejected(solution_payload, deliverable_type, deliverable) -> None:
    solution_payload["deliverable_type"] = deliverable_type
    solution_payload["deliverable"] = deliverable
    with pytest.raises(DecodeError):
        parse_solution(json.dumps(solution_payload))


def test_fenced_reply_is_not_unwrapped(solution_payload) -> None:
    fenced = f"```json\n{json.dumps(solution_payload)}\n```"
    with pytest.raises(DecodeError, match="not valid JSON"):
        parse_solution(fenced)


@pytest.mark.parametrize(
    "mutate",
    [
        lambda p: p.pop("solution_id"),
        lambda p: p.update(verdict="maybe"),
        lambda p: p["checks"][0].update(severity="critical"),
        lambda p: p["checks"][1].pop("pass"),
        lambda p: p.update(score="high"),
    ],
)
def test_validation_shape_violations_are_decode_errors(validation_payload, mutate) -> None:
    mutate(validation_payload)
    with pytest.raises(DecodeError):
        parse_validation(json.dumps(validation_payload))


def test_non_object_reply_is_decode_error() -> None:
    with pytest.raises(DecodeError):
        parse_solution("[1, 2, 3]")


def test_repair_fills_empty_bookkeeping_fields(solution_payload) -> None:
    solution_payload["schema_version"] = ""
    solution_payload["created_at"] = "  "
    repaired = repair_solution(parse_solution(json.dumps(solution_payload)), NOW)
    assert repaired.schema_version == "solution_v1"
    assert repaired.created_at == NOW
    assert repair_solution(repaired, "2030-01-01T00:00:00+00:00") == repaired


def test_repair_fills_missing_bookkeeping_fields(validation_payload) -> None:
    del validation_payload["schema_version"]
    del validation_payload["created_at"]
    repaired = repair_validation(parse_validation(json.dumps(validation_payload)), NOW)
    assert repaired.schema_version == "validation_v1"
    assert repaired.created_at == NOW


def test_repair_leaves_populated_fields_alone(solution_payload, validation_payload) -> None:
    solution = parse_solution(json.dumps(solution_payload))
    validation = parse_validation(json.dumps(validation_payload))
    assert repair_solution(solution, NOW) is solution
    assert repair_validation(validation, NOW) is validation


def test_repair_default_timestamp_is_utc_rfc3339(solution_payload) -> None:
    solution_payload["created_at"] = ""
    repaired = repair_solution(parse_solution(json.dumps(solution_payload)))
    assert repaired.created_at.endswith("+00:00")
    assert "T" in repaired.created_at


def test_mismatched_task_id_is_accepted(solution_payload) -> None:
    solution_payload["task_id"] = "some-other-task"
    assert parse_solution(json.dumps(solution_payload)).task_id == "some-other-task"
