from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import ScriptedTransport
from duet.agents import AuditInput, AuditorAgent, ProducerAgent
from duet.client import DeepSeekClient
from duet.contracts import parse_solution
from duet.errors import ArtifactPathError, DecodeError, ServerBusy
from duet.models import DeliverableType, TextDeliverable, Verdict


def test_producer_returns_and_persists_solution(config, task, solution_payload, tmp_path) -> None:
    transport = ScriptedTransport(json.dumps(solution_payload))
    out_path = tmp_path / "run" / "solution.json"

    solution = ProducerAgent(DeepSeekClient(config, transport=transport), out_path).execute(task)

    assert solution.deliverable_type is task.deliverable_type is DeliverableType.TEXT
    assert isinstance(solution.deliverable, TextDeliverable)
    assert solution.deliverable.text
    saved = json.loads(out_path.read_text(encoding="utf-8"))
    assert saved == solution_payload
    assert out_path.read_text(encoding="utf-8").startswith("{\n  ")


def test_producer_request_carries_task_and_schema(config, task, solution_payload, tmp_path) -> None:
    transport = ScriptedTransport(json.dumps(solution_payload))
    ProducerAgent(DeepSeekClient(config, transport=transport), tmp_path / "s.json").execute(task)

    system, user = transport.calls[0]
    assert "SolutionV1" in system.content
    body = json.loads(user.content)
    assert body["task_spec"] == task.to_dict()
    assert "deliverable_type" in body["instructions"]


def test_producer_repairs_missing_bookkeeping(config, task, solution_payload, tmp_path) -> None:
    solution_payload["schema_version"] = ""
    solution_payload["created_at"] = ""
    transport = ScriptedTransport(json.dumps(solution_payload))
    out_path = tmp_path / "solution.json"

    solution = ProducerAgent(DeepSeekClient(config, transport=transport), out_path).execute(task)

    assert solution.schema_version == "solution_v1"
    assert solution.created_at
    assert json.loads(out_path.read_text(encoding="utf-8"))["created_at"] == solution.created_at


def test_producer_propagates_transport_failure(config, task, tmp_path) -> None:
    transport = ScriptedTransport(ServerBusy())
    out_path = tmp_path / "solution.json"
    with pytest.raises(ServerBusy):
        ProducerAgent(DeepSeekClient(config, transport=transport), out_path).execute(task)
    assert not out_path.exists()


def test_producer_malformed_reply_is_hard_failure(config, task, tmp_path) -> None:
    transport = ScriptedTransport("Here is your solution: {}")
    out_path = tmp_path / "solution.json"
    with pytest.raises(DecodeError):
        ProducerAgent(DeepSeekClient(config, transport=transport), out_path).execute(task)
    assert not out_path.exists()
    assert len(transport.calls) == 1


def test_producer_rejects_path_without_file_name(config, task, tmp_path) -> None:
    agent = ProducerAgent(DeepSeekClient(config, transport=ScriptedTransport()), Path(tmp_path.anchor))
    with pytest.raises(ArtifactPathError):
        agent.execute(task)


def test_auditor_returns_and_persists_validation(
    config, task, solution_payload, validation_payload, tmp_path
) -> None:
    solution = parse_solution(json.dumps(solution_payload))
    transport = ScriptedTransport(json.dumps(validation_payload))
    out_path = tmp_path / "validation.json"

    validation = AuditorAgent(DeepSeekClient(config, transport=transport), out_path).execute(
        AuditInput(task=task, solution=solution)
    )

    assert validation.verdict is Verdict.PASS
    assert validation.score == pytest.approx(0.9)
    assert len(validation.checks) == 3
    saved = json.loads(out_path.read_text(encoding="utf-8"))
    assert saved["verdict"] == "pass"
    assert [check["criterion"] for check in saved["checks"]] == list(task.acceptance_criteria)

    system, user = transport.calls[0]
    assert "ValidationV1" in system.content
    body = json.loads(user.content)
    assert body["solution"] == solution.to_dict()
    assert body["task_spec"]["acceptance_criteria"] == list(task.acceptance_criteria)


def test_auditor_accepts_check_count_mismatch(
    config, task, solution_payload, validation_payload, tmp_path, caplog
) -> None:
    validation_payload["checks"] = validation_payload["checks"][:1]
    solution = parse_solution(json.dumps(solution_payload))
    transport = ScriptedTransport(json.dumps(validation_payload))

    validation = AuditorAgent(DeepSeekClient(config, transport=transport), tmp_path / "v.json").execute(
        AuditInput(task=task, solution=solution)
    )

    assert len(validation.checks) == 1
    assert "1 checks returned for 3 acceptance criteria" in caplog.text
