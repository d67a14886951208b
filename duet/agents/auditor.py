from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from duet.adapters.llm_base import ChatMessage
from duet.agents.base import prepare_output_dir
from duet.artifacts.writers import write_artifact
from duet.client import DeepSeekClient
from duet.contracts import parse_validation, repair_validation
from duet.models import Solution, TaskSpec, Validation
from duet.prompts import load_prompt

logger = logging.getLogger(__name__)

AUDITOR_INSTRUCTIONS = (
    "Include one check per acceptance_criteria item. Set verdict and a score in [0.0, 1.0]."
)


@dataclass(frozen=True)
class AuditInput:
    task: TaskSpec
    solution: Solution


class AuditorAgent:
    def __init__(self, client: DeepSeekClient, out_path: Path) -> None:
        self.client = client
        self.out_path = out_path

    def build_messages(self, audit: AuditInput) -> list[ChatMessage]:
        user_payload = {
            "task_spec": audit.task.to_dict(),
            "solution": audit.solution.to_dict(),
            "instructions": AUDITOR_INSTRUCTIONS,
        }
        return [
            ChatMessage.system(load_prompt("auditor_system")),
            ChatMessage.user(json.dumps(user_payload, ensure_ascii=False)),
        ]

    def execute(self, audit: AuditInput) -> Validation:
        prepare_output_dir(self.out_path, logger, "AuditorAgent")

        logger.info(
            "AuditorAgent: auditing solution %s for task %s",
            audit.solution.solution_id,
            audit.task.task_id,
        )
        raw = self.client.send_messages_raw(self.build_messages(audit))
        logger.info("AuditorAgent: received model response, parsing JSON")
        validation = repair_validation(parse_validation(raw))
        if len(validation.checks) != len(audit.task.acceptance_criteria):
            logger.warning(
                "AuditorAgent: %d checks returned for %d acceptance criteria",
                len(validation.checks),
                len(audit.task.acceptance_criteria),
            )

        write_artifact(self.out_path, validation)
        logger.info(
            "AuditorAgent: saved validation for solution %s to %s",
            validation.solution_id,
            self.out_path,
        )
        return validation
