from __future__ import annotations

import json
import logging
from pathlib import Path

from duet.adapters.llm_base import ChatMessage
from duet.agents.base import prepare_output_dir
from duet.artifacts.writers import write_artifact
from duet.client import DeepSeekClient
from duet.contracts import parse_solution, repair_solution
from duet.models import Solution, TaskSpec
from duet.prompts import load_prompt

logger = logging.getLogger(__name__)

PRODUCER_INSTRUCTIONS = (
    "Use the deliverable_type from TaskSpec. Populate created_at with current time. "
    "Ensure only one of deliverable.text/json/code is present as per deliverable_type."
)


class ProducerAgent:
    def __init__(self, client: DeepSeekClient, out_path: Path) -> None:
        self.client = client
        self.out_path = out_path

    def build_messages(self, task: TaskSpec) -> list[ChatMessage]:
        user_payload = {"task_spec": task.to_dict(), "instructions": PRODUCER_INSTRUCTIONS}
        return [
            ChatMessage.system(load_prompt("producer_system")),
            ChatMessage.user(json.dumps(user_payload, ensure_ascii=False)),
        ]

    def execute(self, task: TaskSpec) -> Solution:
        prepare_output_dir(self.out_path, logger, "ProducerAgent")

        logger.info("ProducerAgent: sending task %s to %s", task.task_id, self.client.model)
        raw = self.client.send_messages_raw(self.build_messages(task))
        logger.info("ProducerAgent: received model response, parsing JSON")
        solution = repair_solution(parse_solution(raw))

        write_artifact(self.out_path, solution)
        logger.info("ProducerAgent: saved solution %s to %s", solution.solution_id, self.out_path)
        return solution
