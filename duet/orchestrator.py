from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

from duet.adapters.llm_base import ChatTransport
from duet.agents.auditor import AuditInput, AuditorAgent
from duet.agents.producer import ProducerAgent
from duet.artifacts.writers import solution_path, validation_path
from duet.client import DeepSeekClient
from duet.config import DEFAULT_REASONER_MODEL, Config
from duet.console import Console, render
from duet.models import Solution, TaskSpec, Validation
from duet.utils.cancel import CancelToken, interrupt_cancels

logger = logging.getLogger(__name__)


class Orchestrator:
    """Runs Producer then Auditor; never retries or recovers a failed stage."""

    def __init__(
        self,
        config: Config,
        *,
        reasoner_model: str = DEFAULT_REASONER_MODEL,
        chat_transport: Optional[ChatTransport] = None,
        reasoner_transport: Optional[ChatTransport] = None,
        cancel: Optional[CancelToken] = None,
        render_artifacts: bool = True,
    ) -> None:
        self.cancel = cancel or CancelToken()
        self.chat_client = DeepSeekClient(config, transport=chat_transport, cancel=self.cancel)
        try:
            self.reasoner_client = DeepSeekClient(
                config.with_model(reasoner_model), transport=reasoner_transport, cancel=self.cancel
            )
        except BaseException:
            self.chat_client.close()
            raise
        self.render_artifacts = render_artifacts

    def run_pipeline(self, task: TaskSpec, out_dir: Path) -> Tuple[Solution, Validation]:
        logger.info("Pipeline mode: ProducerAgent -> AuditorAgent")
        out_dir.mkdir(parents=True, exist_ok=True)
        solution_file = solution_path(out_dir)
        validation_file = validation_path(out_dir)

        producer = ProducerAgent(self.chat_client, solution_file)
        logger.info("Agent1 (Producer): received task_id=%s, processing", task.task_id)
        if self.render_artifacts:
            render.display_task(task)
        with interrupt_cancels(self.cancel):
            solution = producer.execute(task)
        logger.info("Agent1 produced solution %s, saved to %s", solution.solution_id, solution_file)
        if self.render_artifacts:
            render.display_solution(solution)

        auditor = AuditorAgent(self.reasoner_client, validation_file)
        logger.info("Agent2 (Auditor): received solution %s, processing", solution.solution_id)
        with interrupt_cancels(self.cancel):
            validation = auditor.execute(AuditInput(task=task, solution=solution))
        logger.info(
            "Agent2 verdict: %s (score %.2f), saved to %s",
            validation.verdict,
            validation.score,
            validation_file,
        )
        if self.render_artifacts:
            render.display_validation(validation)
            print(f"Artifacts:\n  {solution_file}\n  {validation_file}")

        return solution, validation

    def run_console_producer(self, out_dir: Path) -> Optional[Solution]:
        logger.info("Interactive mode: collecting a task for the ProducerAgent")
        return Console(self.chat_client).run_producer_agent(out_dir)

    def run_chat(self) -> None:
        Console(self.chat_client).run()

    def close(self) -> None:
        self.chat_client.close()
        self.reasoner_client.close()
