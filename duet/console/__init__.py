from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from duet.agents.producer import ProducerAgent
from duet.artifacts.writers import solution_path
from duet.client import DeepSeekClient
from duet.console import render
from duet.console.input import Reader, is_quit_command, parse_deliverable_type, prompt_user, split_criteria
from duet.errors import AgentError, DeepSeekError
from duet.models import Solution, TaskSpec
from duet.tasks import new_task_id
from duet.utils.cancel import interrupt_cancels

logger = logging.getLogger(__name__)


class Console:
    """Interactive operator surface.

    Ctrl+C or end of input sets the client's cancel token and ends the session.
    A request already on the wire is abandoned, not killed.
    """

    def __init__(self, client: DeepSeekClient, reader: Reader = input) -> None:
        self.client = client
        self.reader = reader

    def run(self) -> None:
        render.display_welcome()
        print("Interactive mode: enter a prompt and get a structured JSON reply. Type '/quit' to exit.")
        while True:
            try:
                text = prompt_user("> ", self.reader)
            except (KeyboardInterrupt, EOFError):
                self._stop()
                return
            if not text:
                continue
            if is_quit_command(text):
                self._stop()
                return

            render.display_loading()
            try:
                with interrupt_cancels(self.client.cancel):
                    reply = self.client.send_request(text)
            except KeyboardInterrupt:
                print("\nRequest cancelled by user")
                self._stop()
                return
            except DeepSeekError as exc:
                render.display_error(exc)
                if self.client.cancel.cancelled:
                    self._stop()
                    return
                continue
            render.display_reply(reply)

    def collect_task_spec(self) -> TaskSpec:
        goal = prompt_user("Goal: ", self.reader)
        input_text = prompt_user("Input/context: ", self.reader)
        criteria = split_criteria(
            prompt_user("Acceptance criteria (comma or semicolon separated): ", self.reader)
        )
        print("Deliverable type: [1] text  [2] json  [3] code (enter 1/2/3 or name)")
        raw_type = prompt_user("Type: ", self.reader)
        deliverable_type, known = parse_deliverable_type(raw_type)
        if not known:
            print(f"Unknown type, defaulting to 'text': {raw_type}")
        hints = prompt_user("Hints (optional, Enter to skip): ", self.reader)

        task = TaskSpec(
            task_id=new_task_id(),
            goal=goal,
            input=input_text,
            acceptance_criteria=tuple(criteria),
            deliverable_type=deliverable_type,
            hints=hints or None,
        )
        print(f"\nTaskSpec JSON:\n{json.dumps(task.to_dict(), indent=2, ensure_ascii=False)}\n")
        return task

    def run_producer_agent(self, out_dir: Path) -> Optional[Solution]:
        """Collect a task from the operator and run only the producer stage.

        Stage failures are rendered, not raised; returns None when the session
        was interrupted or the stage failed.
        """
        render.display_welcome()
        print("Interactive mode: describe a task; the producer will solve it and save the result.")
        try:
            task = self.collect_task_spec()
        except (KeyboardInterrupt, EOFError):
            self._stop()
            return None

        out_dir.mkdir(parents=True, exist_ok=True)
        out_path = solution_path(out_dir)
        agent = ProducerAgent(self.client, out_path)
        print("ProducerAgent is processing the task")
        try:
            with interrupt_cancels(self.client.cancel):
                solution = agent.execute(task)
        except KeyboardInterrupt:
            print("\nRequest cancelled by user")
            self._stop()
            return None
        except (DeepSeekError, AgentError, OSError) as exc:
            logger.error("ProducerAgent failed: %s", exc)
            render.display_error(exc)
            return None

        print(f"ProducerAgent completed. solution_id={solution.solution_id}")
        print(f"Saved result to {out_path}")
        return solution

    def _stop(self) -> None:
        self.client.cancel.cancel()
        render.display_goodbye()
