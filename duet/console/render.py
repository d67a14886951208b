from __future__ import annotations

import json

from duet.client import ChatReply
from duet.errors import DeepSeekError
from duet.models import CodeDeliverable, JsonDeliverable, Solution, TaskSpec, TextDeliverable, Validation

RULE = "-" * 61


def display_welcome() -> None:
    print("DeepSeek Producer/Auditor console")
    print("Requests go to the configured chat-completions endpoint in JSON mode.")
    print("Make sure DEEPSEEK_API_KEY is set.")
    print("Type '/quit' or '/exit' to stop.\n")


def display_loading() -> None:
    print("Sending request to DeepSeek...")


def display_goodbye() -> None:
    print("Goodbye!")


def display_task(task: TaskSpec) -> None:
    print(f"\nTask {task.task_id} ({task.deliverable_type.value})")
    print(RULE)
    print(f"Goal:  {task.goal}")
    print(f"Input: {task.input}")
    print("Acceptance criteria:")
    for criterion in task.acceptance_criteria:
        print(f"  - {criterion}")
    if task.hints:
        print(f"Hints: {task.hints}")
    print(RULE)


def display_solution(solution: Solution) -> None:
    print(f"\nSolution {solution.solution_id} by {solution.model_used.name}")
    print(RULE)
    deliverable = solution.deliverable
    if isinstance(deliverable, TextDeliverable):
        print(deliverable.text)
    elif isinstance(deliverable, JsonDeliverable):
        print(json.dumps(deliverable.value, indent=2, ensure_ascii=False))
    elif isinstance(deliverable, CodeDeliverable):
        print(f"[{deliverable.language}]")
        print(deliverable.content)
    print(RULE)


def display_validation(validation: Validation) -> None:
    print(f"\nVerdict: {validation.verdict} (score {validation.score:.2f})")
    failed = validation.failed_checks
    if failed:
        print(f"{len(failed)} of {len(validation.checks)} checks failed")
    print(RULE)
    for check in validation.checks:
        mark = "PASS" if check.passed else "FAIL"
        print(f"[{mark}] ({check.severity.value}) {check.criterion}: {check.reason}")
        if check.suggested_fix:
            print(f"       fix: {check.suggested_fix}")
    print(RULE)


def display_reply(reply: ChatReply) -> None:
    print("\nStructured response:")
    print(RULE)
    print(f"Title:       {reply.title}")
    print(f"Description: {reply.description}")
    print(f"Content:     {reply.content}")
    if reply.category is not None:
        print(f"Category:    {reply.category}")
    if reply.timestamp is not None:
        print(f"Timestamp:   {reply.timestamp}")
    if reply.confidence is not None:
        print(f"Confidence:  {reply.confidence:.2f}")
    print(RULE + "\n")


def display_error(error: BaseException) -> None:
    if isinstance(error, DeepSeekError):
        print(f"Error: {error.user_message()}")
        print(f"Tip: {error.tip()}\n")
        return
    print(f"Error: {error}")
    print("Please check your configuration and try again.\n")
