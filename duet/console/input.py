from __future__ import annotations

import re
from typing import Callable, List, Tuple

from duet.models import DeliverableType

Reader = Callable[[str], str]

QUIT_COMMANDS = {"/quit", "/exit", "quit", "exit"}

_DELIVERABLE_CHOICES = {
    "1": DeliverableType.TEXT,
    "text": DeliverableType.TEXT,
    "2": DeliverableType.JSON,
    "json": DeliverableType.JSON,
    "3": DeliverableType.CODE,
    "code": DeliverableType.CODE,
}


def prompt_user(prompt_text: str, reader: Reader = input) -> str:
    return reader(prompt_text).strip()


def is_quit_command(text: str) -> bool:
    return text.strip().lower() in QUIT_COMMANDS


def split_criteria(raw: str) -> List[str]:
    return [item.strip() for item in re.split(r"[,;\n]", raw) if item.strip()]


def parse_deliverable_type(raw: str) -> Tuple[DeliverableType, bool]:
    """Return the chosen type and whether the answer was recognised.

    Unknown answers fall back to text.
    """
    choice = _DELIVERABLE_CHOICES.get(raw.strip().lower())
    if choice is None:
        return DeliverableType.TEXT, False
    return choice, True
