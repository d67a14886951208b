from __future__ import annotations

import json
import uuid
from pathlib import Path

import yaml

from duet.contracts import parse_task_spec
from duet.errors import DecodeError
from duet.models import DeliverableType, TaskSpec
from duet.utils.io import read_text


def load_task_spec(path: Path) -> TaskSpec:
    """Read a TaskSpec from a JSON file, or YAML when the suffix says so."""
    text = read_text(path)
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DecodeError(f"Cannot read TaskSpec from {path}: {exc}") from exc
    return parse_task_spec(payload)


def new_task_id() -> str:
    return str(uuid.uuid4())


def demo_task_spec() -> TaskSpec:
    return TaskSpec(
        task_id=new_task_id(),
        goal="Summarize the input text into exactly 3 crisp bullet points",
        input=(
            "DeepSeek Agents demo: we need two agents where the first produces a deliverable "
            "and the second audits it against acceptance criteria."
        ),
        acceptance_criteria=("exactly 3 bullets", "<= 80 words total", "no marketing fluff"),
        deliverable_type=DeliverableType.TEXT,
        hints="Be concise",
    )
