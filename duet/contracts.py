"""Decode untrusted model output into typed artifacts and repair bookkeeping fields.

The raw reply is handed to ``json.loads`` as is: no fence stripping and no
hunting for an object inside prose. Anything that is not a JSON object of the
expected shape is a ``DecodeError``. After a successful parse only
``schema_version`` and ``created_at`` are ever filled in.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from jsonschema import ValidationError, validate

from duet.errors import DecodeError
from duet.models import Solution, TaskSpec, Validation
from duet.utils.io import read_text
from duet.utils.time import utc_now_rfc3339

SCHEMAS_DIR = Path(__file__).resolve().parent / "schemas"


@lru_cache(maxsize=None)
def load_schema(name: str) -> Dict[str, Any]:
    return json.loads(read_text(SCHEMAS_DIR / f"{name}.schema.json"))


def decode_json(raw_text: str, label: str) -> Any:
    try:
        return json.loads(raw_text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"{label} reply is not valid JSON: {exc}") from exc


def check_shape(payload: Any, schema_name: str, label: str) -> Dict[str, Any]:
    try:
        validate(instance=payload, schema=load_schema(schema_name))
    except ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise DecodeError(f"{label} does not match schema at {location}: {exc.message}") from exc
    return payload


def parse_task_spec(payload: Any) -> TaskSpec:
    return TaskSpec.from_dict(check_shape(payload, "task_spec", "TaskSpec"))


def parse_solution(raw_text: str) -> Solution:
    payload = check_shape(decode_json(raw_text, "SolutionV1"), "solution_v1", "SolutionV1")
    try:
        return Solution.from_dict(payload)
    except ValueError as exc:
        raise DecodeError(f"SolutionV1 is inconsistent: {exc}") from exc


def parse_validation(raw_text: str) -> Validation:
    payload = check_shape(decode_json(raw_text, "ValidationV1"), "validation_v1", "ValidationV1")
    try:
        return Validation.from_dict(payload)
    except ValueError as exc:
        raise DecodeError(f"ValidationV1 is inconsistent: {exc}") from exc


def repair_solution(solution: Solution, now: Optional[str] = None) -> Solution:
    return solution.with_defaults(now or utc_now_rfc3339())


def repair_validation(validation: Validation, now: Optional[str] = None) -> Validation:
    return validation.with_defaults(now or utc_now_rfc3339())
