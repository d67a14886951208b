from __future__ import annotations

from pathlib import Path
from typing import Union

from duet.models import Solution, Validation
from duet.utils.io import write_json

SOLUTION_FILENAME = "solution.json"
VALIDATION_FILENAME = "validation.json"


def write_artifact(path: Path, artifact: Union[Solution, Validation]) -> None:
    # Fully serialized before anything touches the target file.
    write_json(path, artifact.to_dict())


def solution_path(out_dir: Path) -> Path:
    return out_dir / SOLUTION_FILENAME


def validation_path(out_dir: Path) -> Path:
    return out_dir / VALIDATION_FILENAME
