from __future__ import annotations

import logging
from pathlib import Path

from duet.errors import ArtifactPathError


def prepare_output_dir(out_path: Path, logger: logging.Logger, label: str) -> None:
    if not out_path.name:
        raise ArtifactPathError(f"invalid output path: {out_path}")
    logger.info("%s: preparing output directory at %s", label, out_path.parent)
    out_path.parent.mkdir(parents=True, exist_ok=True)
