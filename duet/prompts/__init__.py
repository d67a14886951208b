from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from duet.utils.io import read_text

PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_prompt(name: str) -> str:
    return read_text(PROMPTS_DIR / f"{name}.md").strip()
