from __future__ import annotations

import json
import os
import stat

import pytest

from duet.utils.io import write_json


@pytest.mark.skipif(os.name != "posix", reason="POSIX file modes")
def test_write_json_applies_umask_mode(tmp_path) -> None:
    path = tmp_path / "out" / "solution.json"
    previous = os.umask(0o022)
    try:
        write_json(path, {"task_id": "t-1", "note": "héllo"})
    finally:
        os.umask(previous)

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
    assert json.loads(path.read_text(encoding="utf-8")) == {"task_id": "t-1", "note": "héllo"}
    assert [child.name for child in path.parent.iterdir()] == ["solution.json"]
