from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def read_json_content(path):
    """Read one JSON document from a file path.

    Parse errors are not caught here; callers decide whether they are fatal.
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_json_content(path, data: Any) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path
