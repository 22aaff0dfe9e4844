from __future__ import annotations

from typing import Any

from .paths import split_path


def get_value_by_path(data: Any, path: str) -> Any:
    """Retrieve a value from a record using a dotted source path.

    Returns None when any segment along the way is missing. Lists are
    indexed by decimal segments ('results.0.text').
    """
    val = data
    for key in split_path(path):
        if isinstance(val, dict):
            if key not in val:
                return None
            val = val[key]
        elif isinstance(val, list):
            if not (key.isascii() and key.isdecimal()):
                return None
            index = int(key)
            if index >= len(val):
                return None
            val = val[index]
        else:
            return None

        if val is None:
            return None

    return val
