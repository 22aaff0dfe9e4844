from __future__ import annotations

import re
from typing import List, Optional

# Checked in order; the first folder marker found in the path wins.
TYPE_MARKERS = (
    ('/actors', 'Actors'),
    ('/items', 'Items'),
    ('/scenes', 'Scenes'),
    ('/tables', 'Tables'),
)

_TRAILING_OUTPUT = re.compile(r'/output/?$')
_NEDB_SUFFIX = re.compile(r'\.db$', re.IGNORECASE)


def _normalize(input_path) -> str:
    return str(input_path).replace('\\', '/')


def _segments(normalized: str) -> List[str]:
    return [p for p in normalized.rstrip('/').split('/') if p]


def detect_compendium_type(input_path) -> Optional[str]:
    normalized = _normalize(input_path).lower()
    for marker, compendium_type in TYPE_MARKERS:
        if marker in normalized:
            return compendium_type
    return None


def output_filename(input_path) -> str:
    """'packs/wfrp4e-core/actors' -> 'wfrp4e-core.actors.json'."""
    clean = _TRAILING_OUTPUT.sub('', _normalize(input_path))
    clean = _NEDB_SUFFIX.sub('', clean.rstrip('/'))
    return '.'.join(_segments(clean)[-2:]) + '.json'


def pack_name(input_path) -> str:
    parts = _segments(_normalize(input_path))
    if len(parts) >= 2:
        return parts[-2]
    if parts:
        return parts[-1]
    return 'unknown'


def build_label(input_path, compendium_type: str) -> str:
    return f"{pack_name(input_path)} {compendium_type}"
