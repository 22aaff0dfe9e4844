# tests/conftest.py

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path for `import app` and `import babelizer`.
PROJECT_ROOT = Path(__file__).resolve().parents[1]

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


ITEMS_MAPPING = {
    "Items": {"name": "name", "description": "system.description.value"},
    "Tables": {"name": "name", "description": "description"},
}


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_nedb(path: Path, docs) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(json.dumps(doc) for doc in docs) + "\n", encoding="utf-8")
    return path


def make_item(_id: str, name: str, description="") -> dict:
    return {
        "_id": _id,
        "name": name,
        "type": "weapon",
        "system": {"description": {"value": description}},
    }


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    return write_json(tmp_path / "mapping.json", ITEMS_MAPPING)


@pytest.fixture
def items_pack(tmp_path: Path) -> Path:
    """A NeDB items pack at <tmp>/packs/core/items/items.db."""
    pack_dir = tmp_path / "packs" / "core" / "items"
    write_nedb(
        pack_dir / "items.db",
        [
            make_item("abc", "Sword", "Sharp"),
            make_item("def", "Axe", "Heavy"),
        ],
    )
    return pack_dir
