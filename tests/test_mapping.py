from __future__ import annotations

import pytest

from babelizer.errors import MappingFileError, MissingMappingError
from babelizer.mapping import list_compendium_types, load_field_mappings, resolve_type_mapping

from conftest import ITEMS_MAPPING, write_json


def test_load_field_mappings(mapping_file):
    mappings = load_field_mappings(mapping_file)
    assert mappings == ITEMS_MAPPING
    assert list_compendium_types(mappings) == ["Items", "Tables"]


def test_missing_mapping_file(tmp_path):
    with pytest.raises(MappingFileError, match="Mapping file does not exist"):
        load_field_mappings(tmp_path / "nope.json")


def test_invalid_json_mapping_file(tmp_path):
    path = tmp_path / "mapping.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MappingFileError, match="Error parsing mapping file"):
        load_field_mappings(path)


@pytest.mark.parametrize(
    "content",
    [
        ["Items"],
        {"Items": ["name"]},
        {"Items": {"name": 3}},
    ],
)
def test_mapping_shape_is_validated(tmp_path, content):
    path = write_json(tmp_path / "mapping.json", content)
    with pytest.raises(MappingFileError):
        load_field_mappings(path)


def test_resolve_type_mapping():
    assert resolve_type_mapping(ITEMS_MAPPING, "Items") == ITEMS_MAPPING["Items"]
    with pytest.raises(MissingMappingError, match="No mapping found for type: Actors"):
        resolve_type_mapping(ITEMS_MAPPING, "Actors")
