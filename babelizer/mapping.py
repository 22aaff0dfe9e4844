"""Loading and querying the user's field mapping file.

The file is a JSON object keyed by compendium type, each value a flat object
of ``output field -> dotted source path``::

    {"Items": {"name": "name", "description": "system.description.value"}}
"""
from __future__ import annotations

import json
import os
from typing import Dict, List

from .errors import MappingFileError, MissingMappingError
from .io_utils import read_json_content

DEFAULT_MAPPING_FILE = 'mapping.json'

FieldMappings = Dict[str, Dict[str, str]]


def load_field_mappings(path) -> FieldMappings:
    if not os.path.exists(path):
        raise MappingFileError(f"Mapping file does not exist: {path}")

    try:
        data = read_json_content(path)
    except json.JSONDecodeError as e:
        raise MappingFileError(f"Error parsing mapping file {path}: {e}") from e

    if not isinstance(data, dict):
        raise MappingFileError(f"Mapping file must contain a JSON object: {path}")

    for compendium_type, fields in data.items():
        if not isinstance(fields, dict):
            raise MappingFileError(f"Mapping for type '{compendium_type}' must be an object of field paths")
        for out_name, source_path in fields.items():
            if not isinstance(source_path, str):
                raise MappingFileError(
                    f"Mapping '{compendium_type}.{out_name}' must be a dotted path string, got {type(source_path).__name__}"
                )

    return data


def list_compendium_types(mappings: FieldMappings) -> List[str]:
    return list(mappings.keys())


def resolve_type_mapping(mappings: FieldMappings, compendium_type: str) -> Dict[str, str]:
    type_mapping = mappings.get(compendium_type)
    if type_mapping is None:
        raise MissingMappingError(compendium_type)
    return type_mapping
