from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from .accessors import get_value_by_path
from .tables import parse_table_results


@dataclass
class ReducedEntry:
    key: str
    name: str
    data: Dict[str, Any] = field(default_factory=dict)


def is_blank(value: Any) -> bool:
    """True for values that never make it into a translation entry."""
    return value is None or (isinstance(value, str) and value == '')


def reduce_record(
    record: Dict[str, Any],
    type_mapping: Dict[str, str],
    use_id_as_key: bool = False,
    parse_results: bool = False,
) -> ReducedEntry:
    """Flatten one extracted record into its translation entry."""
    name = record.get('name')
    key = record.get('_id') if use_id_as_key else name

    data: Dict[str, Any] = {}
    for out_name, source_path in type_mapping.items():
        val = get_value_by_path(record, source_path)
        if not is_blank(val):
            data[out_name] = val

    if parse_results and isinstance(record.get('results'), list):
        data['results'] = parse_table_results(record['results'])

    return ReducedEntry(key=key, name=name, data=data)
