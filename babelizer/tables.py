from __future__ import annotations

from typing import Any, Dict, List

TABLE_TYPE = 'Tables'


def format_range_bound(value: Any) -> str:
    """Render a range bound the way it reads in the JSON: 1.0 -> '1', None -> 'null'."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_table_results(results: List[Any]) -> Dict[str, Dict[str, str]]:
    """Key roll-table rows by their '{start}-{end}' range.

    Rows without a two-element range are skipped.
    """
    parsed: Dict[str, Dict[str, str]] = {}

    for result in results:
        if not isinstance(result, dict):
            continue
        rng = result.get('range')
        if not isinstance(rng, (list, tuple)) or len(rng) != 2:
            continue

        start, end = rng
        parsed[f"{format_range_bound(start)}-{format_range_bound(end)}"] = {
            'name': result.get('name') or '',
            'description': result.get('description') or '',
        }

    return parsed
