from __future__ import annotations

from babelizer.tables import parse_table_results


def test_rows_keyed_by_range_and_invalid_ranges_dropped():
    results = [
        {"range": [1, 10], "name": "A", "description": "d"},
        {"range": [11], "name": "B"},
    ]
    assert parse_table_results(results) == {"1-10": {"name": "A", "description": "d"}}


def test_missing_name_and_description_default_to_empty():
    assert parse_table_results([{"range": [3, 3]}]) == {"3-3": {"name": "", "description": ""}}


def test_rows_without_range_or_not_objects_are_skipped():
    results = [
        {"name": "no range"},
        {"range": None, "name": "null range"},
        {"range": [1, 2, 3], "name": "too long"},
        "r1",
        {"range": [4, 6], "name": "Kept", "description": None},
    ]
    assert parse_table_results(results) == {"4-6": {"name": "Kept", "description": ""}}


def test_later_row_with_same_range_wins():
    results = [
        {"range": [1, 2], "name": "first"},
        {"range": [1, 2], "name": "second"},
    ]
    assert parse_table_results(results)["1-2"]["name"] == "second"


def test_range_bounds_render_like_json_numbers():
    results = [
        {"range": [1.0, 10.0], "name": "A"},
        {"range": [11, 12.5], "name": "B"},
        {"range": [None, None], "name": "C"},
    ]
    assert list(parse_table_results(results)) == ["1-10", "11-12.5", "null-null"]
