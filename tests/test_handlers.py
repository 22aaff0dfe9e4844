"""
Tests for the top-level run handler: every failure ends on the error screen.
"""

from __future__ import annotations

import json

from babelizer.form import FormState, Screen
from babelizer.handlers import error_message, load_type_names, process_form

from conftest import write_json


def _form(input_folder, mapping_file, **kwargs):
    return FormState(input_folder=str(input_folder), mapping_file=str(mapping_file), **kwargs)


def test_load_type_names(mapping_file, tmp_path):
    assert load_type_names(str(mapping_file)) == ["Items", "Tables"]
    assert load_type_names(str(tmp_path / "missing.json")) == []
    assert load_type_names("") == []

    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2", encoding="utf-8")
    assert load_type_names(str(broken)) == []


def test_input_folder_required(mapping_file):
    state = process_form(_form("  ", mapping_file))
    assert state.screen == Screen.ERROR
    assert state.error_message == "Input folder is required"


def test_missing_input_folder(mapping_file, tmp_path):
    missing = tmp_path / "packs" / "items"
    state = process_form(_form(missing, mapping_file))
    assert state.screen == Screen.ERROR
    assert state.error_message == f"Input directory does not exist: {missing}"


def test_missing_mapping_file(items_pack, tmp_path):
    missing = tmp_path / "none.json"
    state = process_form(_form(items_pack, missing))
    assert state.error_message == f"Mapping file does not exist: {missing}"


def test_no_types_in_mapping_file(items_pack, tmp_path):
    empty = write_json(tmp_path / "empty.json", {})
    state = process_form(_form(items_pack, empty))
    assert state.screen == Screen.ERROR
    assert state.error_message.startswith("No compendium types defined in mapping file")


def test_detected_type_without_mapping(tmp_path):
    mapping = write_json(tmp_path / "mapping.json", {"Tables": {"name": "name"}})
    actors = tmp_path / "packs" / "core" / "actors"
    actors.mkdir(parents=True)
    state = process_form(_form(actors, mapping))
    assert state.error_message == "No mapping found for type: Actors"
    assert not (actors / "output").exists()


def test_no_selected_or_detected_type(tmp_path):
    mapping = write_json(tmp_path / "mapping.json", {"Items": {"name": "name"}})
    journal = tmp_path / "packs" / "core" / "journal"
    journal.mkdir(parents=True)
    state = process_form(_form(journal, mapping))
    assert state.error_message == f"Unknown compendium type for path: {journal}"


def test_unexpected_errors_reach_the_error_screen(tmp_path, mapping_file):
    pack = tmp_path / "packs" / "core" / "items"
    pack.mkdir(parents=True)
    (pack / "items.db").write_text('{"_id": \n', encoding="utf-8")

    state = process_form(_form(pack, mapping_file, selected_type="Items"), output_root=tmp_path / "out")

    assert state.screen == Screen.ERROR
    assert state.error_message


def test_successful_run(items_pack, mapping_file, tmp_path):
    output_root = tmp_path / "out"
    seen = []

    state = process_form(
        _form(items_pack, mapping_file, selected_type="Items", use_id_as_key=True),
        on_status=lambda s: seen.append((s.screen, s.status_message)),
        output_root=output_root,
    )

    assert state.screen == Screen.COMPLETE
    assert state.result.count == 2
    assert state.result.filename == "core.items.json"
    assert state.result.label == "core Items"
    assert seen == [
        (Screen.PROCESSING, "Extracting compendium pack..."),
        (Screen.PROCESSING, "Compiling Babele translations..."),
    ]

    document = json.loads((output_root / "core.items.json").read_text(encoding="utf-8"))
    assert set(document["entries"]) == {"abc", "def"}


def test_selected_type_overrides_detected_type(tmp_path):
    mapping = write_json(
        tmp_path / "mapping.json",
        {"Items": {"name": "name"}, "Tables": {"label": "name"}},
    )
    pack = tmp_path / "packs" / "core" / "items"
    pack.mkdir(parents=True)
    (pack / "items.db").write_text(json.dumps({"_id": "x", "name": "Thing"}) + "\n", encoding="utf-8")
    output_root = tmp_path / "out"

    state = process_form(_form(pack, mapping, selected_type="Tables"), output_root=output_root)

    assert state.result.label == "core Tables"
    document = json.loads((output_root / "core.items.json").read_text(encoding="utf-8"))
    assert document["entries"] == {"Thing": {"label": "Thing"}}


def test_error_message_falls_back_to_exception_name():
    assert error_message(ValueError("bad")) == "bad"
    assert error_message(KeyError()) == "KeyError"
