from __future__ import annotations

import logging
import os
from typing import Callable, List, Optional

from .compiler import OUTPUT_ROOT, transform_compendium
from .errors import BabelizerError, InputFolderError, MappingFileError, UnknownCompendiumTypeError
from .form import FormState, complete, fail, set_status, start_processing
from .mapping import list_compendium_types, load_field_mappings, resolve_type_mapping

logger = logging.getLogger(__name__)


def load_type_names(mapping_path: str) -> List[str]:
    """Compendium types offered by the form; empty while the file is unusable."""
    if not mapping_path or not os.path.exists(mapping_path):
        return []
    try:
        return list_compendium_types(load_field_mappings(mapping_path))
    except (BabelizerError, OSError) as e:
        logger.warning("Ignoring mapping file while listing types: %s", e)
        return []


def error_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


def run_pipeline(state: FormState, on_status: Callable[[str], None], output_root=OUTPUT_ROOT):
    input_folder = state.input_folder.strip()
    mapping_file = state.mapping_file.strip()

    if not input_folder:
        raise InputFolderError("Input folder is required")
    if not os.path.exists(input_folder):
        raise InputFolderError(f"Input directory does not exist: {input_folder}")

    mappings = load_field_mappings(mapping_file)
    types = list_compendium_types(mappings)
    if not types:
        raise MappingFileError(f"No compendium types defined in mapping file: {mapping_file}")

    compendium_type = state.selected_type if state.selected_type in types else state.detected_type
    if not compendium_type:
        raise UnknownCompendiumTypeError(input_folder)
    resolve_type_mapping(mappings, compendium_type)

    return transform_compendium(
        input_folder,
        mappings,
        compendium_type,
        sort_alphabetically=state.sort_alphabetically,
        use_id_as_key=state.use_id_as_key,
        output_root=output_root,
        on_status=on_status,
    )


def process_form(
    state: FormState,
    on_status: Optional[Callable[[FormState], None]] = None,
    output_root=OUTPUT_ROOT,
) -> FormState:
    """Run extraction for the submitted form and return the resulting screen.

    Every failure, expected or not, lands on the error screen so the user can
    fix the form and retry.
    """
    current = start_processing(state)

    def report(message: str) -> None:
        nonlocal current
        current = set_status(current, message)
        if on_status:
            on_status(current)

    try:
        result = run_pipeline(current, report, output_root=output_root)
    except BabelizerError as e:
        logger.warning("Extraction aborted: %s", e)
        return fail(current, error_message(e))
    except Exception as e:
        logger.exception("Extraction failed for %s", state.input_folder)
        return fail(current, error_message(e))

    return complete(current, result)
