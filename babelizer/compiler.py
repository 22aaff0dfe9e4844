from __future__ import annotations

import locale
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from .extraction import extract_pack, scratch_dir_for
from .flattening import ReducedEntry, reduce_record
from .io_utils import read_json_content, write_json_content
from .mapping import FieldMappings, resolve_type_mapping
from .naming import build_label, output_filename
from .tables import TABLE_TYPE

logger = logging.getLogger(__name__)

OUTPUT_ROOT = 'output'


@dataclass(frozen=True)
class CompileResult:
    count: int
    filename: str
    label: str


def iter_record_files(scratch_dir: Path) -> Iterator[Path]:
    # Discovery order follows the filesystem and is not stable across platforms.
    for path in scratch_dir.rglob('*.json'):
        if path.is_file():
            yield path


def name_sort_key(entry: ReducedEntry):
    return locale.strxfrm((entry.name or '').casefold())


def key_entries(entries: List[ReducedEntry]) -> Dict[str, Dict[str, Any]]:
    keyed: Dict[str, Dict[str, Any]] = {}
    for entry in entries:
        if entry.key in keyed:
            logger.debug("Entry key %r seen again; keeping the later record", entry.key)
        keyed[entry.key] = entry.data
    return keyed


def compile_translations(
    input_dir,
    mappings: FieldMappings,
    compendium_type: str,
    sort_alphabetically: bool = False,
    use_id_as_key: bool = False,
    scratch_dir=None,
    output_root=OUTPUT_ROOT,
) -> CompileResult:
    """Reduce every extracted record and write the translation document."""
    type_mapping = resolve_type_mapping(mappings, compendium_type)
    scratch = Path(scratch_dir) if scratch_dir is not None else scratch_dir_for(input_dir)

    entries: List[ReducedEntry] = []
    for path in iter_record_files(scratch):
        record = read_json_content(path)
        entries.append(
            reduce_record(
                record,
                type_mapping,
                use_id_as_key=use_id_as_key,
                parse_results=compendium_type == TABLE_TYPE,
            )
        )

    if sort_alphabetically:
        entries.sort(key=name_sort_key)

    label = build_label(input_dir, compendium_type)
    filename = output_filename(input_dir)
    document = {
        'label': label,
        'mapping': type_mapping,
        'entries': key_entries(entries),
    }
    write_json_content(Path(output_root) / filename, document)

    logger.info("Compiled %d entries for %s into %s", len(entries), label, filename)
    return CompileResult(count=len(entries), filename=filename, label=label)


def transform_compendium(
    input_dir,
    mappings: FieldMappings,
    compendium_type: str,
    sort_alphabetically: bool = False,
    use_id_as_key: bool = False,
    output_root=OUTPUT_ROOT,
    on_status: Optional[Callable[[str], None]] = None,
) -> CompileResult:
    """Extract the pack at ``input_dir`` and compile its translation file."""
    # Fail before touching the scratch directory when the type is unmapped.
    resolve_type_mapping(mappings, compendium_type)

    if on_status:
        on_status("Extracting compendium pack...")
    extract_pack(input_dir)

    if on_status:
        on_status("Compiling Babele translations...")
    return compile_translations(
        input_dir,
        mappings,
        compendium_type,
        sort_alphabetically=sort_alphabetically,
        use_id_as_key=use_id_as_key,
        output_root=output_root,
    )
