"""Unpack a compendium pack into one JSON file per document.

Two on-disk formats are understood:

- LevelDB (Foundry V11+): a folder holding ``CURRENT``, ``MANIFEST-*`` and
  ``*.ldb``/``*.log`` files, read through ``plyvel``. Primary documents live
  under ``!<collection>!<id>``; embedded documents live in sublevels such as
  ``!tables.results!<tableId>.<resultId>`` and are folded back into their
  parent, replacing the parent's list of ids.
- NeDB (V10 and earlier): a ``.db`` file with one JSON document per line,
  embedded documents already inline.
"""
from __future__ import annotations

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional

import plyvel

from .errors import ExtractionError
from .io_utils import write_json_content

logger = logging.getLogger(__name__)

SCRATCH_DIR_NAME = 'output'

# Embedded collections per document name. A list value holds child ids in the
# parent; a dict value is a single embedded document keyed by the parent ids.
HIERARCHY: Dict[str, Dict[str, type]] = {
    'actors': {'items': list, 'effects': list},
    'cards': {'cards': list},
    'combats': {'combatants': list, 'groups': list},
    'delta': {'items': list, 'effects': list},
    'items': {'effects': list},
    'journal': {'pages': list, 'categories': list},
    'playlists': {'sounds': list},
    'regions': {'behaviors': list},
    'tables': {'results': list},
    'tokens': {'delta': dict},
    'scenes': {
        'drawings': list,
        'tokens': list,
        'lights': list,
        'notes': list,
        'regions': list,
        'sounds': list,
        'templates': list,
        'tiles': list,
        'walls': list,
    },
}

SKIPPED_COLLECTIONS = {'folders'}

_PRIMARY_KEY = re.compile(r'^!(?P<collection>[^!.]+)!(?P<id>[^!.]+)$')
_UNSAFE_FILENAME_CHARS = re.compile(r'[^a-zA-Z0-9А-я]')


def scratch_dir_for(input_path) -> Path:
    """Folder packs extract into a subfolder; a NeDB file into a sibling folder."""
    path = Path(input_path)
    if path.is_file():
        return path.parent / SCRATCH_DIR_NAME / path.stem
    return path / SCRATCH_DIR_NAME


def safe_filename(name: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub('_', name)


def document_filename(doc: Dict[str, Any], fallback: str) -> str:
    name = doc.get('name')
    doc_id = doc.get('_id') or fallback
    if isinstance(name, str) and name:
        return f"{safe_filename(name)}_{doc_id}.json"
    return f"{safe_filename(str(doc_id))}.json"


def is_leveldb_pack(path: Path) -> bool:
    return path.is_dir() and (path / 'CURRENT').is_file()


def find_nedb_file(path: Path) -> Optional[Path]:
    if path.is_file() and path.suffix == '.db':
        return path
    if path.is_dir():
        candidates = sorted(path.glob('*.db'))
        if len(candidates) == 1:
            return candidates[0]
    return None


class _LevelDBReader:
    def __init__(self, db):
        self._db = db

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._db.get(key.encode('utf-8'))
        if raw is None:
            return None
        return json.loads(raw)

    def hydrate(self, doc: Dict[str, Any], sublevel: str, id_chain: List[str]) -> Dict[str, Any]:
        doc_name = sublevel.rsplit('.', 1)[-1]
        for embedded, shape in HIERARCHY.get(doc_name, {}).items():
            child_level = f"{sublevel}.{embedded}"
            if shape is dict:
                child = self.get(f"!{child_level}!{'.'.join(id_chain)}")
                if child is not None:
                    doc[embedded] = self.hydrate(child, child_level, id_chain)
                continue

            child_ids = doc.get(embedded)
            if not isinstance(child_ids, list):
                continue
            children = []
            for child_id in child_ids:
                if not isinstance(child_id, str):
                    children.append(child_id)
                    continue
                chain = id_chain + [child_id]
                child = self.get(f"!{child_level}!{'.'.join(chain)}")
                if child is None:
                    logger.warning("Missing embedded document %s in %s", '.'.join(chain), child_level)
                    continue
                children.append(self.hydrate(child, child_level, chain))
            doc[embedded] = children
        return doc

    def documents(self) -> List[Dict[str, Any]]:
        docs: List[Dict[str, Any]] = []
        for raw_key, raw_value in self._db:
            key = raw_key.decode('utf-8')
            match = _PRIMARY_KEY.match(key)
            if not match or match.group('collection') in SKIPPED_COLLECTIONS:
                continue
            doc = json.loads(raw_value)
            docs.append(self.hydrate(doc, match.group('collection'), [match.group('id')]))
        return docs


def read_leveldb_pack(pack_dir: Path) -> List[Dict[str, Any]]:
    try:
        db = plyvel.DB(str(pack_dir), create_if_missing=False)
    except plyvel.Error as e:
        raise ExtractionError(f"Unable to open LevelDB pack {pack_dir}: {e}") from e
    try:
        return _LevelDBReader(db).documents()
    finally:
        db.close()


def read_nedb_pack(db_file: Path) -> List[Dict[str, Any]]:
    """Replay a NeDB append log; later lines for the same _id replace earlier ones."""
    docs: Dict[str, Dict[str, Any]] = {}
    with open(db_file, 'r', encoding='utf-8') as f:
        for line in f:
            if not line.strip():
                continue
            doc = json.loads(line)
            if '$$indexCreated' in doc:
                continue
            doc_id = doc.get('_id')
            if doc.get('$$deleted'):
                docs.pop(doc_id, None)
                continue
            docs[doc_id] = doc
    return list(docs.values())


def extract_pack(input_dir, scratch_dir=None) -> int:
    """Write every document of the pack at ``input_dir`` into ``scratch_dir``.

    The scratch directory is deleted first so stale records never leak into
    a compile. Returns the number of files written.
    """
    source = Path(input_dir)
    target = Path(scratch_dir) if scratch_dir is not None else scratch_dir_for(source)

    if target.exists():
        shutil.rmtree(target)

    if is_leveldb_pack(source):
        logger.info("Extracting LevelDB pack %s", source)
        docs = read_leveldb_pack(source)
    else:
        db_file = find_nedb_file(source)
        if db_file is None:
            raise ExtractionError(f"No LevelDB or NeDB compendium pack found at: {source}")
        logger.info("Extracting NeDB pack %s", db_file)
        docs = read_nedb_pack(db_file)

    target.mkdir(parents=True, exist_ok=True)
    for index, doc in enumerate(docs):
        write_json_content(target / document_filename(doc, str(index)), doc)

    logger.info("Extracted %d documents into %s", len(docs), target)
    return len(docs)
