from __future__ import annotations

from typing import List

ESCAPE = '\\'
SEPARATOR = '.'


def escape_path_segment(segment: str) -> str:
    """Escape one record key so split_path keeps it as a single segment."""
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace(ESCAPE, ESCAPE * 2).replace(SEPARATOR, ESCAPE + SEPARATOR)


def unescape_path_segment(segment: str) -> str:
    if not segment:
        return ''
    out: List[str] = []
    pending = False
    for ch in segment:
        if pending:
            out.append(ch)
            pending = False
        elif ch == ESCAPE:
            pending = True
        else:
            out.append(ch)
    if pending:
        out.append(ESCAPE)
    return ''.join(out)


def split_path(path: str) -> List[str]:
    """Split a mapping source path like 'system.details.biography.value'.

    A backslash keeps the next character literal, so flag scopes that contain
    dots stay one segment: 'flags.babele\\.translated' -> ['flags', 'babele.translated'].
    Empty segments are kept, the same as a plain split on '.', so
    'system..value' looks up an empty key.
    """
    if path is None:
        return []
    if not isinstance(path, str):
        path = str(path)

    parts: List[str] = []
    buf: List[str] = []
    escaping = False

    for ch in path:
        if escaping:
            buf.append(ESCAPE + ch)
            escaping = False
        elif ch == ESCAPE:
            escaping = True
        elif ch == SEPARATOR:
            parts.append(unescape_path_segment(''.join(buf)))
            buf = []
        else:
            buf.append(ch)

    if escaping:
        buf.append(ESCAPE)

    parts.append(unescape_path_segment(''.join(buf)))
    return parts
