"""Front-matter header parsing for help documents.

Only a restricted header is recognised: the first line must be a bare ``---``
and every following ``key: value`` line up to the next ``---`` becomes an
entry. This is not a YAML parser; nested values, lists and quoting are kept
verbatim as plain strings.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterable, List, Optional

from helpdocs.errors import (
    MissingEndMarkerError,
    MissingStartMarkerError,
    NotADocumentError,
    UnreadableDocumentError,
)
from helpdocs.models import FrontMatterEntry

MARKER = "---"

# Key must start the line and reach the colon without whitespace
_ENTRY_PATTERN = re.compile(r"^(?P<key>[^:\s]+):(?P<value>.*)$")


def is_document_name(path: str | os.PathLike[str], extension: str = ".md") -> bool:
    """Check whether the file name carries the document extension."""
    name = Path(path).name
    stem, dot, suffix = name.rpartition(".")
    if not dot or not stem:
        return False
    return f".{suffix}".lower() == extension.lower()


def _parse_entry(line: str) -> Optional[FrontMatterEntry]:
    match = _ENTRY_PATTERN.match(line.rstrip())
    if match is None:
        return None
    return FrontMatterEntry(key=match.group("key"), value=match.group("value").strip())


def parse_front_matter(
    path: str | os.PathLike[str],
    max_lines: int | None = None,
    *,
    extension: str = ".md",
) -> List[FrontMatterEntry]:
    """Read the front-matter entries of a document.

    ``max_lines`` caps the number of collected entries: ``None`` or a negative
    value reads them all, ``0`` only checks that the header is closed. Reaching
    the cap while another entry still precedes the closing marker counts as a
    missing end marker. Entries are never returned from an unclosed header.
    """
    path = Path(path)
    if not is_document_name(path, extension):
        raise NotADocumentError(path)

    try:
        handle = path.open("r", encoding="utf-8", errors="replace")
    except OSError as exc:
        raise UnreadableDocumentError(path, exc.strerror) from exc

    limit = -1 if max_lines is None or max_lines < 0 else max_lines
    entries: List[FrontMatterEntry] = []
    closed = False

    try:
        with handle:
            if handle.readline().rstrip("\r\n") != MARKER:
                raise MissingStartMarkerError(path)

            for raw in handle:
                line = raw.rstrip("\r\n")
                if line == MARKER:
                    closed = True
                    break

                entry = _parse_entry(line)
                if entry is None:
                    continue  # malformed lines are skipped and not counted
                if limit == 0:
                    continue  # header is only scanned for its end marker
                if 0 < limit <= len(entries):
                    break

                entries.append(entry)
    except OSError as exc:
        raise UnreadableDocumentError(path, exc.strerror) from exc

    if not closed:
        raise MissingEndMarkerError(path, f"{len(entries)} entries discarded")

    return entries


def find_entry(entries: Iterable[FrontMatterEntry], key: str) -> Optional[str]:
    """Return the value of the first entry named ``key`` (case-sensitive)."""
    if not key:
        return None
    for entry in entries:
        if entry.key == key:
            return entry.value
    return None
