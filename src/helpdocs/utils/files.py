"""Utility helpers for working with files and directory trees."""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Callable, Iterator, List, Optional

from helpdocs.errors import DirectoryUnavailableError

LOGGER = logging.getLogger(__name__)


class EntryType(IntFlag):
    """Directory entry types that a walk can select."""

    DIRECTORY = 1
    FILE = 2
    SYMLINK = 4
    OTHER = 8
    ANY = DIRECTORY | FILE | SYMLINK | OTHER


class FilterVerdict(Enum):
    ACCEPT = "accept"
    SKIP = "skip"
    ABORT = "abort"


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """An entry produced by :func:`walk_directory`."""

    path: str
    name: str
    type: EntryType


EntryFilter = Callable[[WalkEntry], FilterVerdict]


def entry_type(entry: os.DirEntry[str]) -> EntryType:
    """Return the type of a listing entry without following symlinks."""
    if entry.is_symlink():
        return EntryType.SYMLINK
    if entry.is_dir(follow_symlinks=False):
        return EntryType.DIRECTORY
    if entry.is_file(follow_symlinks=False):
        return EntryType.FILE
    return EntryType.OTHER


def _list_directory(path: str) -> List[os.DirEntry[str]]:
    """List a directory sorted by name; raises OSError if it cannot be opened."""
    entries: List[os.DirEntry[str]] = []
    with os.scandir(path) as listing:
        iterator = iter(listing)
        while True:
            try:
                entry = next(iterator)
            except StopIteration:
                break
            except OSError as exc:
                # The listing stream is unusable after a read error
                LOGGER.debug("Unable to read dir %s: %s", path, exc)
                break
            if entry.name in ("", ".", ".."):
                continue
            entries.append(entry)
    entries.sort(key=lambda item: item.name)
    return entries


def walk_directory(
    path: str | os.PathLike[str],
    *,
    recursive: bool = False,
    types: EntryType = EntryType.ANY,
    entry_filter: Optional[EntryFilter] = None,
) -> Iterator[WalkEntry]:
    """Iterate over the entries of a directory, optionally descending into it.

    The starting directory is canonicalised and listed immediately, so an
    unreadable start raises :class:`DirectoryUnavailableError` from this call.
    Nested directories that cannot be listed, and entries whose type cannot be
    determined, are logged and skipped.

    Entries whose type is not in ``types`` are not yielded. ``entry_filter``
    may ``SKIP`` an entry or ``ABORT`` the rest of its directory level.
    Directories are descended into depth-first when ``recursive`` is set, even
    when they were not yielded themselves.
    """
    start = os.path.realpath(os.fspath(path))
    try:
        top = _list_directory(start)
    except OSError as exc:
        LOGGER.error("Unable to open directory %s: %s", path, exc.strerror or exc)
        raise DirectoryUnavailableError(exc.errno, f"cannot open directory '{path}'") from exc

    return _walk(start, top, recursive, types, entry_filter)


def _walk(
    start: str,
    top: List[os.DirEntry[str]],
    recursive: bool,
    types: EntryType,
    entry_filter: Optional[EntryFilter],
) -> Iterator[WalkEntry]:
    stack: List[Iterator[os.DirEntry[str]]] = [iter(top)]

    while stack:
        try:
            entry = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue

        try:
            kind = entry_type(entry)
        except OSError as exc:
            LOGGER.debug("Unable to stat %s: %s", entry.path, exc)
            continue

        item = WalkEntry(path=entry.path, name=entry.name, type=kind)
        if kind & types:
            verdict = entry_filter(item) if entry_filter else FilterVerdict.ACCEPT
            if verdict is FilterVerdict.ABORT:
                stack.pop()
                continue
            if verdict is FilterVerdict.ACCEPT:
                yield item

        if recursive and kind is EntryType.DIRECTORY:
            try:
                children = _list_directory(entry.path)
            except OSError as exc:
                LOGGER.warning("Unable to open directory %s: %s", entry.path, exc)
                continue
            stack.append(iter(children))

    LOGGER.debug("Finished walking %s", start)


def fingerprint(text: str) -> str:
    """Compute the MD5 checksum of a string, used to detect root changes."""
    return hashlib.md5(text.encode("utf-8"), usedforsecurity=False).hexdigest()
