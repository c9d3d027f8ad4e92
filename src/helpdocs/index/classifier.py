"""Classify help documents by the shape of their path."""

from __future__ import annotations

import os
from pathlib import Path

from helpdocs.models import UNKNOWN_ROLE, DocLevel, DocRole


def _root_prefix(root: str | os.PathLike[str]) -> str:
    text = os.fspath(root)
    if not text:
        return ""
    # "/" keeps its slash so the filesystem root still prefixes its children
    return text.rstrip("/") + "/"


def classify(
    path: str | os.PathLike[str],
    root: str | os.PathLike[str],
    *,
    extension: str = ".md",
    index_name: str = "index.md",
) -> DocRole:
    """Return the role of ``path`` relative to ``root``.

    Only the path string is inspected, so the file does not need to exist. A
    path gets a proper role when it lies below ``root`` and carries the
    document extension; whether it really is a document is decided later by
    the front-matter parser.
    """
    file = os.fspath(path)
    prefix = _root_prefix(root)

    if not prefix or len(file) <= len(prefix):
        return UNKNOWN_ROLE
    if not file.startswith(prefix):
        return UNKNOWN_ROLE
    if not file.lower().endswith(extension.lower()):
        return UNKNOWN_ROLE

    relative = file[len(prefix) :]
    segments = relative.split("/")
    is_index = segments[-1].lower() == index_name.lower()

    depth = len(segments) - 1
    if depth == 0:
        level = DocLevel.ROOT
    elif depth == 1:
        level = DocLevel.CHAPTER
    else:
        # Anything nested deeper is handled as a section
        level = DocLevel.SECTION

    return DocRole(level=level, is_index=is_index)


def relative_path(path: str | os.PathLike[str], root: str | os.PathLike[str]) -> str:
    """Return ``path`` relative to ``root`` using forward slashes."""
    file = os.fspath(path)
    prefix = _root_prefix(root)
    if prefix and file.startswith(prefix):
        return file[len(prefix) :]
    return Path(file).as_posix()
