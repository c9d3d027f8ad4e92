"""Consumer-facing projection of the cached document index."""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from helpdocs.errors import DocumentIndexError
from helpdocs.index.cache import IndexCache
from helpdocs.index.paths import PathTranslator
from helpdocs.models import Document

LOGGER = logging.getLogger(__name__)


class DocumentView:
    """A read-only copy of the index that tracks per-document read flags."""

    def __init__(self, root: str, fingerprint: str, documents: List[Document]) -> None:
        self.root = root
        self.fingerprint = fingerprint
        self.documents = documents
        self._by_identifier: Dict[str, Document] = {
            document.identifier: document for document in documents
        }

    def __len__(self) -> int:
        return len(self.documents)

    def __getitem__(self, position: int) -> Document:
        return self.documents[position]

    def parent_of(self, document: Document) -> Optional[Document]:
        if document.parent_identifier is None:
            return None
        return self._by_identifier.get(document.parent_identifier)

    def thread_depth(self, position: int) -> int:
        """Number of parent hops from the document at ``position`` to its thread root."""
        depth = 0
        document = self.documents[position]
        parent = self.parent_of(document)
        while parent is not None and depth < len(self.documents):
            depth += 1
            parent = self.parent_of(parent)
        return depth

    def unread(self) -> List[Document]:
        return [document for document in self.documents if not document.read]

    def file_path(self, position: int) -> Path:
        return Path(self.root) / self.documents[position].path

    def open_document(self, position: int) -> TextIO:
        """Open the document at ``position`` for reading and mark it read."""
        if not 0 <= position < len(self.documents):
            raise IndexError(f"No help document at position {position}")

        document = self.documents[position]
        document.read = True
        path = self.file_path(position)
        try:
            return path.open("r", encoding="utf-8")
        except OSError as exc:
            LOGGER.error("Unable to open help document %s: %s", path, exc)
            raise

    def read_document(self, position: int) -> str:
        with self.open_document(position) as handle:
            return handle.read()


def open_view(
    cache: IndexCache,
    root: str | os.PathLike[str],
    request: Optional[str] = None,
    *,
    translator: Optional[PathTranslator] = None,
) -> DocumentView:
    """Project the cached index for ``root`` into a fresh view.

    The first document is marked unread, unless ``request`` names a document
    path prefix (in either path form); then the first matching document is
    marked unread instead.
    """
    index = cache.ensure(root)
    if len(index) == 0:
        raise DocumentIndexError(f"No help documents found at {root}")

    documents = [dataclasses.replace(document) for document in index]
    view = DocumentView(index.root, index.fingerprint, documents)
    documents[0].read = False

    if not request:
        return view

    translator = translator or PathTranslator(root, cache.config.scheme)
    wanted = translator.to_relative(request)
    if not wanted:
        return view

    for document in documents:
        if document.path.startswith(wanted):
            documents[0].read = True
            document.read = False
            break
    else:
        LOGGER.info("No help document matches %s", request)

    return view
