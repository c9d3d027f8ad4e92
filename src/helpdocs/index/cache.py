"""Cached document index keyed by a fingerprint of the root path."""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from helpdocs.config import AppConfig
from helpdocs.errors import DirectoryUnavailableError, DocumentIndexError
from helpdocs.index.thread import link_batch
from helpdocs.ingestion.builder import DocumentBuilder
from helpdocs.models import Document, DocumentIndex
from helpdocs.utils.files import EntryType, fingerprint, walk_directory

LOGGER = logging.getLogger(__name__)


class IndexCache:
    """Owns the document index built from the configured root.

    The cache is not thread-safe; callers sharing one instance must serialise
    calls to :meth:`ensure` and :meth:`invalidate` themselves.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._index: Optional[DocumentIndex] = None
        self._fingerprint = ""
        self.rebuilds = 0

    @property
    def index(self) -> Optional[DocumentIndex]:
        return self._index

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def invalidate(self) -> None:
        """Drop the cached index."""
        self._index = None
        self._fingerprint = ""

    def is_current(self, root: str | os.PathLike[str]) -> bool:
        """Check whether the cached index was built from ``root``."""
        if self._index is None or not self.config.cache_enabled:
            return False
        return self._fingerprint == fingerprint(os.fspath(root))

    def ensure(self, root: str | os.PathLike[str] | None = None) -> DocumentIndex:
        """Return the index for ``root``, rebuilding it when the root changed."""
        if root is None:
            root = self.config.resolve_root()
        cached = self._index
        if cached is not None and self.is_current(root):
            LOGGER.debug("Using cached index for %s", root)
            return cached

        self.invalidate()
        digest = fingerprint(os.fspath(root))
        index = self._build(root, digest)

        self._index = index
        self._fingerprint = digest
        self.rebuilds += 1
        LOGGER.info("Indexed %d help documents from %s", len(index), root)
        return index

    def _build(self, root: str | os.PathLike[str], digest: str) -> DocumentIndex:
        real_root = os.path.realpath(os.fspath(root))
        index = DocumentIndex(root=real_root, fingerprint=digest)
        builder = DocumentBuilder(real_root, self.config)

        try:
            # Documents living directly in the root come first
            self._read_directory(index, builder, real_root, required=True)
            directories = walk_directory(real_root, recursive=True, types=EntryType.DIRECTORY)
        except DirectoryUnavailableError as exc:
            raise DocumentIndexError(f"Unable to index help documents at {root}") from exc

        for entry in directories:
            self._read_directory(index, builder, entry.path)

        return index

    def _read_directory(
        self,
        index: DocumentIndex,
        builder: DocumentBuilder,
        path: str,
        *,
        required: bool = False,
    ) -> None:
        try:
            files = walk_directory(path, types=EntryType.FILE)
        except DirectoryUnavailableError:
            if required:
                raise
            return

        batch: List[Document] = []
        for entry in files:
            document = builder.build(entry.path)
            if document is not None:
                batch.append(document)

        link_batch(index, batch, link_chapters=self.config.link_chapters)
