"""Link the documents of one directory into the threaded index."""

from __future__ import annotations

import logging
from typing import List, Sequence

from helpdocs.models import DocLevel, Document, DocumentIndex

LOGGER = logging.getLogger(__name__)


def order_batch(batch: Sequence[Document]) -> List[Document]:
    """Move index documents to the front, keeping discovery order otherwise."""
    return sorted(batch, key=lambda document: not document.role.is_index)


def link_batch(
    index: DocumentIndex,
    batch: Sequence[Document],
    *,
    link_chapters: bool = False,
) -> int:
    """Append the documents found directly in one directory to ``index``.

    The first document of the batch (its index document, if there is one)
    becomes the thread top of that directory. A chapter top becomes the
    uplink for the sections that follow; a section top is parented to the
    current uplink. Every other document of the batch is parented to the top.
    Returns the number of appended documents.
    """
    if not batch:
        return 0

    ordered = order_batch(batch)
    top = ordered[0]
    level = top.role.level

    if level is DocLevel.CHAPTER:
        if link_chapters and len(index) > 0:
            top.parent_identifier = index[0].identifier
        index.uplink = len(index)
    elif level is DocLevel.SECTION:
        if index.uplink is None:
            LOGGER.debug("Section %s has no chapter to link to", top.path)
        else:
            top.parent_identifier = index[index.uplink].identifier

    index.append(top)

    for document in ordered[1:]:
        document.parent_identifier = top.identifier
        index.append(document)

    return len(ordered)
