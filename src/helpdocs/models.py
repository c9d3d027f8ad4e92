"""Core helpdocs data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


class DocLevel(Enum):
    """Structural level of a help document below the configured root."""

    UNKNOWN = "unknown"
    ROOT = "root"
    CHAPTER = "chapter"
    SECTION = "section"


@dataclass(frozen=True, slots=True)
class DocRole:
    """Classification of a document path: its level plus the index marker."""

    level: DocLevel = DocLevel.UNKNOWN
    is_index: bool = False

    @property
    def is_known(self) -> bool:
        return self.level is not DocLevel.UNKNOWN

    def label(self) -> str:
        if not self.is_known:
            return self.level.value
        return f"{self.level.value}/index" if self.is_index else self.level.value


UNKNOWN_ROLE = DocRole()


@dataclass(frozen=True, slots=True)
class FrontMatterEntry:
    """A single ``key: value`` line from a front-matter block."""

    key: str
    value: str


@dataclass(slots=True)
class Document:
    """A help document materialised from a file below the root."""

    path: str
    name: str
    role: DocRole
    subject: str
    identifier: str
    created_at: datetime
    headers: Tuple[FrontMatterEntry, ...] = ()
    title: Optional[str] = None
    description: Optional[str] = None
    parent_identifier: Optional[str] = None
    index_position: int = 0
    read: bool = True


@dataclass(slots=True)
class DocumentIndex:
    """Ordered, threaded collection of documents built from one root."""

    root: str = ""
    fingerprint: str = ""
    documents: List[Document] = field(default_factory=list)
    uplink: Optional[int] = None

    def __len__(self) -> int:
        return len(self.documents)

    def __getitem__(self, position: int) -> Document:
        return self.documents[position]

    def __iter__(self):
        return iter(self.documents)

    def append(self, document: Document) -> None:
        document.index_position = len(self.documents)
        self.documents.append(document)

    def find(self, identifier: str) -> Optional[Document]:
        """Return the document carrying ``identifier``, if any."""
        for document in self.documents:
            if document.identifier == identifier:
                return document
        return None
