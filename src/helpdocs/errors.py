"""Exception hierarchy shared across helpdocs."""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class HelpDocsError(Exception):
    """Base class for all helpdocs errors."""


class DocumentIndexError(HelpDocsError, OSError):
    """The document index could not be built for the requested root."""


class DirectoryUnavailableError(HelpDocsError, OSError):
    """A directory could not be opened for listing."""


class ParseFailure(Enum):
    NOT_A_DOCUMENT = "not a document"
    UNREADABLE = "unreadable"
    MISSING_START_MARKER = "missing start marker"
    MISSING_END_MARKER = "missing end marker"


class FrontMatterError(HelpDocsError):
    """A front-matter block could not be read from a file."""

    kind: ParseFailure

    def __init__(self, path: Path | str, detail: str | None = None) -> None:
        self.path = Path(path)
        message = f"{self.path}: {self.kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NotADocumentError(FrontMatterError):
    kind = ParseFailure.NOT_A_DOCUMENT


class UnreadableDocumentError(FrontMatterError):
    kind = ParseFailure.UNREADABLE


class MissingStartMarkerError(FrontMatterError):
    kind = ParseFailure.MISSING_START_MARKER


class MissingEndMarkerError(FrontMatterError):
    kind = ParseFailure.MISSING_END_MARKER
