"""Materialise help documents from files below the root."""

from __future__ import annotations

import logging
import os
import secrets
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Sequence, Set, Tuple

from helpdocs.config import AppConfig
from helpdocs.errors import FrontMatterError
from helpdocs.index.classifier import classify, relative_path
from helpdocs.ingestion.front_matter import find_entry, parse_front_matter
from helpdocs.models import Document, FrontMatterEntry

LOGGER = logging.getLogger(__name__)

# Ordered (literal, header key) segments, renders as "[<title>]: <description>"
SubjectTemplate = Sequence[Tuple[str, Optional[str]]]
SUBJECT_TEMPLATE: SubjectTemplate = (("[", "title"), ("]: ", "description"))

_RANDOM_ALPHABET = "abcdefghijklmnopqrstuvwxyz234567"
RANDOM_TAG_LENGTH = 16


def render_subject(
    template: SubjectTemplate,
    entries: Iterable[FrontMatterEntry],
    default: str,
) -> str:
    """Fill ``template`` from header entries, or return ``default``.

    A single missing key makes the whole subject fall back to ``default``.
    """
    entries = tuple(entries)
    parts = []
    for literal, key in template:
        parts.append(literal)
        if key is None:
            continue
        value = find_entry(entries, key)
        if value is None:
            return default
        parts.append(value)
    return "".join(parts)


def parse_release_date(release_date: str) -> datetime:
    return datetime.strptime(release_date, "%Y%m%d").replace(tzinfo=timezone.utc)


def random_tag(length: int = RANDOM_TAG_LENGTH) -> str:
    return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(length))


class DocumentBuilder:
    """Builds :class:`Document` values for files below one root."""

    def __init__(self, root: str | os.PathLike[str], config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self.root = os.fspath(root)
        self.created_at = parse_release_date(self.config.release_date)
        self._issued: Set[str] = set()

    def new_identifier(self) -> str:
        """Return an identifier not yet issued by this builder."""
        stamp = self.created_at.strftime("%Y%m%d%H%M%S")
        while True:
            identifier = f"{stamp}.{random_tag()}"
            if identifier not in self._issued:
                self._issued.add(identifier)
                return identifier

    def build(self, path: str | os.PathLike[str]) -> Optional[Document]:
        """Build a document from ``path``, or ``None`` if it is not one."""
        file = os.fspath(path)
        role = classify(
            file,
            self.root,
            extension=self.config.extension,
            index_name=self.config.index_name,
        )
        if not role.is_known:
            LOGGER.debug("Skipping %s: not a help document path", file)
            return None

        try:
            headers = parse_front_matter(
                file, self.config.max_header_lines, extension=self.config.extension
            )
        except FrontMatterError as exc:
            LOGGER.debug("Skipping %s: %s", file, exc)
            return None

        if not headers:
            LOGGER.debug("Skipping %s: empty header", file)
            return None

        name = Path(file).name
        parent_name = Path(file).parent.name
        default_subject = f"[{parent_name}]: {name}"

        return Document(
            path=relative_path(file, self.root),
            name=name,
            role=role,
            subject=render_subject(SUBJECT_TEMPLATE, headers, default_subject),
            identifier=self.new_identifier(),
            created_at=self.created_at,
            headers=tuple(headers),
            title=find_entry(headers, "title"),
            description=find_entry(headers, "description"),
        )
