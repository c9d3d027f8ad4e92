"""Tests for core data models."""

from __future__ import annotations

from datetime import datetime, timezone

from helpdocs.models import (
    UNKNOWN_ROLE,
    DocLevel,
    DocRole,
    Document,
    DocumentIndex,
    FrontMatterEntry,
)


def _document(path: str, identifier: str) -> Document:
    return Document(
        path=path,
        name=path.rsplit("/", 1)[-1],
        role=DocRole(DocLevel.ROOT),
        subject=f"[help]: {path}",
        identifier=identifier,
        created_at=datetime(2020, 10, 2, tzinfo=timezone.utc),
    )


class TestDocRole:
    """Test DocRole value type."""

    def test_unknown_role(self) -> None:
        """Default role is unknown and not an index."""
        assert UNKNOWN_ROLE.level is DocLevel.UNKNOWN
        assert UNKNOWN_ROLE.is_index is False
        assert UNKNOWN_ROLE.is_known is False

    def test_roles_compare_by_value(self) -> None:
        """Roles with the same level and flag are equal."""
        assert DocRole(DocLevel.CHAPTER, True) == DocRole(DocLevel.CHAPTER, True)
        assert DocRole(DocLevel.CHAPTER, True) != DocRole(DocLevel.CHAPTER, False)

    def test_label(self) -> None:
        """Labels combine level and index marker."""
        assert DocRole(DocLevel.SECTION).label() == "section"
        assert DocRole(DocLevel.CHAPTER, True).label() == "chapter/index"
        assert UNKNOWN_ROLE.label() == "unknown"


class TestFrontMatterEntry:
    """Test FrontMatterEntry dataclass."""

    def test_entry_equality(self) -> None:
        """Entries compare by key and value."""
        assert FrontMatterEntry("title", "Intro") == FrontMatterEntry("title", "Intro")
        assert FrontMatterEntry("title", "Intro") != FrontMatterEntry("title", "Other")


class TestDocumentIndex:
    """Test DocumentIndex container."""

    def test_append_assigns_positions(self) -> None:
        """Appended documents get their offset as position."""
        index = DocumentIndex()

        index.append(_document("a.md", "1.a"))
        index.append(_document("b.md", "1.b"))

        assert len(index) == 2
        assert [doc.index_position for doc in index] == [0, 1]
        assert index[1].path == "b.md"

    def test_find_by_identifier(self) -> None:
        """Documents can be looked up by identifier."""
        index = DocumentIndex()
        index.append(_document("a.md", "1.a"))

        assert index.find("1.a") is index[0]
        assert index.find("missing") is None

    def test_empty_index(self) -> None:
        """A new index has no documents and no uplink."""
        index = DocumentIndex()

        assert len(index) == 0
        assert index.uplink is None
        assert index.fingerprint == ""
