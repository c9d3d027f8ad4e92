"""Tests for the cached document index."""

from __future__ import annotations

import errno
import io
from pathlib import Path
from unittest.mock import patch

import pytest

from helpdocs.config import AppConfig
from helpdocs.errors import DocumentIndexError
from helpdocs.index import cache as cache_module
from helpdocs.index.cache import IndexCache
from helpdocs.models import DocLevel
from helpdocs.utils.files import fingerprint

HEADER = "---\ntitle: {title}\ndescription: {title} help\n---\nBody of {title}\n"


def _write(path: Path, title: str | None = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(HEADER.format(title=title or path.stem), encoding="utf-8")


@pytest.fixture
def help_root(tmp_path: Path) -> Path:
    root = tmp_path / "help"
    _write(root / "index.md", "Help")
    _write(root / "ch1" / "a.md")
    _write(root / "ch1" / "sec1" / "b.md")
    return root


def _by_path(index):
    return {document.path: document for document in index}


class _FailingStream(io.StringIO):
    def readline(self, *args: object) -> str:
        raise OSError(errno.EIO, "Input/output error")


class TestEnsure:
    """Test IndexCache.ensure."""

    def test_builds_threaded_index(self, help_root: Path) -> None:
        """Chapter and section tops are linked as a two level thread."""
        cache = IndexCache()

        index = cache.ensure(help_root)

        assert [doc.path for doc in index] == ["index.md", "ch1/a.md", "ch1/sec1/b.md"]
        docs = _by_path(index)
        assert docs["index.md"].role.level is DocLevel.ROOT
        assert docs["ch1/a.md"].parent_identifier is None
        assert docs["ch1/sec1/b.md"].parent_identifier == docs["ch1/a.md"].identifier
        assert [doc.index_position for doc in index] == [0, 1, 2]

    def test_link_chapters(self, help_root: Path) -> None:
        """Chapter tops link to the root document when configured."""
        index = IndexCache(AppConfig(link_chapters=True)).ensure(help_root)

        docs = _by_path(index)
        assert docs["ch1/a.md"].parent_identifier == docs["index.md"].identifier

    def test_index_first_within_directory(self, tmp_path: Path) -> None:
        """index.md leads its directory, other files keep name order."""
        root = tmp_path / "help"
        for name in ("a.md", "b.md", "index.md"):
            _write(root / "ch" / name)

        index = IndexCache().ensure(root)

        assert [doc.path for doc in index] == ["ch/index.md", "ch/a.md", "ch/b.md"]
        assert index[1].parent_identifier == index[0].identifier
        assert index[2].parent_identifier == index[0].identifier

    def test_invalid_files_skipped(self, help_root: Path) -> None:
        """Files without valid front matter contribute nothing."""
        (help_root / "notes.txt").write_text("---\ntitle: x\n---\n")
        (help_root / "broken.md").write_text("---\ntitle: never closed\n")
        (help_root / "plain.md").write_text("no header\n")

        index = IndexCache().ensure(help_root)

        assert "broken.md" not in _by_path(index)
        assert "plain.md" not in _by_path(index)
        assert len(index) == 3

    def test_read_error_skips_only_that_file(self, help_root: Path) -> None:
        """A document failing mid-read is skipped without aborting the rebuild."""
        _write(help_root / "bad.md")
        original_open = Path.open

        def fake_open(self: Path, *args, **kwargs):
            if self.name == "bad.md":
                return _FailingStream("---\n")
            return original_open(self, *args, **kwargs)

        with patch.object(Path, "open", fake_open):
            index = IndexCache().ensure(help_root)

        assert set(_by_path(index)) == {"index.md", "ch1/a.md", "ch1/sec1/b.md"}

    def test_empty_directory_keeps_anchor(self, tmp_path: Path) -> None:
        """An empty chapter directory does not disturb the current anchor."""
        root = tmp_path / "help"
        _write(root / "ch1" / "a.md")
        (root / "ch1" / "empty").mkdir()
        (root / "ch2").mkdir()
        _write(root / "ch1" / "sec" / "b.md")

        index = IndexCache().ensure(root)

        docs = _by_path(index)
        assert len(index) == 2
        assert docs["ch1/sec/b.md"].parent_identifier == docs["ch1/a.md"].identifier
        assert index.uplink == 0

    def test_cache_hit_skips_walk(self, help_root: Path) -> None:
        """A second call with the same root does not walk the tree again."""
        cache = IndexCache()
        first = cache.ensure(help_root)

        with patch.object(cache_module, "walk_directory") as mock_walk:
            second = cache.ensure(help_root)

        mock_walk.assert_not_called()
        assert second is first
        assert cache.rebuilds == 1

    def test_file_edits_do_not_invalidate(self, help_root: Path) -> None:
        """Only the root path is fingerprinted, not the tree contents."""
        cache = IndexCache()
        cache.ensure(help_root)
        _write(help_root / "new.md")

        index = cache.ensure(help_root)

        assert "new.md" not in _by_path(index)

    def test_root_change_rebuilds(self, help_root: Path, tmp_path: Path) -> None:
        """Changing the root path forces a rebuild with a new fingerprint."""
        other = tmp_path / "other"
        _write(other / "only.md")
        cache = IndexCache()
        cache.ensure(help_root)
        first_fingerprint = cache.fingerprint

        index = cache.ensure(other)

        assert cache.fingerprint != first_fingerprint
        assert cache.fingerprint == fingerprint(str(other))
        assert [doc.path for doc in index] == ["only.md"]
        assert cache.rebuilds == 2

    def test_cache_disabled_always_rebuilds(self, help_root: Path) -> None:
        """With caching disabled every call rebuilds."""
        cache = IndexCache(AppConfig(cache_enabled=False))

        first = cache.ensure(help_root)
        second = cache.ensure(help_root)

        assert first is not second
        assert cache.rebuilds == 2

    def test_missing_root(self, help_root: Path, tmp_path: Path) -> None:
        """An unopenable root is surfaced and leaves the cache empty."""
        cache = IndexCache()
        cache.ensure(help_root)

        with pytest.raises(DocumentIndexError):
            cache.ensure(tmp_path / "missing")

        assert cache.index is None
        assert cache.fingerprint == ""

    def test_missing_root_is_oserror(self, tmp_path: Path) -> None:
        """The surfaced root failure can be handled as an I/O error."""
        with pytest.raises(OSError):
            IndexCache().ensure(tmp_path / "missing")

    def test_hit_survives_concurrent_invalidate(self, help_root: Path) -> None:
        """A cache hit returns the index it checked even if it is dropped meanwhile."""
        cache = IndexCache()
        first = cache.ensure(help_root)
        is_current = cache.is_current

        def racing_is_current(root):
            current = is_current(root)
            cache.invalidate()
            return current

        with patch.object(cache, "is_current", side_effect=racing_is_current):
            assert cache.ensure(help_root) is first

    def test_invalidate(self, help_root: Path) -> None:
        """Invalidation forces the next call to rebuild."""
        cache = IndexCache()
        cache.ensure(help_root)

        cache.invalidate()
        assert cache.index is None

        cache.ensure(help_root)
        assert cache.rebuilds == 2

    def test_default_root_from_config(self, help_root: Path) -> None:
        """Without an explicit root the configured one is used."""
        cache = IndexCache(AppConfig(root=help_root))

        assert len(cache.ensure()) == 3

    def test_index_records_root(self, help_root: Path) -> None:
        """The index remembers its canonical root and fingerprint."""
        cache = IndexCache()

        index = cache.ensure(help_root)

        assert Path(index.root) == help_root.resolve()
        assert index.fingerprint == cache.fingerprint
