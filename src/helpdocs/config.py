"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

RELEASE_DATE = "20201002"


def _get_default_root() -> Path:
    """Get the default help document root for the current environment."""
    env_root = os.environ.get("HELPDOCS_ROOT")
    if env_root:
        return Path(env_root).expanduser()

    # When running from a checkout, prefer the bundled docs/help if it exists
    local_root = Path("docs/help")
    if local_root.is_dir():
        return local_root

    return Path.home() / "Documents" / "helpdocs"


@dataclass(slots=True)
class AppConfig:
    root: Path | None = None
    scheme: str = "help"
    extension: str = ".md"
    index_name: str = "index.md"
    # None (or a negative value) reads every header line
    max_header_lines: int | None = None
    link_chapters: bool = False
    cache_enabled: bool = True
    release_date: str = RELEASE_DATE

    def __post_init__(self) -> None:
        if self.root is None:
            self.root = _get_default_root()

    def resolve_root(self, base_dir: Path | None = None) -> Path:
        if self.root is None:
            self.root = _get_default_root()
        if Path(self.root).is_absolute() or base_dir is None:
            return Path(self.root)
        return base_dir / self.root
