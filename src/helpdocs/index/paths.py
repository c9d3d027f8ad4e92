"""Translate between ``help://`` identifiers and filesystem paths."""

from __future__ import annotations

import os
from typing import Optional


class PathTranslator:
    """Converts document locations between their logical and filesystem forms.

    Both methods accept either form as input. The result is sanitised: runs of
    trailing slashes are stripped, but never below the bare prefix.
    """

    def __init__(self, root: str | os.PathLike[str], scheme: str = "help") -> None:
        self.root = os.fspath(root).rstrip("/") or "/"
        self.scheme = scheme

    @property
    def prefix(self) -> str:
        return f"{self.scheme}://"

    def is_logical(self, path: str) -> bool:
        """Probe whether ``path`` is a scheme-prefixed document identifier."""
        return path.lower().startswith(self.prefix.lower())

    def _remainder(self, path: str) -> Optional[str]:
        """Return the root-relative part of ``path`` in either form."""
        if not path:
            return None

        size = len(self.scheme)
        if path[:size].lower() == self.scheme.lower():
            # Unlike a URL check, the bare scheme without a separator is allowed
            if path[size:size + 1] not in (":", ""):
                return None
            rest = path[size + 1 :]
        elif path.startswith(self.root):
            size = len(self.root)
            if path[size:size + 1] not in ("/", "") and self.root != "/":
                return None
            rest = path[size:]
        else:
            return None

        return rest.lstrip("/")

    @staticmethod
    def _strip_trailing(result: str, keep: int) -> str:
        end = len(result)
        while end > keep and result[end - 1] == "/":
            end -= 1
        return result[:end]

    def _filesystem(self, rest: str) -> str:
        base = "" if self.root == "/" else self.root
        return self._strip_trailing(f"{base}/{rest}", len(self.root))

    def to_logical(self, path: str, validate: bool = False) -> Optional[str]:
        """Return the ``help://`` form of ``path``, or ``None`` if invalid."""
        rest = self._remainder(path)
        if rest is None:
            return None
        if validate and not os.path.exists(self._filesystem(rest)):
            return None
        return self._strip_trailing(f"{self.prefix}{rest}", len(self.prefix))

    def to_filesystem(self, path: str, validate: bool = False) -> Optional[str]:
        """Return the filesystem form of ``path``, or ``None`` if invalid."""
        rest = self._remainder(path)
        if rest is None:
            return None
        result = self._filesystem(rest)
        if validate and not os.path.exists(result):
            return None
        return result

    def to_relative(self, path: str) -> Optional[str]:
        """Return the root-relative part of ``path``, without trailing slashes."""
        rest = self._remainder(path)
        if rest is None:
            return None
        return rest.rstrip("/")
