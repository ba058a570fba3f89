# repopolicy:domain=filesystem
"""Filesystem view of the repository under lint, restricted to allowed paths."""

from __future__ import annotations

import fnmatch
import logging
import os
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence

logger = logging.getLogger(__name__)

_SKIP_DIRS: frozenset[str] = frozenset({".git", ".hg", ".svn"})


def _normalize_filter(path: str) -> str:
    """``./src/``, ``src/./`` and ``/src`` all become ``src``; ``.`` becomes empty."""
    normalized = PurePosixPath(path.replace("\\", "/")).as_posix().strip("/")
    return "" if normalized == "." else normalized


class FileSystem:
    """Repository-relative file access used by rule, fix, and axiom plugins.

    All paths handed in and out are POSIX-style and relative to
    ``target_dir``.  When ``filter_paths`` is non-empty, searches only see
    files under one of those directories.
    """

    def __init__(self, target_dir: Path | str = ".", filter_paths: Sequence[str] = ()) -> None:
        self.target_dir = Path(target_dir)
        self.filter_paths: tuple[str, ...] = tuple(
            p for p in (_normalize_filter(raw) for raw in filter_paths) if p
        )

    def _allowed(self, rel_path: str) -> bool:
        if not self.filter_paths:
            return True
        return any(rel_path == p or rel_path.startswith(p + "/") for p in self.filter_paths)

    def _walk(self) -> Iterator[str]:
        for dirpath, dirnames, filenames in os.walk(self.target_dir):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            rel_dir = Path(os.path.relpath(dirpath, self.target_dir)).as_posix()
            for name in dirnames + sorted(filenames):
                rel = name if rel_dir == "." else f"{rel_dir}/{name}"
                if self._allowed(rel):
                    yield rel

    def find_all(self, globs: Iterable[str], *, nocase: bool = False) -> list[str]:
        """Return every path (files and directories) matching any of *globs*, sorted."""
        patterns = [g.lower() if nocase else g for g in globs]
        matches: list[str] = []
        for rel in self._walk():
            candidate = rel.lower() if nocase else rel
            if any(fnmatch.fnmatchcase(candidate, pattern) for pattern in patterns):
                matches.append(rel)
        return sorted(matches)

    def find_first(self, globs: Iterable[str], *, nocase: bool = False) -> str | None:
        """Return the first match, trying *globs* in priority order."""
        for glob in globs:
            found = self.find_all([glob], nocase=nocase)
            if found:
                return found[0]
        return None

    def relative_file_exists(self, rel_path: str) -> bool:
        return (self.target_dir / rel_path).is_file()

    def get_file_contents(self, rel_path: str) -> str | None:
        """Read a text file, or return ``None`` if it cannot be read."""
        try:
            return (self.target_dir / rel_path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            logger.warning("Cannot read file: %s", rel_path)
            return None

    def set_file_contents(self, rel_path: str, content: str) -> None:
        path = self.target_dir / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def remove_file(self, rel_path: str) -> None:
        (self.target_dir / rel_path).unlink()
