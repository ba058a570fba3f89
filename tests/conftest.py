"""Shared test fixtures for repopolicy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from repopolicy.filesystem import FileSystem

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def tmp_repo(tmp_path: Path) -> Path:
    """Create a small repository with a license, readme, Python source, and npm manifest."""
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "LICENSE").write_text("MIT License\n")
    (repo / "README.md").write_text("# Demo\n\nReleased under the MIT license.\n")
    (repo / "src").mkdir()
    (repo / "src" / "app.py").write_text("print('hello')\n")
    (repo / "package.json").write_text("{}\n")
    (repo / ".git").mkdir()
    (repo / ".git" / "config").write_text("[core]\n")
    return repo


@pytest.fixture()
def fs(tmp_repo: Path) -> FileSystem:
    """FileSystem rooted at :func:`tmp_repo`."""
    return FileSystem(tmp_repo)
