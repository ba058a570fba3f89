# repopolicy:domain=plugins
"""Built-in fix plugins.

Called as ``fix(fs, options, targets, dry_run)`` where *targets* are the
failing paths reported by the rule.  With ``dry_run`` the fix reports what
it would change without touching the repository.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from repopolicy.engine.models import Result, Target

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from repopolicy.filesystem import FileSystem

logger = logging.getLogger(__name__)


def file_create(
    fs: FileSystem, options: Mapping[str, Any], targets: Sequence[str], dry_run: bool
) -> Result:
    """Create ``file`` with ``text``; existing files are left alone unless ``replace``."""
    path: str = options["file"]
    if fs.relative_file_exists(path) and not options.get("replace", False):
        return Result(
            f"Did not create {path}, file already exists", (Target(path, False),), passed=False
        )

    if not dry_run:
        fs.set_file_contents(path, options["text"])
        logger.info("Created %s", path)
    return Result(f"Created file {path}", (Target(path, True),), passed=True)


def file_remove(
    fs: FileSystem, options: Mapping[str, Any], targets: Sequence[str], dry_run: bool
) -> Result:
    """Remove the failing target paths, or the files matching ``globsAll`` if given."""
    globs = options.get("globsAll")
    paths = (
        fs.find_all(globs, nocase=bool(options.get("nocase", False))) if globs else list(targets)
    )
    paths = [p for p in paths if fs.relative_file_exists(p)]
    if not paths:
        return Result("No files to remove", (), passed=False)

    removed: list[Target] = []
    for path in paths:
        if not dry_run:
            fs.remove_file(path)
            logger.info("Removed %s", path)
        removed.append(Target(path, True, "Removed file"))
    return Result(f"Removed {len(removed)} file(s)", tuple(removed), passed=True)
