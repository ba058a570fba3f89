# repopolicy:domain=plugins
"""Built-in rule plugins.

Each rule is called as ``rule(fs, options)`` and returns a
:class:`~repopolicy.engine.models.Result`.  Options are validated against
``schemas/rules/<name>.json`` before any rule runs.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from repopolicy.engine.models import Result, Target

if TYPE_CHECKING:
    from collections.abc import Mapping

    from repopolicy.filesystem import FileSystem

_REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def _compile(pattern: str, flags: str) -> re.Pattern[str]:
    value = 0
    for flag in flags:
        value |= _REGEX_FLAGS[flag]
    return re.compile(pattern, value)


def file_existence(fs: FileSystem, options: Mapping[str, Any]) -> Result:
    """Pass if at least one path matches any of ``globsAny``."""
    globs: list[str] = list(options["globsAny"])
    found = fs.find_first(globs, nocase=bool(options.get("nocase", False)))
    if found is not None:
        return Result(f"Found file ({found})", (Target(found, True),), passed=True)

    message = options.get("fail-message") or "Did not find a file matching the specified patterns"
    return Result(
        message,
        (Target(None, False, f"{message} ({', '.join(globs)})"),),
        passed=False,
    )


def file_not_exists(fs: FileSystem, options: Mapping[str, Any]) -> Result:
    """Fail with one target per path matching any of ``globsAll``."""
    globs: list[str] = list(options["globsAll"])
    found = fs.find_all(globs, nocase=bool(options.get("nocase", False)))
    if not found:
        message = options.get("pass-message") or (
            "Did not find any files matching the specified patterns"
        )
        return Result(f"{message} ({', '.join(globs)})", (), passed=True)

    targets = tuple(Target(path, False, "Found file") for path in found)
    return Result("Found files matching the specified patterns", targets, passed=False)


def file_contents(fs: FileSystem, options: Mapping[str, Any]) -> Result:
    """Check that every file matching ``globsAll`` contains the ``content`` regex."""
    globs: list[str] = list(options["globsAll"])
    pattern = _compile(options["content"], options.get("flags", ""))
    readable = options.get("human-readable-content") or options["content"]

    found = fs.find_all(globs, nocase=bool(options.get("nocase", False)))
    paths = [p for p in found if fs.relative_file_exists(p)]
    if not paths:
        return Result(
            f"Did not find file matching the specified patterns ({', '.join(globs)})",
            (),
            passed=not options.get("fail-on-non-existent", False),
        )

    targets: list[Target] = []
    for path in paths:
        content = fs.get_file_contents(path)
        if content is not None and pattern.search(content):
            targets.append(Target(path, True, f"Contains {readable}"))
        else:
            targets.append(Target(path, False, f"Doesn't contain {readable}"))

    passed = all(t.passed for t in targets)
    message = "All files contain the content" if passed else "Some files are missing the content"
    return Result(message, tuple(targets), passed=passed)
