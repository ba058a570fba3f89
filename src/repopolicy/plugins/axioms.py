# repopolicy:domain=plugins
"""Built-in axiom plugins.

An axiom classifies the repository into named values.  Each target's
``path`` is the value itself (``python``, ``npm``), so a rule conditioned on
``language=python`` applies when the ``languages`` axiom, reported under the
name ``language``, found Python sources.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from repopolicy.engine.models import Result, Target

if TYPE_CHECKING:
    from repopolicy.filesystem import FileSystem

EXTENSION_LANGUAGES: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cc": "c++",
    ".cpp": "c++",
    ".hpp": "c++",
    ".cs": "c#",
    ".swift": "swift",
    ".m": "objective-c",
    ".scala": "scala",
    ".sh": "shell",
}

MANIFEST_MANAGERS: dict[str, str] = {
    "package.json": "npm",
    "yarn.lock": "yarn",
    "pnpm-lock.yaml": "pnpm",
    "requirements.txt": "pip",
    "setup.py": "pip",
    "pyproject.toml": "pip",
    "Pipfile": "pipenv",
    "poetry.lock": "poetry",
    "Gemfile": "bundler",
    "go.mod": "go-modules",
    "Cargo.toml": "cargo",
    "pom.xml": "maven",
    "build.gradle": "gradle",
    "build.gradle.kts": "gradle",
    "composer.json": "composer",
    "Package.swift": "swiftpm",
}


def languages(fs: FileSystem) -> Result:
    """Report each language with at least one source file, by file extension."""
    found: set[str] = set()
    for path in fs.find_all(["*"]):
        language = EXTENSION_LANGUAGES.get(PurePosixPath(path).suffix.lower())
        if language is not None and fs.relative_file_exists(path):
            found.add(language)
    targets = tuple(Target(language, True) for language in sorted(found))
    return Result(f"Detected {len(targets)} language(s)", targets, passed=True)


def package_managers(fs: FileSystem) -> Result:
    """Report each package manager whose manifest appears anywhere in the repository."""
    found: set[str] = set()
    for path in fs.find_all(["*"]):
        manager = MANIFEST_MANAGERS.get(PurePosixPath(path).name)
        if manager is not None:
            found.add(manager)
    targets = tuple(Target(manager, True) for manager in sorted(found))
    return Result(f"Detected {len(targets)} package manager(s)", targets, passed=True)
