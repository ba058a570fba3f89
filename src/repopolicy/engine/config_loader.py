# repopolicy:domain=engine
"""Ruleset discovery and parsing (JSON or YAML)."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from repopolicy.engine.errors import RulesetLoadError

logger = logging.getLogger(__name__)

RULESET_FILENAMES: tuple[str, ...] = (
    "repopolicy.json",
    "repopolicy.yaml",
    "repopolicy.yml",
    "repolint.json",
    "repolint.yaml",
    "repolint.yml",
)

_YAML_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml"})


def default_ruleset_path() -> Path:
    """Path of the ruleset bundled with the package."""
    return Path(str(resources.files("repopolicy") / "rulesets" / "default.yml"))


def find_ruleset(target_dir: Path) -> Path:
    """Find the nearest ruleset file, searching *target_dir* and its parents.

    Falls back to the bundled default ruleset when nothing is found.
    """
    start = target_dir.resolve()
    for directory in (start, *start.parents):
        for filename in RULESET_FILENAMES:
            candidate = directory / filename
            if candidate.is_file():
                logger.debug("Using ruleset %s", candidate)
                return candidate
    logger.debug("No ruleset found above %s, using the default ruleset", start)
    return default_ruleset_path()


def load_ruleset(path: Path) -> dict[str, Any]:
    """Parse a ruleset file.

    ``.yaml``/``.yml`` files are parsed as YAML, anything else as JSON.

    Raises
    ------
    RulesetLoadError
        When the file cannot be read, does not parse, or is not a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RulesetLoadError(str(path), exc.strerror or str(exc)) from exc

    try:
        if path.suffix.lower() in _YAML_SUFFIXES:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise RulesetLoadError(str(path), str(exc)) from exc

    if not isinstance(data, dict):
        raise RulesetLoadError(str(path), "ruleset must be a mapping")
    return data
