# repopolicy:domain=engine
"""Static plugin registries for rules, fixes, and axioms.

Every plugin is listed here by identifier together with the dotted path of
the callable implementing it and the packaged JSON schema for its options.
Nothing is discovered by scanning the filesystem: a ruleset can only name
plugins that appear in these tables.
"""

from __future__ import annotations

import importlib
import json
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any

from repopolicy.engine.errors import SchemaLoadError

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PluginSpec:
    """Registry entry for one plugin.

    ``target`` is either a ``"module:attribute"`` import path, resolved on
    first use, or the plugin callable itself (used by tests and embedders).
    ``schema`` is a resource path under ``repopolicy/schemas``, an inline
    schema mapping, or ``None`` for plugins that declare no options schema.
    """

    name: str
    target: str | Callable[..., Any]
    schema: str | Mapping[str, Any] | None = None


class PluginRegistry:
    """Identifier-to-plugin mapping for one plugin kind."""

    def __init__(self, kind: str, specs: list[PluginSpec]) -> None:
        self.kind = kind
        self._specs: dict[str, PluginSpec] = {spec.name: spec for spec in specs}

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def names(self) -> list[str]:
        return sorted(self._specs)

    def load(self, name: str) -> Callable[..., Any]:
        """Return the callable for *name*, importing it if needed.

        Raises ``KeyError`` for unregistered identifiers.
        """
        target = self._specs[name].target
        if callable(target):
            return target
        return _import_target(target)

    def load_schema(self, name: str) -> Mapping[str, Any]:
        """Return the option schema for *name*.

        Raises :class:`SchemaLoadError` when the plugin declares no schema or
        the packaged resource is missing or not valid JSON.
        """
        schema = self._specs[name].schema
        if schema is None:
            msg = f"{self.kind} '{name}' does not declare an options schema"
            raise SchemaLoadError(msg)
        if isinstance(schema, str):
            return load_schema_resource(schema)
        return schema


# ---------------------------------------------------------------------------
# Loading helpers
# ---------------------------------------------------------------------------


@lru_cache(maxsize=None)
def _import_target(target: str) -> Callable[..., Any]:
    module_name, _, attr = target.partition(":")
    module = importlib.import_module(module_name)
    func: Callable[..., Any] = getattr(module, attr)
    return func


@lru_cache(maxsize=None)
def load_schema_resource(resource: str) -> Mapping[str, Any]:
    """Load and cache a JSON schema shipped under ``repopolicy/schemas``."""
    path = resources.files("repopolicy") / "schemas"
    for part in resource.split("/"):
        path = path / part
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"schema {resource} could not be read: {exc}"
        raise SchemaLoadError(msg) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"schema {resource} is not valid JSON: {exc}"
        raise SchemaLoadError(msg) from exc
    if not isinstance(data, dict):
        msg = f"schema {resource} must be a JSON object"
        raise SchemaLoadError(msg)
    return data


# ---------------------------------------------------------------------------
# Built-in registries
# ---------------------------------------------------------------------------

RULES = PluginRegistry(
    "rule",
    [
        PluginSpec(
            "file-existence",
            "repopolicy.plugins.rules:file_existence",
            "rules/file-existence.json",
        ),
        PluginSpec(
            "file-not-exists",
            "repopolicy.plugins.rules:file_not_exists",
            "rules/file-not-exists.json",
        ),
        PluginSpec(
            "file-contents",
            "repopolicy.plugins.rules:file_contents",
            "rules/file-contents.json",
        ),
    ],
)

FIXES = PluginRegistry(
    "fix",
    [
        PluginSpec(
            "file-create",
            "repopolicy.plugins.fixes:file_create",
            "fixes/file-create.json",
        ),
        PluginSpec(
            "file-remove",
            "repopolicy.plugins.fixes:file_remove",
            "fixes/file-remove.json",
        ),
    ],
)

AXIOMS = PluginRegistry(
    "axiom",
    [
        PluginSpec("languages", "repopolicy.plugins.axioms:languages"),
        PluginSpec("package-managers", "repopolicy.plugins.axioms:package_managers"),
    ],
)
