# repopolicy:domain=engine
"""Ruleset schema validation.

The envelope schema (``schemas/ruleset.json``) describes the structure of
both configuration dialects.  Before validating, it is composed with the
option schema of every registered rule and fix type so that
``rule.options`` is checked against the schema of the plugin named in
``rule.type``.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import jsonschema
from jsonschema import Draft7Validator

from repopolicy.engine.errors import SchemaLoadError
from repopolicy.engine.registry import FIXES, RULES, load_schema_resource

if TYPE_CHECKING:
    from collections.abc import Iterable

    from repopolicy.engine.registry import PluginRegistry

logger = logging.getLogger(__name__)

ENVELOPE_SCHEMA = "ruleset.json"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of :func:`validate_config`."""

    passed: bool
    error: str | None = None


# ---------------------------------------------------------------------------
# Schema composition
# ---------------------------------------------------------------------------


def _option_clauses(registry: PluginRegistry) -> list[dict[str, Any]]:
    """Build one ``if type == id then options: <schema>`` clause per plugin.

    Raises :class:`SchemaLoadError` if any plugin schema is missing or is not
    itself a valid draft-07 schema.
    """
    clauses: list[dict[str, Any]] = []
    for name in registry.names():
        option_schema = registry.load_schema(name)
        try:
            Draft7Validator.check_schema(option_schema)
        except jsonschema.SchemaError as exc:
            msg = f"{registry.kind} '{name}' has a malformed options schema: {exc.message}"
            raise SchemaLoadError(msg) from exc
        # Embedded as a subschema, so the dialect marker is dropped.
        embedded = {k: v for k, v in option_schema.items() if k != "$schema"}
        clauses.append(
            {
                "if": {"properties": {"type": {"const": name}}, "required": ["type"]},
                "then": {"properties": {"options": embedded}},
            }
        )
    return clauses


def build_schema(
    *, rules: PluginRegistry = RULES, fixes: PluginRegistry = FIXES
) -> dict[str, Any]:
    """Return the envelope schema composed with every registered option schema."""
    schema = copy.deepcopy(dict(load_schema_resource(ENVELOPE_SCHEMA)))
    definitions = schema["definitions"]
    for key, registry in (("ruleCheck", rules), ("fixCheck", fixes)):
        clauses = _option_clauses(registry)
        # draft-07 requires a non-empty allOf
        if clauses:
            definitions[key]["allOf"] = clauses
    return schema


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _format_path(path: Iterable[object]) -> str:
    parts: list[str] = []
    for part in path:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            parts.append(f".{part}")
    return "".join(parts)


def validate_config(
    config: object,
    *,
    rules: PluginRegistry = RULES,
    fixes: PluginRegistry = FIXES,
) -> ValidationResult:
    """Validate a parsed ruleset against the composed schema.

    Fails closed: a missing or malformed plugin schema fails validation
    instead of skipping that plugin's constraints.
    """
    try:
        schema = build_schema(rules=rules, fixes=fixes)
        Draft7Validator.check_schema(schema)
    except (SchemaLoadError, jsonschema.SchemaError) as exc:
        logger.warning("Could not build ruleset schema: %s", exc)
        return ValidationResult(
            passed=False,
            error=f"Configuration validation failed, schema could not be loaded: {exc}",
        )

    validator = Draft7Validator(schema)
    errors = sorted(
        validator.iter_errors(config),
        key=lambda e: [str(p) for p in e.absolute_path],
    )
    if not errors:
        return ValidationResult(passed=True)

    lines = [f"\tconfiguration{_format_path(e.absolute_path)} {e.message}" for e in errors]
    return ValidationResult(
        passed=False,
        error="Configuration validation failed with errors: \n" + "\n".join(lines),
    )
