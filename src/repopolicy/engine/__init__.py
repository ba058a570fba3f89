"""Ruleset validation, normalization, axiom resolution, dispatch and aggregation."""

# repopolicy:domain=engine

from repopolicy.engine.axioms import determine_targets
from repopolicy.engine.config_loader import find_ruleset, load_ruleset
from repopolicy.engine.dispatcher import build_target_tokens, run_rule, run_ruleset
from repopolicy.engine.errors import RepoPolicyError, RulesetLoadError, SchemaLoadError
from repopolicy.engine.linter import compute_passed, lint, lint_async
from repopolicy.engine.models import (
    ERROR,
    IGNORED,
    LINT_AND_FIX,
    LINT_ONLY,
    FormatResult,
    LintParams,
    LintReport,
    Result,
    RuleInfo,
    Target,
)
from repopolicy.engine.normalizer import parse_config
from repopolicy.engine.registry import AXIOMS, FIXES, RULES, PluginRegistry, PluginSpec
from repopolicy.engine.schema import ValidationResult, validate_config

__all__ = [
    "AXIOMS",
    "ERROR",
    "FIXES",
    "IGNORED",
    "LINT_AND_FIX",
    "LINT_ONLY",
    "RULES",
    "FormatResult",
    "LintParams",
    "LintReport",
    "PluginRegistry",
    "PluginSpec",
    "RepoPolicyError",
    "Result",
    "RuleInfo",
    "RulesetLoadError",
    "SchemaLoadError",
    "Target",
    "ValidationResult",
    "build_target_tokens",
    "compute_passed",
    "determine_targets",
    "find_ruleset",
    "lint",
    "lint_async",
    "load_ruleset",
    "parse_config",
    "run_rule",
    "run_ruleset",
    "validate_config",
]
