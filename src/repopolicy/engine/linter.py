# repopolicy:domain=engine
"""Linter orchestrator: load the ruleset, validate, resolve axioms, run rules, aggregate."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from repopolicy.engine.axioms import determine_targets
from repopolicy.engine.config_loader import find_ruleset, load_ruleset
from repopolicy.engine.dispatcher import run_ruleset
from repopolicy.engine.errors import RulesetLoadError
from repopolicy.engine.models import ERROR, IGNORED, LintParams, LintReport, Result
from repopolicy.engine.normalizer import parse_config
from repopolicy.engine.registry import AXIOMS, FIXES, RULES
from repopolicy.engine.schema import validate_config
from repopolicy.filesystem import FileSystem

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from repopolicy.engine.models import FormatResult
    from repopolicy.engine.registry import PluginRegistry


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def compute_passed(results: Iterable[FormatResult]) -> bool:
    """Return ``False`` if any rule errored or an error-level rule failed.

    Ignored rules and warning-level failures never fail the run.
    """
    for r in results:
        if r.status == ERROR:
            return False
        if (
            r.status != IGNORED
            and r.rule_info.level == "error"
            and r.lint_result is not None
            and not r.lint_result.passed
        ):
            return False
    return True


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def _errored(params: LintParams, err_msg: str, ruleset: Mapping[str, Any] | None) -> LintReport:
    format_options = ruleset.get("formatOptions") if isinstance(ruleset, Mapping) else None
    # may be the very value that failed validation
    if not isinstance(format_options, Mapping):
        format_options = None
    return LintReport(
        params=params,
        passed=False,
        errored=True,
        err_msg=err_msg,
        format_options=format_options,
    )


async def lint_async(
    target_dir: Path | str,
    filter_paths: Sequence[str] = (),
    ruleset: Mapping[str, Any] | Path | str | None = None,
    dry_run: bool = False,
    *,
    rules: PluginRegistry = RULES,
    fixes: PluginRegistry = FIXES,
    axioms: PluginRegistry = AXIOMS,
) -> LintReport:
    """Lint *target_dir* against a ruleset and return the full report.

    Parameters
    ----------
    target_dir:
        Root of the repository to lint.
    filter_paths:
        Repository-relative directories to restrict linting to; empty means
        the whole repository.
    ruleset:
        A parsed ruleset mapping, a path to a ruleset file (relative paths
        resolve against *target_dir*), or ``None`` to discover one.
    dry_run:
        Passed through to fix plugins, which report changes without
        writing them.

    Returns
    -------
    LintReport
        Configuration problems are reported via ``errored``/``err_msg``
        rather than raised.  Exceptions raised by axiom plugins propagate.
    """
    root = Path(target_dir)
    fs = FileSystem(root, filter_paths)

    # Step a: Resolve and load the ruleset (unless given as a mapping).
    if isinstance(ruleset, Mapping):
        params = LintParams(
            target_dir=str(root), filter_paths=tuple(filter_paths), ruleset=ruleset
        )
        config: Mapping[str, Any] = ruleset
    else:
        ruleset_path = root / ruleset if ruleset is not None else find_ruleset(root)
        params = LintParams(
            target_dir=str(root),
            filter_paths=tuple(filter_paths),
            ruleset_path=str(ruleset_path),
        )
        try:
            config = load_ruleset(ruleset_path)
        except RulesetLoadError as exc:
            logger.warning("%s", exc)
            return _errored(params, str(exc), None)
        params = replace(params, ruleset=config)

    # Step b: Validate against the composed schema.
    validation = validate_config(config, rules=rules, fixes=fixes)
    if not validation.passed:
        return _errored(params, validation.error or "Configuration validation failed", config)

    # Step c: Normalize to canonical rules.
    rule_infos = parse_config(config)

    # Step d: Resolve axiom targets; without an axioms key every rule applies.
    axiom_config = config.get("axioms")
    targets: dict[str, Result] = {}
    if axiom_config is not None:
        targets = await determine_targets(axiom_config, fs, registry=axioms)

    # Step e: Run the ruleset and aggregate.
    results = await run_ruleset(
        rule_infos,
        targets if axiom_config is not None else True,
        fs,
        dry_run,
        rule_registry=rules,
        fix_registry=fixes,
    )
    passed = compute_passed(results)
    logger.debug("Ran %d rule(s), passed=%s", len(results), passed)

    return LintReport(
        params=params,
        passed=passed,
        errored=False,
        results=results,
        targets=targets,
        format_options=config.get("formatOptions"),
    )


def lint(
    target_dir: Path | str,
    filter_paths: Sequence[str] = (),
    ruleset: Mapping[str, Any] | Path | str | None = None,
    dry_run: bool = False,
    *,
    rules: PluginRegistry = RULES,
    fixes: PluginRegistry = FIXES,
    axioms: PluginRegistry = AXIOMS,
) -> LintReport:
    """Synchronous wrapper around :func:`lint_async`."""
    return asyncio.run(
        lint_async(
            target_dir,
            filter_paths,
            ruleset,
            dry_run,
            rules=rules,
            fixes=fixes,
            axioms=axioms,
        )
    )
