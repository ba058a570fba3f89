# repopolicy:domain=engine
"""Rule dispatch: decide which rules apply, run them, and run fixes on failure."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any

from repopolicy.engine.models import FormatResult, Result, RuleInfo
from repopolicy.engine.registry import FIXES, RULES

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from repopolicy.engine.registry import PluginRegistry
    from repopolicy.filesystem import FileSystem

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Condition matching
# ---------------------------------------------------------------------------


def build_target_tokens(targets: Mapping[str, Result]) -> frozenset[str]:
    """Flatten axiom results into ``"<axiom>=*"`` / ``"<axiom>=<path>"`` tokens.

    Only axioms that ran successfully contribute, one token per target.  A
    target's own verdict is irrelevant: the token records that the axiom
    matched the path.  A target without a path yields ``"<axiom>="``.
    """
    tokens: set[str] = set()
    for axiom_name, result in targets.items():
        if not result.passed:
            continue
        tokens.add(f"{axiom_name}=*")
        tokens.update(f"{axiom_name}={t.path or ''}" for t in result.targets)
    return frozenset(tokens)


def unsatisfied_conditions(rule: RuleInfo, tokens: frozenset[str]) -> list[str]:
    return [cond for cond in rule.where if cond not in tokens]


# ---------------------------------------------------------------------------
# Plugin invocation
# ---------------------------------------------------------------------------


async def _invoke(func: Callable[..., Any], *args: object) -> Result:
    output = func(*args)
    if inspect.isawaitable(output):
        output = await output
    return Result.coerce(output)


def fix_targets_for(result: Result) -> list[str]:
    """Paths of the failing targets of a lint result, in reported order."""
    return [t.path for t in result.targets if not t.passed and t.path]


async def run_rule(
    rule: RuleInfo,
    tokens: frozenset[str] | None,
    fs: FileSystem,
    dry_run: bool,
    *,
    rule_registry: PluginRegistry = RULES,
    fix_registry: PluginRegistry = FIXES,
) -> FormatResult:
    """Run a single rule (and its fix, if it failed) and report the outcome.

    *tokens* is ``None`` when condition filtering is disabled.  Plugin faults
    never escape: they are reported as an ``ERROR`` result for this rule.
    """
    if rule.level == "off":
        return FormatResult.create_ignored(rule, 'ignored because level is "off"')

    if tokens is not None:
        unsatisfied = unsatisfied_conditions(rule, tokens)
        if unsatisfied:
            reasons = '", "'.join(unsatisfied)
            logger.debug("Rule '%s' skipped, unsatisfied: %s", rule.name, unsatisfied)
            return FormatResult.create_ignored(
                rule, f'ignored due to unsatisfied condition(s): "{reasons}"'
            )

    if rule.rule_type not in rule_registry:
        return FormatResult.create_error(rule, f"{rule.rule_type} is not a valid rule")

    try:
        lint_result = await _invoke(rule_registry.load(rule.rule_type), fs, rule.rule_config)
    except Exception as exc:
        logger.warning("Rule '%s' (%s) raised: %s", rule.name, rule.rule_type, exc)
        return FormatResult.create_error(rule, f"{rule.rule_type} threw an error: {exc}")

    if rule.fix_type is None or lint_result.passed:
        return FormatResult.create_lint_only(rule, lint_result)

    fix_targets = fix_targets_for(lint_result)
    if rule.fix_type not in fix_registry:
        return FormatResult.create_error(rule, f"{rule.fix_type} is not a valid fix")

    try:
        fix_result = await _invoke(
            fix_registry.load(rule.fix_type), fs, rule.fix_config, fix_targets, dry_run
        )
    except Exception as exc:
        logger.warning("Fix '%s' for rule '%s' raised: %s", rule.fix_type, rule.name, exc)
        return FormatResult.create_error(rule, f"{rule.fix_type} threw an error: {exc}")

    return FormatResult.create_lint_and_fix(rule, lint_result, fix_result)


async def run_ruleset(
    rules: Sequence[RuleInfo],
    targets: Mapping[str, Result] | bool,
    fs: FileSystem,
    dry_run: bool,
    *,
    rule_registry: PluginRegistry = RULES,
    fix_registry: PluginRegistry = FIXES,
) -> tuple[FormatResult, ...]:
    """Run every rule concurrently and return results in rule order.

    Pass ``targets=True`` to ignore ``where`` conditions entirely.
    """
    tokens = None if isinstance(targets, bool) else build_target_tokens(targets)
    results = await asyncio.gather(
        *(
            run_rule(
                rule,
                tokens,
                fs,
                dry_run,
                rule_registry=rule_registry,
                fix_registry=fix_registry,
            )
            for rule in rules
        )
    )
    return tuple(results)
