# repopolicy:domain=engine
"""Canonical data model shared by the engine: rules, plugin results, reports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VALID_LEVELS: frozenset[str] = frozenset({"off", "error", "warning"})

ERROR = "ERROR"
IGNORED = "IGNORED"
LINT_ONLY = "LINT_ONLY"
LINT_AND_FIX = "LINT_AND_FIX"

# ---------------------------------------------------------------------------
# Plugin results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Target:
    """A single path-scoped verdict produced by a rule, fix, or axiom plugin."""

    path: str | None
    passed: bool
    message: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"path": self.path, "passed": self.passed}
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass(frozen=True)
class Result:
    """Outcome returned by a rule, fix, or axiom plugin."""

    message: str | None
    targets: tuple[Target, ...] = ()
    passed: bool = True

    @classmethod
    def coerce(cls, value: object) -> Result:
        """Accept a :class:`Result` or an equivalent mapping from a plugin.

        Raises ``TypeError`` for anything else, which the dispatcher reports
        as a plugin fault.
        """
        if isinstance(value, Result):
            return value
        if isinstance(value, Mapping):
            targets = tuple(
                t
                if isinstance(t, Target)
                else Target(
                    path=t.get("path"),
                    passed=bool(t.get("passed")),
                    message=t.get("message"),
                )
                for t in value.get("targets", ())
            )
            return cls(
                message=value.get("message"),
                targets=targets,
                passed=bool(value.get("passed")),
            )
        msg = f"plugin returned {type(value).__name__}, expected a Result"
        raise TypeError(msg)

    def to_dict(self) -> dict[str, object]:
        return {
            "message": self.message,
            "targets": [t.to_dict() for t in self.targets],
            "passed": self.passed,
        }


# ---------------------------------------------------------------------------
# Canonical rule descriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleInfo:
    """One configured rule after normalization, independent of config dialect.

    ``fix_type`` and ``fix_config`` are ``None`` when no fix is declared; the
    dispatcher treats their presence as "a fix exists".
    """

    name: str
    level: str  # "off" | "error" | "warning"
    where: tuple[str, ...]
    rule_type: str
    rule_config: Mapping[str, Any] = field(default_factory=dict)
    fix_type: str | None = None
    fix_config: Mapping[str, Any] | None = None
    policy_info: str | None = None
    policy_url: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "name": self.name,
            "level": self.level,
            "where": list(self.where),
            "ruleType": self.rule_type,
            "ruleConfig": dict(self.rule_config),
        }
        if self.fix_type is not None:
            data["fixType"] = self.fix_type
            data["fixConfig"] = dict(self.fix_config or {})
        if self.policy_info is not None:
            data["policyInfo"] = self.policy_info
        if self.policy_url is not None:
            data["policyUrl"] = self.policy_url
        return data


# ---------------------------------------------------------------------------
# Per-rule outcome
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FormatResult:
    """Outcome of one rule: exactly one per :class:`RuleInfo` per run.

    Build instances through the ``create_*`` classmethods so that the fields
    carried always agree with ``status``.
    """

    rule_info: RuleInfo
    status: str
    message: str | None = None
    lint_result: Result | None = None
    fix_result: Result | None = None

    @classmethod
    def create_error(cls, rule_info: RuleInfo, message: str) -> FormatResult:
        return cls(rule_info=rule_info, status=ERROR, message=message)

    @classmethod
    def create_ignored(cls, rule_info: RuleInfo, reason: str) -> FormatResult:
        return cls(rule_info=rule_info, status=IGNORED, message=reason)

    @classmethod
    def create_lint_only(cls, rule_info: RuleInfo, lint_result: Result) -> FormatResult:
        return cls(rule_info=rule_info, status=LINT_ONLY, lint_result=lint_result)

    @classmethod
    def create_lint_and_fix(
        cls, rule_info: RuleInfo, lint_result: Result, fix_result: Result
    ) -> FormatResult:
        return cls(
            rule_info=rule_info,
            status=LINT_AND_FIX,
            lint_result=lint_result,
            fix_result=fix_result,
        )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "ruleInfo": self.rule_info.to_dict(),
            "status": self.status,
        }
        if self.message is not None:
            data["message"] = self.message
        if self.lint_result is not None:
            data["lintResult"] = self.lint_result.to_dict()
        if self.fix_result is not None:
            data["fixResult"] = self.fix_result.to_dict()
        return data


# ---------------------------------------------------------------------------
# Final report
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LintParams:
    """The parameters a lint run was invoked with, including the ruleset used."""

    target_dir: str
    filter_paths: tuple[str, ...] = ()
    ruleset_path: str | None = None
    ruleset: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "targetDir": self.target_dir,
            "filterPaths": list(self.filter_paths),
            "rulesetPath": self.ruleset_path,
            "ruleset": self.ruleset,
        }


@dataclass(frozen=True)
class LintReport:
    """Terminal artifact of a lint run, handed to formatters."""

    params: LintParams
    passed: bool
    errored: bool
    err_msg: str | None = None
    results: tuple[FormatResult, ...] = ()
    targets: Mapping[str, Result] = field(default_factory=dict)
    format_options: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "params": self.params.to_dict(),
            "passed": self.passed,
            "errored": self.errored,
            "results": [r.to_dict() for r in self.results],
            "targets": {name: res.to_dict() for name, res in self.targets.items()},
        }
        if self.err_msg is not None:
            data["errMsg"] = self.err_msg
        if self.format_options is not None:
            data["formatOptions"] = dict(self.format_options)
        return data
