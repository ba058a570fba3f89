"""Tests for repopolicy.formatters: console, JSON, and Markdown output."""

from __future__ import annotations

import json

from repopolicy.engine.models import (
    FormatResult,
    LintParams,
    LintReport,
    Result,
    RuleInfo,
    Target,
)
from repopolicy.formatters import (
    categorize,
    format_json,
    format_markdown,
    format_rich,
    summarize,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

PARAMS = LintParams(target_dir="/repo")


def _info(name: str, level: str = "error", **kwargs: object) -> RuleInfo:
    return RuleInfo(name=name, level=level, where=(), rule_type="file-existence", **kwargs)


def _sample_report() -> LintReport:
    results = (
        FormatResult.create_lint_only(
            _info("license"), Result("Found file (LICENSE)", (Target("LICENSE", True),), True)
        ),
        FormatResult.create_lint_only(
            _info("readme", policy_info="Every repo needs a README", policy_url="https://x/y"),
            Result("Did not find a file", (Target(None, False, "No README (README*)"),), False),
        ),
        FormatResult.create_lint_only(
            _info("changelog", level="warning"), Result("Did not find a file", (), False)
        ),
        FormatResult.create_error(_info("mystery"), "mystery is not a valid rule"),
        FormatResult.create_ignored(_info("js", level="off"), 'ignored because level is "off"'),
    )
    return LintReport(params=PARAMS, passed=False, errored=False, results=results)


def _errored_report(**kwargs: object) -> LintReport:
    return LintReport(
        params=PARAMS,
        passed=False,
        errored=True,
        err_msg="Failed to load ruleset /repo/x.json: No such file or directory",
        **kwargs,
    )


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------


class TestCategorize:
    """Tests for categorize() and summarize()."""

    def test_each_outcome_maps_to_a_category(self) -> None:
        categories = [categorize(r) for r in _sample_report().results]
        assert categories == ["pass", "fail", "warn", "error", "ignored"]

    def test_failed_lint_with_fix_is_still_a_failure(self) -> None:
        outcome = FormatResult.create_lint_and_fix(
            _info("x"), Result("m", (), False), Result("fixed", (), True)
        )
        assert categorize(outcome) == "fail"

    def test_summary_counts(self) -> None:
        assert summarize(_sample_report()) == {
            "error": 1,
            "fail": 1,
            "warn": 1,
            "pass": 1,
            "ignored": 1,
            "total": 5,
        }


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


class TestFormatRich:
    """Tests for format_rich()."""

    def test_one_line_per_rule(self) -> None:
        output = format_rich(_sample_report())
        assert "✔ license: Found file (LICENSE)" in output
        assert "✖ readme: Did not find a file" in output
        assert "⚠ changelog: Did not find a file" in output
        assert "❗ mystery: mystery is not a valid rule" in output
        assert 'ℹ js: ignored because level is "off"' in output

    def test_failing_targets_and_policy_are_listed(self) -> None:
        output = format_rich(_sample_report())
        assert "No README (README*)" in output
        assert "Every repo needs a README (https://x/y)" in output

    def test_summary_line(self) -> None:
        output = format_rich(_sample_report())
        assert output.splitlines()[-1] == (
            "Failed: 1 passed, 1 failed, 1 warnings, 1 errors, 1 ignored"
        )

    def test_plain_output_has_no_ansi_codes(self) -> None:
        assert "\x1b[" not in format_rich(_sample_report())

    def test_errored_report(self) -> None:
        output = format_rich(_errored_report())
        assert output.startswith("Lint failed: Failed to load ruleset")

    def test_fix_wording_follows_dry_run(self) -> None:
        outcome = FormatResult.create_lint_and_fix(
            _info("contributing"),
            Result("Did not find a file", (), False),
            Result("Created file CONTRIBUTING.md", (), True),
        )
        report = LintReport(params=PARAMS, passed=False, errored=False, results=(outcome,))
        assert "Would fix: Created file CONTRIBUTING.md" in format_rich(report, dry_run=True)
        assert "Fixed: Created file CONTRIBUTING.md" in format_rich(report)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestFormatJson:
    """Tests for format_json()."""

    def test_matches_report_dict(self) -> None:
        report = _sample_report()
        data = json.loads(format_json(report, dry_run=True))
        assert data["dryRun"] is True
        assert data["passed"] is False
        assert len(data["results"]) == 5
        assert data["results"][3] == {
            "ruleInfo": _info("mystery").to_dict(),
            "status": "ERROR",
            "message": "mystery is not a valid rule",
        }

    def test_errored_report_carries_message(self) -> None:
        data = json.loads(format_json(_errored_report()))
        assert data["errored"] is True
        assert data["errMsg"].startswith("Failed to load ruleset")
        assert data["results"] == []


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


class TestFormatMarkdown:
    """Tests for format_markdown()."""

    def test_summary_table(self) -> None:
        output = format_markdown(_sample_report())
        assert output.startswith("# Repository Policy Report\n")
        assert "| 1 | 1 | 1 | 1 | 1 | 5 |" in output

    def test_sections_for_non_ignored_outcomes(self) -> None:
        output = format_markdown(_sample_report())
        assert "## ❌ Fail" in output
        assert "### `readme`" in output
        assert "- Every repo needs a README (https://x/y)" in output
        assert "### `js`" not in output

    def test_disclaimer_from_format_options(self) -> None:
        report = LintReport(
            params=PARAMS,
            passed=True,
            errored=False,
            format_options={"disclaimer": "Opened automatically."},
        )
        lines = format_markdown(report).splitlines()
        assert lines[2] == "Opened automatically."

    def test_errored_report(self) -> None:
        output = format_markdown(_errored_report(format_options={"disclaimer": "Bot"}))
        assert "Bot" in output
        assert "Linting failed with a configuration error:" in output
        assert "No such file or directory" in output
