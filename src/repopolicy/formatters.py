# repopolicy:domain=formatters
"""Render a LintReport as console text, JSON, or a Markdown document."""

from __future__ import annotations

import json
from collections import Counter
from io import StringIO
from typing import TYPE_CHECKING

from repopolicy.engine.models import ERROR, IGNORED

if TYPE_CHECKING:
    from repopolicy.engine.models import FormatResult, LintReport

# Outcome categories, in the order reports list them.
CATEGORIES: tuple[str, ...] = ("error", "fail", "warn", "pass", "ignored")

_SYMBOLS: dict[str, tuple[str, str]] = {
    "error": ("❗", "bold red"),
    "fail": ("✖", "red"),
    "warn": ("⚠", "yellow"),
    "pass": ("✔", "green"),
    "ignored": ("ℹ", "dim"),
}


def categorize(result: FormatResult) -> str:
    """Map a per-rule outcome to one of :data:`CATEGORIES`."""
    if result.status == ERROR:
        return "error"
    if result.status == IGNORED:
        return "ignored"
    if result.lint_result is not None and result.lint_result.passed:
        return "pass"
    return "fail" if result.rule_info.level == "error" else "warn"


def summarize(report: LintReport) -> dict[str, int]:
    counts = Counter(categorize(r) for r in report.results)
    summary = {category: counts.get(category, 0) for category in CATEGORIES}
    summary["total"] = len(report.results)
    return summary


def _detail_lines(result: FormatResult, dry_run: bool) -> list[str]:
    lines: list[str] = []
    if result.lint_result is not None:
        for target in result.lint_result.targets:
            if target.passed and categorize(result) != "pass":
                continue
            label = target.path or ""
            message = target.message or ""
            text = f"{label}: {message}" if label and message else label or message
            if text:
                lines.append(text)
    if result.fix_result is not None:
        prefix = "Would fix" if dry_run else "Fixed"
        lines.append(f"{prefix}: {result.fix_result.message}")
    if result.rule_info.policy_info:
        policy = result.rule_info.policy_info
        if result.rule_info.policy_url:
            policy += f" ({result.rule_info.policy_url})"
        lines.append(policy)
    return lines


# ---------------------------------------------------------------------------
# Console
# ---------------------------------------------------------------------------


def format_rich(report: LintReport, dry_run: bool = False, *, color: bool = False) -> str:
    """Format a report as a symbol-per-rule list using Rich markup.

    Example output::

        ✔ license-file-exists: Found file (LICENSE)
        ✖ readme-file-exists: Did not find a file matching the specified patterns
        ℹ python-package-metadata-exists: ignored due to unsatisfied condition(s): ...

        Passed: 1 passed, 1 failed, 0 warnings, 0 errors, 1 ignored

    With *color* the text carries ANSI styles; otherwise it is plain.
    """
    from rich.console import Console
    from rich.text import Text

    buf = StringIO()
    console = Console(
        file=buf,
        force_terminal=color,
        no_color=not color,
        highlight=False,
        soft_wrap=True,
    )

    if report.errored:
        console.print(Text(f"Lint failed: {report.err_msg}", style="bold red"))
        return buf.getvalue().rstrip("\n")

    for result in report.results:
        category = categorize(result)
        symbol, style = _SYMBOLS[category]
        message = result.message
        if message is None and result.lint_result is not None:
            message = result.lint_result.message
        line = Text()
        line.append(f"{symbol} ", style=style)
        line.append(result.rule_info.name, style="bold")
        if message:
            line.append(f": {message}")
        console.print(line)
        for detail in _detail_lines(result, dry_run):
            console.print(Text(f"    {detail}", style="dim"))

    summary = summarize(report)
    console.print()
    verdict_style = "green" if report.passed else "red"
    verdict = Text("Passed" if report.passed else "Failed", style=verdict_style)
    verdict.append(
        f": {summary['pass']} passed, {summary['fail']} failed, {summary['warn']} warnings, "
        f"{summary['error']} errors, {summary['ignored']} ignored",
        style="default",
    )
    console.print(verdict)
    return buf.getvalue().rstrip("\n")


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def format_json(report: LintReport, dry_run: bool = False) -> str:
    """Format a report as the JSON form of :meth:`LintReport.to_dict`."""
    data = report.to_dict()
    data["dryRun"] = dry_run
    return json.dumps(data, indent=2, default=str)


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

_MD_HEADINGS: dict[str, str] = {
    "error": "❗ Error",
    "fail": "❌ Fail",
    "warn": "⚠️ Warn",
    "pass": "✅ Pass",
    "ignored": "Ignored",
}


def format_markdown(report: LintReport, dry_run: bool = False) -> str:
    """Format a report as a Markdown document suitable for an issue body.

    ``formatOptions.disclaimer`` in the ruleset is rendered under the title.
    """
    lines: list[str] = ["# Repository Policy Report", ""]
    options = report.format_options or {}
    disclaimer = options.get("disclaimer")
    if disclaimer:
        lines.extend([str(disclaimer), ""])

    if report.errored:
        lines.extend(
            ["Linting failed with a configuration error:", "", "```", str(report.err_msg), "```"]
        )
        return "\n".join(lines)

    summary = summarize(report)
    lines.append("This run generated the following results:")
    lines.append("")
    lines.append("| " + " | ".join(_MD_HEADINGS[c] for c in CATEGORIES) + " | Total |")
    lines.append("|" + "---|" * (len(CATEGORIES) + 1))
    counts = " | ".join(str(summary[c]) for c in CATEGORIES)
    lines.append(f"| {counts} | {summary['total']} |")

    for category in CATEGORIES:
        if category == "ignored":
            continue
        results = [r for r in report.results if categorize(r) == category]
        if not results:
            continue
        lines.extend(["", f"## {_MD_HEADINGS[category]}", ""])
        for result in results:
            message = result.message
            if message is None and result.lint_result is not None:
                message = result.lint_result.message
            lines.append(f"### `{result.rule_info.name}`")
            lines.append("")
            if message:
                lines.append(message)
                lines.append("")
            for detail in _detail_lines(result, dry_run):
                lines.append(f"- {detail}")
    return "\n".join(lines)
