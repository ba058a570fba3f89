"""Tests for the `repopolicy` CLI commands."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

import pytest
from click.testing import CliRunner

from repopolicy import __version__
from repopolicy.cli import main
from repopolicy.engine.config_loader import default_ruleset_path

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

PASSING = {
    "version": 2,
    "rules": {
        "license": {
            "level": "error",
            "rule": {"type": "file-existence", "options": {"globsAny": ["LICENSE"]}},
        },
        "changelog": {
            "level": "warning",
            "rule": {"type": "file-existence", "options": {"globsAny": ["CHANGELOG*"]}},
        },
    },
}

FAILING = {
    "version": 2,
    "rules": {
        "changelog": {
            "level": "error",
            "rule": {"type": "file-existence", "options": {"globsAny": ["CHANGELOG*"]}},
            "fix": {
                "type": "file-create",
                "options": {"file": "CHANGELOG.md", "text": "# Changelog\n"},
            },
        },
    },
}


def _write_ruleset(tmp_path: Path, config: dict[str, object], name: str = "rules.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(config))
    return path


@pytest.fixture(autouse=True)
def _reset_package_log_level() -> Iterator[None]:
    """The group callback sets the package logger level; undo it per test."""
    yield
    logging.getLogger("repopolicy").setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# lint
# ---------------------------------------------------------------------------


class TestLintCommand:
    """Tests for `repopolicy lint`."""

    def test_passing_run_exits_zero(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, PASSING)
        runner = CliRunner()
        result = runner.invoke(main, ["lint", str(tmp_repo), "--ruleset", str(ruleset)])
        assert result.exit_code == 0, result.output
        assert "✔ license: Found file (LICENSE)" in result.output
        assert "⚠ changelog" in result.output
        assert "Passed: 1 passed, 0 failed, 1 warnings, 0 errors, 0 ignored" in result.output

    def test_failing_error_rule_exits_one(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, FAILING)
        runner = CliRunner()
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(ruleset), "--dry-run"]
        )
        assert result.exit_code == 1, result.output
        assert "Would fix: Created file CHANGELOG.md" in result.output
        assert not (tmp_repo / "CHANGELOG.md").exists()

    def test_fix_is_applied_without_dry_run(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, FAILING)
        runner = CliRunner()
        result = runner.invoke(main, ["lint", str(tmp_repo), "-r", str(ruleset)])
        assert result.exit_code == 1, result.output
        assert (tmp_repo / "CHANGELOG.md").read_text() == "# Changelog\n"

    def test_configuration_error_exits_two(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, {"version": 2})
        runner = CliRunner()
        result = runner.invoke(main, ["lint", str(tmp_repo), "-r", str(ruleset)])
        assert result.exit_code == 2
        assert "Lint failed: Configuration validation failed with errors" in result.output

    def test_invalid_format_options_exit_two(self, tmp_repo: Path, tmp_path: Path) -> None:
        config = dict(PASSING, formatOptions="oops")
        ruleset = _write_ruleset(tmp_path, config)
        runner = CliRunner()
        for fmt in ("markdown", "rich"):
            result = runner.invoke(
                main, ["lint", str(tmp_repo), "-r", str(ruleset), "--format", fmt]
            )
            assert result.exit_code == 2, result.output
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(ruleset), "--format", "json"]
        )
        assert result.exit_code == 2, result.output
        data = json.loads(result.output)
        assert data["errored"] is True
        assert "formatOptions" not in data

    def test_missing_ruleset_exits_two(self, tmp_repo: Path, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(tmp_path / "missing.json")]
        )
        assert result.exit_code == 2
        assert "Failed to load ruleset" in result.output

    def test_json_format(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, PASSING)
        runner = CliRunner()
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(ruleset), "--format", "json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["passed"] is True
        assert data["dryRun"] is False
        assert [r["ruleInfo"]["name"] for r in data["results"]] == ["license", "changelog"]
        assert data["params"]["rulesetPath"] == str(ruleset.resolve())

    def test_markdown_format(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, PASSING)
        runner = CliRunner()
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(ruleset), "--format", "markdown"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.startswith("# Repository Policy Report")

    def test_allow_paths_restricts_search(self, tmp_repo: Path, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, PASSING)
        runner = CliRunner()
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(ruleset), "-a", "src", "--format", "json"]
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["params"]["filterPaths"] == ["src"]

    def test_default_ruleset_on_discovered_repo(self, tmp_repo: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            main, ["lint", str(tmp_repo), "-r", str(default_ruleset_path()), "--format", "json"]
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        statuses = {r["ruleInfo"]["name"]: r["status"] for r in data["results"]}
        assert statuses["license-file-exists"] == "LINT_ONLY"
        assert statuses["javascript-package-metadata-exists"] == "IGNORED"
        assert statuses["python-package-metadata-exists"] == "LINT_ONLY"
        assert set(data["targets"]) == {"language", "package-manager"}

    def test_nonexistent_target_dir(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["lint", str(tmp_path / "nope")])
        assert result.exit_code == 2
        assert "does not exist" in result.output


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidateCommand:
    """Tests for `repopolicy validate`."""

    def test_valid_ruleset(self, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, PASSING)
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(ruleset)])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == f"{ruleset}: valid (2 rules)"

    def test_valid_yaml_ruleset(self, tmp_path: Path) -> None:
        path = tmp_path / "repopolicy.yml"
        path.write_text(
            "rules:\n"
            "  all:\n"
            "    license-exists:file-existence: [error, {globsAny: [LICENSE]}]\n"
        )
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 0, result.output
        assert "valid (1 rules)" in result.output

    def test_invalid_ruleset(self, tmp_path: Path) -> None:
        config = {
            "version": 2,
            "rules": {
                "r": {"level": "error", "rule": {"type": "file-existence", "options": {}}}
            },
        }
        ruleset = _write_ruleset(tmp_path, config)
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(ruleset)])
        assert result.exit_code == 2
        assert "configuration.rules.r.rule.options" in result.output

    def test_unparseable_ruleset(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.json"
        path.write_text("{")
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(path)])
        assert result.exit_code == 2
        assert "Error: Failed to load ruleset" in result.output

    def test_bundled_default_is_valid(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["validate", str(default_ruleset_path())])
        assert result.exit_code == 0, result.output


# ---------------------------------------------------------------------------
# group
# ---------------------------------------------------------------------------


class TestGroup:
    """Tests for the top-level command group."""

    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "lint" in result.output
        assert "validate" in result.output

    def test_verbosity_flags_set_package_log_level(self, tmp_path: Path) -> None:
        ruleset = _write_ruleset(tmp_path, PASSING)
        package_logger = logging.getLogger("repopolicy")
        runner = CliRunner()
        cases = ((["--verbose"], logging.DEBUG), (["-q"], logging.ERROR), ([], logging.WARNING))
        for flags, level in cases:
            result = runner.invoke(main, [*flags, "validate", str(ruleset)])
            assert result.exit_code == 0, result.output
            assert package_logger.level == level
