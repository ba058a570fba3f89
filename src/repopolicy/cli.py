"""repopolicy CLI entry point."""

# repopolicy:service=cli

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from repopolicy import __version__


# repopolicy:service=cli
@click.group()
@click.version_option(version=__version__, prog_name="repopolicy")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
def main(*, verbose: bool, quiet: bool) -> None:
    """repopolicy - check a repository against a declarative ruleset."""
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger("repopolicy").setLevel(level)


# repopolicy:domain=engine
@main.command()
@click.argument(
    "target_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
)
@click.option(
    "--ruleset",
    "-r",
    "ruleset_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Ruleset file (default: nearest repopolicy.{json,yaml,yml}).",
)
@click.option(
    "--allow-paths",
    "-a",
    "allow_paths",
    multiple=True,
    help="Only lint files under this directory (repeatable).",
)
@click.option(
    "--dry-run",
    "-d",
    is_flag=True,
    default=False,
    help="Report fixes without modifying files.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["rich", "json", "markdown"]),
    default=None,
    help="Output format (default: rich).",
)
def lint(
    *,
    target_dir: Path,
    ruleset_path: Path | None,
    allow_paths: tuple[str, ...],
    dry_run: bool,
    fmt: str | None,
) -> None:
    """Lint TARGET_DIR against a ruleset.

    Exit codes: 0 = passed, 1 = an error-level rule failed or a rule errored,
    2 = configuration error.
    """
    from repopolicy.engine.linter import lint as run_lint
    from repopolicy.formatters import format_json, format_markdown, format_rich

    report = run_lint(
        target_dir,
        allow_paths,
        ruleset_path.resolve() if ruleset_path is not None else None,
        dry_run,
    )

    if fmt in (None, "rich"):
        output = format_rich(report, dry_run, color=sys.stdout.isatty())
    elif fmt == "json":
        output = format_json(report, dry_run)
    else:
        output = format_markdown(report, dry_run)
    click.echo(output)

    if report.errored:
        sys.exit(2)
    if not report.passed:
        sys.exit(1)


@main.command()
@click.argument("ruleset_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(*, ruleset_path: Path) -> None:
    """Validate a ruleset file without running it."""
    from repopolicy.engine.config_loader import load_ruleset
    from repopolicy.engine.errors import RulesetLoadError
    from repopolicy.engine.normalizer import parse_config
    from repopolicy.engine.schema import validate_config

    try:
        config = load_ruleset(ruleset_path)
    except RulesetLoadError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    result = validate_config(config)
    if not result.passed:
        click.echo(result.error, err=True)
        sys.exit(2)

    rules = parse_config(config)
    click.echo(f"{ruleset_path}: valid ({len(rules)} rules)")
