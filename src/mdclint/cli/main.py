"""CLI entry point - Click commands for mdclint."""

from __future__ import annotations

import dataclasses
import logging
import sys

import click

from mdclint import __version__
from mdclint.cli._loader import LoadError, collect_files
from mdclint.cli._output import (
    format_json,
    format_rules_json,
    format_rules_text,
    format_text,
)
from mdclint.core._types import Severity
from mdclint.core.config import BUILTIN_PROFILES, ConfigError, MdclintConfig, load_config
from mdclint.core.pipeline import run_check
from mdclint.rules import ALL_RULES

_SEVERITIES = [str(s) for s in Severity]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", message="mdclint %(version)s")
def cli() -> None:
    """mdclint - conformance checker for .mdc rule files."""


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--strict",
    is_flag=True,
    help="Require full schema conformance; documents without <rule> become errors.",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option(
    "--min-severity",
    type=click.Choice(_SEVERITIES),
    default="info",
    help="Minimum severity to print.",
)
@click.option("--exclude-rules", default="", help="Comma-separated rule IDs to exclude.")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=False),
    help="Path to .mdclint.toml or pyproject.toml config file.",
)
@click.option(
    "--profile",
    type=click.Choice(list(BUILTIN_PROFILES)),
    default=None,
    help="Rule filter profile (overrides config file profile).",
)
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads (default: CPU count).",
)
@click.option("-q", "--quiet", is_flag=True, help="Only print the summary line.")
@click.option("--no-color", is_flag=True, envvar="NO_COLOR", help="Disable ANSI colors.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def check(
    paths: tuple[str, ...],
    strict: bool,
    fmt: str,
    min_severity: str,
    exclude_rules: str,
    config_path: str | None,
    profile: str | None,
    jobs: int | None,
    quiet: bool,
    no_color: bool,
    verbose: bool,
) -> None:
    """Check rule files and directories of rule files."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config: MdclintConfig = load_config(config_path)
    except ConfigError as exc:
        click.echo(f"Error: invalid config: {exc}", err=True)
        sys.exit(2)

    if profile is not None:
        base = BUILTIN_PROFILES[profile]
        # CLI --profile overrides mode and filter settings; preserve thresholds
        # and merge exclude_rules (config file exclusions are additive).
        config = dataclasses.replace(
            config,
            strict=base.strict,
            min_severity=base.min_severity,
            include_rules=base.include_rules,
            categories=base.categories,
            exclude_rules=base.exclude_rules | config.exclude_rules,
        )

    if strict:
        config = dataclasses.replace(config, strict=True)

    excluded = {r.strip() for r in exclude_rules.split(",") if r.strip()}
    if excluded:
        config = dataclasses.replace(config, exclude_rules=config.exclude_rules | excluded)

    try:
        files = collect_files(paths, extensions=config.extensions, exclude=config.exclude)
    except LoadError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    summary = run_check(files, config=config, jobs=jobs)
    severity = Severity(min_severity)

    if fmt == "json":
        click.echo(format_json(summary, min_severity=severity))
    else:
        click.echo(format_text(summary, min_severity=severity, no_color=no_color, quiet=quiet))

    if summary.exit_code:
        sys.exit(summary.exit_code)


@cli.command()
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format.",
)
@click.option("--no-color", is_flag=True, envvar="NO_COLOR", help="Disable ANSI colors.")
@click.option(
    "--layer",
    default=None,
    type=click.Choice(["general", "frontmatter", "structure", "examples"]),
    help="Filter by layer.",
)
@click.option(
    "--severity",
    "sev",
    default=None,
    type=click.Choice(_SEVERITIES),
    help="Filter by severity.",
)
def rules(fmt: str, no_color: bool, layer: str | None, sev: str | None) -> None:
    """List all validation rules."""
    filtered = list(ALL_RULES)
    if layer is not None:
        filtered = [r for r in filtered if r.layer == layer]
    if sev is not None:
        severity = Severity(sev)
        filtered = [r for r in filtered if r.severity == severity]

    total = len(ALL_RULES) if (layer is not None or sev is not None) else None

    if fmt == "json":
        click.echo(format_rules_json(filtered))
    else:
        click.echo(format_rules_text(filtered, no_color=no_color, total=total))
