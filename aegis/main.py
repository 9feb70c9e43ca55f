"""
Typer CLI entry point and orchestration of the analysis pipeline.

- Accepts a .sol file or a directory (scanned recursively)
- Builds the rule set from the registry and the --rules / --ignore-rules options
- Applies the --severity threshold before aggregating, so the summary and the
  exit status reflect exactly what is reported
- Prints a Rich text report or a JSON report

Exit status: 1 if any CRITICAL finding remains after filtering or the target
is invalid, 0 otherwise (including when nothing is found).
"""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from aegis.config import Config, OutputFormat, build_config, get_enabled_rules, parse_rule_ids
from aegis.errors import TargetError
from aegis.findings.aggregate import apply_severity_filter, exit_code, summarize
from aegis.findings.models import Severity
from aegis.reporting.console import print_report
from aegis.reporting.json_report import render_error, render_json
from aegis.rules.registry import RuleRegistry
from aegis.scanner import Scanner

logger = logging.getLogger(__name__)

app = typer.Typer(help="Aegis - static analysis for Solidity smart contracts.")


def _package_version() -> str:
    try:
        return version("aegis-scanner")
    except PackageNotFoundError:  # pragma: no cover
        return "0.1.0-dev"


def _configure_logging(verbose: bool) -> None:
    """Send aegis.* log records to stderr through Rich; WARNING unless verbose."""
    package_logger = logging.getLogger("aegis")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
        )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"aegis {_package_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    show_version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """Aegis - static analysis for Solidity smart contracts."""


@app.command()
def scan(
    target: Path = typer.Argument(..., help="Solidity file or directory to scan."),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT, "--format", "-f", case_sensitive=False, help="Output format."
    ),
    severity: Optional[Severity] = typer.Option(
        None, "--severity", "-s", case_sensitive=False, help="Minimum severity to report."
    ),
    ignore_rules: Optional[str] = typer.Option(
        None, "--ignore-rules", "-i", help="Comma-separated rule ids to skip."
    ),
    only_rules: Optional[str] = typer.Option(
        None, "--rules", "-r", help="Comma-separated rule ids to run (default: all)."
    ),
    quiet: bool = typer.Option(False, "--quiet", help="Suppress banner and summary output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """
    Scan a single Solidity file or all .sol files under a directory.
    """
    _configure_logging(verbose)
    config: Config = build_config(
        only=parse_rule_ids(only_rules),
        ignore=parse_rule_ids(ignore_rules),
        min_severity=severity,
        output_format=output_format,
        quiet=quiet,
    )
    rules = list(get_enabled_rules(config))
    if not rules:
        logger.warning("No rules selected; nothing will be reported")

    scanner = Scanner(rules)
    try:
        results = scanner.scan(target)
    except TargetError as exc:
        if config.output_format is OutputFormat.JSON:
            typer.echo(render_error(str(exc)))
        else:
            typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    results = apply_severity_filter(results, config.min_severity)
    summary = summarize(results)

    if config.output_format is OutputFormat.JSON:
        # Pure JSON on stdout; logs go to stderr.
        typer.echo(render_json(results, summary))
    else:
        print_report(results, summary, quiet=config.quiet)

    raise typer.Exit(code=exit_code(summary))


@app.command("rules")
def list_rules() -> None:
    """List the built-in rules."""
    table = Table(title="Rules", header_style="bold magenta")
    table.add_column("Id", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Name")
    table.add_column("Description")
    for rule in RuleRegistry.default():
        table.add_row(rule.id, rule.severity.value, rule.name, rule.description)
    Console().print(table)


def main() -> None:
    """Entry point for the `aegis` console script and `python -m aegis.main`."""
    app()


if __name__ == "__main__":
    main()
