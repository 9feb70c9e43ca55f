# Rich console output: format scan results for terminal display.

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from aegis.findings.aggregate import sort_by_severity
from aegis.findings.models import SEVERITY_ORDER, Finding, ScanResult, Severity, Summary

# Severity -> Rich style
SEVERITY_STYLE = {
    Severity.CRITICAL: "bold red",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
}

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: Severity) -> str:
    return SEVERITY_STYLE.get(severity, DEFAULT_SEVERITY_STYLE)


def print_report(
    results: Sequence[ScanResult],
    summary: Summary,
    console: Console | None = None,
    quiet: bool = False,
) -> None:
    """
    Print results grouped by file, most severe findings first.

    Files with a read/parse error are listed with their error unless quiet.
    quiet also drops the banner and the summary footer.
    """
    if console is None:
        console = Console()

    if not quiet:
        console.print(Text("Aegis Scan Results", style="bold"))

    for result in results:
        if not result.ok:
            if not quiet:
                error = result.error or result.status.value
                console.print(f"[red]Error in {escape(result.file)}: {escape(error)}[/red]")
            continue
        if result.findings:
            _print_file(result, console)

    if not quiet:
        _print_summary(summary, console)


def _print_file(result: ScanResult, console: Console) -> None:
    header = f"[bold cyan]{escape(result.file)}[/bold cyan]"
    if result.version:
        header += f" [dim](Solidity {escape(result.version)})[/dim]"
    console.print()
    console.print(Panel(header, box=box.SIMPLE_HEAD, border_style="blue", padding=(0, 1)))

    table = Table(
        show_header=True,
        header_style="bold magenta",
        box=box.SIMPLE,
        padding=(0, 1),
        expand=False,
    )
    table.add_column("Severity", width=10, no_wrap=True)
    table.add_column("Rule", no_wrap=True)
    table.add_column("Line", justify="right", style="dim", no_wrap=True)
    table.add_column("Message", style="white")

    findings = sort_by_severity(result.findings)
    for f in findings:
        table.add_row(
            Text(f.severity.value, style=_severity_style(f.severity)),
            Text(f.rule_id, style="dim"),
            _format_position(f),
            Text(f.message),
        )
    console.print(table)

    # Suggestions, once per rule in this file
    seen_rules: set[str] = set()
    for f in findings:
        if f.suggestion and f.rule_id not in seen_rules:
            seen_rules.add(f.rule_id)
            console.print(f"  [cyan][Fix][/cyan] [dim]{f.rule_id}[/dim] {escape(f.suggestion)}")


def _format_position(finding: Finding) -> str:
    if finding.line <= 0:
        return "-"
    return f"{finding.line}:{finding.column}"


def _print_summary(summary: Summary, console: Console) -> None:
    """Print a compact summary of the scan."""
    total = summary.total_findings
    lines = [
        f"Files scanned: {summary.files}",
        f"Files with issues: {summary.files_with_issues}",
        f"Total findings: {total}",
    ]
    for severity in SEVERITY_ORDER:
        count = summary.count(severity)
        if count > 0:
            lines.append(f"[{_severity_style(severity)}]{severity.value}: {count}[/]")

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="Summary",
            border_style="yellow" if total > 0 else "green",
            box=box.ROUNDED,
        )
    )
