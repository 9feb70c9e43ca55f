"""Severity filtering, ordering and per-scan aggregation of findings."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from aegis.findings.models import SEVERITY_ORDER, Finding, ScanResult, Severity, Summary

logger = logging.getLogger(__name__)

Threshold = Union[Severity, str, None]


def filter_by_severity(findings: Sequence[Finding], threshold: Threshold) -> List[Finding]:
    """
    Keep findings at or above threshold (CRITICAL > HIGH > MEDIUM > LOW).

    A missing or unrecognized threshold is a no-op and returns the input
    unchanged (as a new list).
    """
    minimum = Severity.parse(threshold)
    if minimum is None:
        if threshold:
            logger.debug("Ignoring unrecognized severity threshold %r", threshold)
        return list(findings)
    return [f for f in findings if f.severity.at_least(minimum)]


def apply_severity_filter(results: Iterable[ScanResult], threshold: Threshold) -> List[ScanResult]:
    """Return copies of results whose findings have been filtered by threshold."""
    return [r.with_findings(filter_by_severity(r.findings, threshold)) for r in results]


def sort_by_severity(findings: Iterable[Finding]) -> List[Finding]:
    """Most severe first; stable, so rule insertion order is kept within a level."""
    return sorted(findings, key=lambda f: f.severity.rank)


def summarize(results: Sequence[ScanResult]) -> Summary:
    """
    Aggregate counts over already-filtered results.

    Files with an error contribute to ``files`` only; their findings (if any)
    are ignored.
    """
    by_severity = {severity.value: 0 for severity in SEVERITY_ORDER}
    total = 0
    files_with_issues = 0
    for result in results:
        if result.error or not result.findings:
            continue
        files_with_issues += 1
        total += len(result.findings)
        for finding in result.findings:
            by_severity[finding.severity.value] += 1
    return Summary(
        files=len(results),
        total_findings=total,
        by_severity=by_severity,
        files_with_issues=files_with_issues,
    )


def build_report(results: Sequence[ScanResult], summary: Optional[Summary] = None) -> Dict[str, Any]:
    """Aggregate report: {summary, results}."""
    if summary is None:
        summary = summarize(results)
    return {
        "summary": summary.to_dict(),
        "results": [r.to_record() for r in results],
    }


def error_report(message: str) -> Dict[str, Any]:
    """Error-mode report: {error: true, message, summary (all zero), results: []}."""
    return {
        "error": True,
        "message": message,
        "summary": Summary().to_dict(),
        "results": [],
    }


def exit_code(summary: Summary) -> int:
    """1 if any CRITICAL finding survived filtering, else 0."""
    return 1 if summary.count(Severity.CRITICAL) > 0 else 0
