"""Tests for severity filtering, summaries and report shapes."""

import pytest

from aegis.findings.aggregate import (
    apply_severity_filter,
    build_report,
    error_report,
    exit_code,
    filter_by_severity,
    sort_by_severity,
    summarize,
)
from aegis.findings.models import Finding, ScanResult, ScanStatus, Severity, Summary


def _finding(severity: Severity, rule_id: str = "R", line: int = 1) -> Finding:
    return Finding(rule_id=rule_id, severity=severity, message="m", file="A.sol", line=line)


def test_filter_keeps_threshold_and_above():
    findings = [_finding(Severity.CRITICAL), _finding(Severity.LOW)]
    kept = filter_by_severity(findings, Severity.HIGH)
    assert [f.severity for f in kept] == [Severity.CRITICAL]


def test_filter_is_inclusive():
    findings = [_finding(s) for s in (Severity.LOW, Severity.MEDIUM, Severity.HIGH)]
    kept = filter_by_severity(findings, "medium")
    assert [f.severity for f in kept] == [Severity.MEDIUM, Severity.HIGH]


@pytest.mark.parametrize("threshold", [None, "", "URGENT", 3])
def test_unknown_threshold_is_noop(threshold):
    findings = [_finding(Severity.LOW), _finding(Severity.CRITICAL)]
    kept = filter_by_severity(findings, threshold)
    assert kept == findings
    assert kept is not findings


def test_apply_severity_filter_keeps_errors():
    results = [
        ScanResult(file="A.sol", findings=[_finding(Severity.LOW)]),
        ScanResult(file="B.sol", error="boom", status=ScanStatus.PARSE_ERROR),
    ]
    filtered = apply_severity_filter(results, Severity.HIGH)
    assert filtered[0].findings == []
    assert filtered[1].error == "boom"
    assert results[0].findings


def test_sort_by_severity_is_stable():
    findings = [
        _finding(Severity.LOW, "A"),
        _finding(Severity.CRITICAL, "B"),
        _finding(Severity.LOW, "C"),
        _finding(Severity.HIGH, "D"),
    ]
    assert [f.rule_id for f in sort_by_severity(findings)] == ["B", "D", "A", "C"]


def test_summarize_counts():
    results = [
        ScanResult(file="A.sol", findings=[_finding(Severity.CRITICAL), _finding(Severity.MEDIUM)]),
        ScanResult(file="B.sol"),
        ScanResult(file="C.sol", findings=[_finding(Severity.MEDIUM)]),
        ScanResult(file="D.sol", error="unreadable", status=ScanStatus.IO_ERROR),
    ]
    summary = summarize(results)
    assert summary.files == 4
    assert summary.total_findings == 3
    assert summary.files_with_issues == 2
    assert summary.by_severity == {"CRITICAL": 1, "HIGH": 0, "MEDIUM": 2, "LOW": 0}
    assert sum(summary.by_severity.values()) == summary.total_findings


def test_summarize_empty():
    summary = summarize([])
    assert summary.files == 0
    assert summary.total_findings == 0
    assert summary.by_severity == {"CRITICAL": 0, "HIGH": 0, "MEDIUM": 0, "LOW": 0}


def test_exit_code():
    assert exit_code(Summary()) == 0
    assert exit_code(summarize([ScanResult(file="A.sol", findings=[_finding(Severity.HIGH)])])) == 0
    assert exit_code(summarize([ScanResult(file="A.sol", findings=[_finding(Severity.CRITICAL)])])) == 1


def test_build_report_shape():
    results = [
        ScanResult(file="A.sol", version="^0.8.0", findings=[_finding(Severity.HIGH, "TX_ORIGIN", 7)]),
        ScanResult(file="B.sol", error="Parse error in B.sol: syntax error at line 2", status=ScanStatus.PARSE_ERROR),
    ]
    report = build_report(results)
    assert report["summary"] == {
        "files": 2,
        "totalFindings": 1,
        "bySeverity": {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 0, "LOW": 0},
        "filesWithIssues": 1,
    }
    first, second = report["results"]
    assert first["file"] == "A.sol"
    assert first["version"] == "^0.8.0"
    assert first["error"] is None
    assert first["findings"] == [
        {
            "ruleId": "TX_ORIGIN",
            "severity": "HIGH",
            "message": "m",
            "file": "A.sol",
            "line": 7,
            "column": 0,
            "suggestion": "",
        }
    ]
    assert second["version"] is None
    assert second["findings"] == []
    assert second["error"].startswith("Parse error")


def test_error_report_shape():
    report = error_report("Target not found: nope")
    assert report["error"] is True
    assert report["message"] == "Target not found: nope"
    assert report["results"] == []
    assert report["summary"]["totalFindings"] == 0
    assert report["summary"]["files"] == 0
