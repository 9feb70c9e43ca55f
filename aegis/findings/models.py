# Pydantic data models for scan output: Severity, Finding, ScanResult, Summary.

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Finding severity, most severe first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """0 for CRITICAL up to 3 for LOW; lower is more severe."""
        return SEVERITY_ORDER.index(self)

    def at_least(self, threshold: Severity) -> bool:
        """True if this severity is equal to or more severe than threshold."""
        return self.rank <= threshold.rank

    @classmethod
    def parse(cls, value: Any) -> Optional[Severity]:
        """Return the matching Severity (case-insensitive), or None if unrecognized."""
        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)

_MODEL_CONFIG = {
    "frozen": True,
    "alias_generator": to_camel,
    "populate_by_name": True,
}


class Finding(BaseModel):
    """A single issue reported by a rule (e.g. reentrancy at line 42)."""

    rule_id: str
    severity: Severity
    message: str
    file: str
    line: int = Field(0, ge=0, description="1-based line number, 0 if unknown")
    column: int = Field(0, ge=0, description="1-based column number, 0 if unknown")
    suggestion: str = ""

    model_config = _MODEL_CONFIG

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ScanStatus(str, Enum):
    OK = "ok"
    PARSE_ERROR = "parse_error"
    IO_ERROR = "io_error"


class ScanResult(BaseModel):
    """
    Outcome of scanning one file.

    Exactly one of ``findings`` and ``error`` is meaningful: when ``error`` is
    set (parse or read failure) the findings list is empty.
    """

    file: str
    version: Optional[str] = None
    findings: List[Finding] = Field(default_factory=list)
    error: Optional[str] = None
    status: ScanStatus = ScanStatus.OK

    model_config = _MODEL_CONFIG

    @property
    def ok(self) -> bool:
        return self.status is ScanStatus.OK

    def with_findings(self, findings: List[Finding]) -> ScanResult:
        return self.model_copy(update={"findings": list(findings)})

    def to_record(self) -> Dict[str, Any]:
        """Result record handed to reporters: {file, version, error, findings}."""
        return {
            "file": self.file,
            "version": self.version,
            "error": self.error,
            "findings": [] if self.error else [f.to_dict() for f in self.findings],
        }


def _zero_counts() -> Dict[str, int]:
    return {severity.value: 0 for severity in SEVERITY_ORDER}


class Summary(BaseModel):
    """Aggregate counts over a set of results. Always derived, never stored."""

    files: int = 0
    total_findings: int = 0
    by_severity: Dict[str, int] = Field(default_factory=_zero_counts)
    files_with_issues: int = 0

    model_config = _MODEL_CONFIG

    def count(self, severity: Severity) -> int:
        return self.by_severity.get(severity.value, 0)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
