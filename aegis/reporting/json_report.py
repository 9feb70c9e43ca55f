"""JSON rendering of the aggregate report and of the error-mode report."""

from __future__ import annotations

import json
from typing import Optional, Sequence

from aegis.findings.aggregate import build_report, error_report
from aegis.findings.models import ScanResult, Summary


def render_json(results: Sequence[ScanResult], summary: Optional[Summary] = None) -> str:
    return json.dumps(build_report(results, summary), indent=2)


def render_error(message: str) -> str:
    return json.dumps(error_report(message), indent=2)
