# Unbounded loop detection: every for/while loop is a potential gas-limit problem.

from __future__ import annotations

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.rules.base import make_finding
from aegis.syntax.nodes import ForStatement, WhileStatement
from aegis.syntax.walker import iter_nodes


class UnboundedLoopRule:
    """
    Conservative: flags every for and while loop.

    No attempt is made to prove a bound from the loop condition.
    """

    id = "UNBOUNDED_LOOP"
    name = "Unbounded Loop"
    description = "Detects potentially unbounded loops"
    severity = Severity.MEDIUM

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        for node in iter_nodes(context.tree):
            if isinstance(node, ForStatement):
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        "Potentially unbounded loop - may cause gas limit issues",
                        "Ensure loop has a bounded iteration count to avoid gas limit issues",
                    )
                )
            elif isinstance(node, WhileStatement):
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        "Potentially unbounded while loop - may cause gas limit issues",
                        "Ensure while loop has a bounded iteration count or break condition",
                    )
                )
        return findings
