# Deprecated construct detection: callcode, suicide and throw.

from __future__ import annotations

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.rules.base import callee_identifier_name, callee_member_name, make_finding
from aegis.syntax.nodes import FunctionCall, ThrowStatement
from aegis.syntax.walker import iter_nodes

# name -> remediation
DEPRECATED_ITEMS = {
    "callcode": "callcode is deprecated, use delegatecall instead",
    "suicide": "suicide is deprecated, use selfdestruct instead",
    "throw": "throw is deprecated, use revert() or require() instead",
}


class DeprecatedRule:
    """Table-driven, exact-name match on call targets and `throw` statements."""

    id = "DEPRECATED"
    name = "Deprecated Functions/Opcodes"
    description = "Detects usage of deprecated Solidity functions and opcodes"
    severity = Severity.MEDIUM

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        for node in iter_nodes(context.tree):
            if isinstance(node, ThrowStatement):
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        "Use of deprecated statement: throw",
                        DEPRECATED_ITEMS["throw"],
                    )
                )
                continue
            if not isinstance(node, FunctionCall):
                continue

            name = callee_identifier_name(node)
            if name in DEPRECATED_ITEMS:
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        f"Use of deprecated function: {name}",
                        DEPRECATED_ITEMS[name],
                    )
                )
                continue

            member = callee_member_name(node)
            if member in DEPRECATED_ITEMS:
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        f"Use of deprecated opcode/function: {member}",
                        DEPRECATED_ITEMS[member],
                    )
                )
        return findings
