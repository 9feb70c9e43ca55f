# tx.origin authorization misuse: flags every `tx.origin` member access.

from __future__ import annotations

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.rules.base import make_finding
from aegis.syntax.nodes import Identifier, MemberAccess
from aegis.syntax.walker import iter_nodes


class TxOriginRule:
    """Detects use of tx.origin, which is unsafe for authorization checks."""

    id = "TX_ORIGIN"
    name = "tx.origin Authorization Misuse"
    description = "Detects use of tx.origin for authorization"
    severity = Severity.HIGH

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        for node in iter_nodes(context.tree):
            if not isinstance(node, MemberAccess) or node.member_name != "origin":
                continue
            base = node.expression
            if isinstance(base, Identifier) and base.name == "tx":
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        "Use of tx.origin for authorization - prefer msg.sender",
                        "Use msg.sender instead of tx.origin. tx.origin can be "
                        "manipulated by intermediate contracts in a call chain.",
                    )
                )
        return findings
