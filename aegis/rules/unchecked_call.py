# Unchecked low-level call detection: call, delegatecall, callcode and send.

from __future__ import annotations

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.rules.base import callee_member_name, make_finding
from aegis.syntax.nodes import FunctionCall
from aegis.syntax.walker import iter_nodes

LOW_LEVEL_CALLS = frozenset({"call", "delegatecall", "callcode", "send"})


class UncheckedCallRule:
    """
    Flags every low-level call whose callee is a member access.

    Whether the return value is checked afterwards is not inspected, so
    `require(to.send(x))` is reported too.
    """

    id = "UNCHECKED_CALL"
    name = "Unchecked Low-Level Call"
    description = "Detects unchecked low-level calls"
    severity = Severity.HIGH

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        for node in iter_nodes(context.tree):
            if not isinstance(node, FunctionCall):
                continue
            member = callee_member_name(node)
            if member not in LOW_LEVEL_CALLS:
                continue
            findings.append(
                make_finding(
                    self,
                    context,
                    node,
                    f"Low-level call: {member}. Always check the return value.",
                    f"Check the return value of {member} or use a try-catch block. "
                    "Low-level calls can fail silently.",
                )
            )
        return findings
