# Rule interface (protocol): the contract every rule implements, plus shared finding helpers.
# Concrete rules (reentrancy, tx_origin, etc.) are plain classes satisfying Rule; no base class.

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.syntax.nodes import FunctionCall, Identifier, MemberAccess, NameValueExpression, Node


@runtime_checkable
class Rule(Protocol):
    """
    Protocol implemented by all rules.

    Attributes:
    - id (str): unique rule identifier (e.g. "REENTRANCY")
    - name (str): human-readable rule name
    - description (str): one-line description of what is detected
    - severity (Severity): default severity; a rule may emit others

    check() must not mutate the context. It may raise on a malformed tree; the
    scanner isolates each rule and discards its findings in that case.
    """

    id: str
    name: str
    description: str
    severity: Severity

    def check(self, context: ScanContext) -> list[Finding]:
        """Analyze one file and return its findings in detection order."""
        ...


def make_finding(
    rule: Rule,
    context: ScanContext,
    node: Optional[Node],
    message: str,
    suggestion: str = "",
    severity: Optional[Severity] = None,
) -> Finding:
    """Build a finding for rule anchored at node's start (0/0 when unknown)."""
    line = node.line if node is not None else 0
    column = node.column if node is not None else 0
    return Finding(
        rule_id=rule.id,
        severity=severity or rule.severity,
        message=message,
        file=context.path,
        line=max(line, 0),
        column=max(column, 0),
        suggestion=suggestion,
    )


def callee_member_name(call: FunctionCall, unwrap_options: bool = False) -> Optional[str]:
    """
    Member name of a call's callee (``x.transfer(...)`` -> "transfer"), or None.

    With unwrap_options, the value-attached form ``x.call{value: v}(...)`` is
    looked through as well.
    """
    callee = call.expression
    if unwrap_options and isinstance(callee, NameValueExpression):
        callee = callee.expression
    if isinstance(callee, MemberAccess):
        return callee.member_name
    return None


def callee_identifier_name(call: FunctionCall) -> Optional[str]:
    """Name of a bare-identifier callee (``suicide(owner)`` -> "suicide"), or None."""
    if isinstance(call.expression, Identifier):
        return call.expression.name
    return None
