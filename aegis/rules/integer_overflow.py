# Integer overflow/underflow detection for pre-0.8 compilers: arithmetic and ++/--.

from __future__ import annotations

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.rules.base import make_finding
from aegis.syntax.nodes import BinaryOperation, UnaryOperation
from aegis.syntax.walker import iter_nodes

# operator -> which way it can wrap
ARITHMETIC_OPERATORS = {
    "+": "overflow",
    "-": "underflow",
    "*": "overflow",
}

STEP_OPERATORS = frozenset({"++", "--"})


class IntegerOverflowRule:
    """
    Flags unchecked arithmetic when the file targets Solidity < 0.8.

    Solidity 0.8.0 and later revert on overflow, so the rule returns nothing
    for those files.
    """

    id = "INTEGER_OVERFLOW"
    name = "Integer Overflow/Underflow"
    description = "Detects potential integer overflow/underflow (only for Solidity < 0.8)"
    severity = Severity.HIGH

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        if context.is_08_plus:
            return findings

        for node in iter_nodes(context.tree):
            if isinstance(node, BinaryOperation) and node.operator in ARITHMETIC_OPERATORS:
                direction = ARITHMETIC_OPERATORS[node.operator]
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        f"Potential integer {direction} - no overflow protection in Solidity < 0.8",
                        "Use SafeMath library or upgrade to Solidity >= 0.8.0 which has "
                        "built-in overflow protection",
                        Severity.HIGH,
                    )
                )
            elif isinstance(node, UnaryOperation) and node.operator in STEP_OPERATORS:
                findings.append(
                    make_finding(
                        self,
                        context,
                        node,
                        "Potential integer overflow/underflow with increment/decrement",
                        "Use SafeMath library or upgrade to Solidity >= 0.8.0",
                        Severity.MEDIUM,
                    )
                )
        return findings
