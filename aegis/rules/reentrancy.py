"""
Reentrancy detection: an external call followed, later in the source, by a
storage write in the same function.

This is a line-order heuristic, not control-flow analysis. A write on any
later line counts, even one in a branch that cannot run after the call, and a
write on the same line as the call never does. Functions marked ``view`` or
``pure``, or guarded by a ``nonReentrant`` modifier, are skipped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from aegis.context import ScanContext
from aegis.findings.models import Finding, Severity
from aegis.rules.base import callee_member_name, make_finding
from aegis.syntax.nodes import (
    Assignment,
    Block,
    ExpressionStatement,
    ForStatement,
    FunctionCall,
    FunctionDefinition,
    Identifier,
    IfStatement,
    IndexAccess,
    MemberAccess,
    Node,
    WhileStatement,
)
from aegis.syntax.walker import find_all, iter_children

EXTERNAL_CALLS = frozenset({"call", "delegatecall", "send", "transfer"})
WRITE_OPERATORS = frozenset({"=", "+=", "-=", "*=", "/="})
READ_ONLY_MUTABILITY = frozenset({"view", "pure"})
GUARD_MODIFIER = "nonReentrant"

MESSAGE = "Potential reentrancy: State modification after external call detected"
SUGGESTION = (
    "Follow checks-effects-interactions pattern: update state before external calls, "
    "or use ReentrancyGuard"
)


@dataclass
class Operations:
    """External calls and storage writes of one function body, in traversal order."""

    external_calls: list[Node] = field(default_factory=list)
    storage_writes: list[Node] = field(default_factory=list)


def is_external_call(node: Node) -> bool:
    """A call whose callee is `.call/.delegatecall/.send/.transfer`, with or without `{value: ...}`."""
    if not isinstance(node, FunctionCall):
        return False
    return callee_member_name(node, unwrap_options=True) in EXTERNAL_CALLS


def is_storage_write(node: Node) -> bool:
    """
    An assignment (=, +=, -=, *=, /=) to an index access, member access or identifier.

    Locals cannot be told apart from state variables without symbol
    resolution, so every such target counts.
    """
    if not isinstance(node, Assignment) or node.operator not in WRITE_OPERATORS:
        return False
    target = node.left
    if isinstance(target, (IndexAccess, MemberAccess)):
        return True
    return isinstance(target, Identifier) and bool(target.name)


def _structural_children(node: Node) -> list[Optional[Node]]:
    """
    Children followed when collecting operations.

    Conditionals contribute both branches and loops their body; the
    condition, initializer and update clauses are not searched.
    """
    if isinstance(node, Block):
        return list(node.statements)
    if isinstance(node, IfStatement):
        return [node.true_body, node.false_body]
    if isinstance(node, (ForStatement, WhileStatement)):
        return [node.body]
    if isinstance(node, ExpressionStatement):
        return [node.expression]
    return list(iter_children(node))


def collect_operations(body: Node) -> Operations:
    """Single pre-order pass over a function body."""
    ops = Operations()
    stack: list[Node] = [body]
    while stack:
        node = stack.pop()
        if is_external_call(node):
            ops.external_calls.append(node)
        if is_storage_write(node):
            ops.storage_writes.append(node)
        children = [c for c in _structural_children(node) if c is not None]
        stack.extend(reversed(children))
    return ops


def should_skip(function: FunctionDefinition) -> bool:
    """view/pure functions cannot write state; nonReentrant is trusted."""
    if function.state_mutability in READ_ONLY_MUTABILITY:
        return True
    return function.has_modifier(GUARD_MODIFIER)


class ReentrancyRule:
    """Detects potential reentrancy: state written after an external call."""

    id = "REENTRANCY"
    name = "Reentrancy Vulnerability"
    description = "Detects potential reentrancy vulnerabilities in external calls"
    severity = Severity.CRITICAL

    def check(self, context: ScanContext) -> list[Finding]:
        findings: list[Finding] = []
        for function in find_all(context.tree, FunctionDefinition):
            if should_skip(function):
                continue
            findings.extend(self._check_function(context, function))
        return findings

    def _check_function(self, context: ScanContext, function: FunctionDefinition) -> list[Finding]:
        if function.body is None:
            return []
        ops = collect_operations(function.body)
        if not ops.external_calls or not ops.storage_writes:
            return []

        findings: list[Finding] = []
        for call in ops.external_calls:
            call_line = call.line
            if call_line <= 0:
                continue
            # One finding per call, however many writes follow it.
            if any(write.line > call_line for write in ops.storage_writes):
                findings.append(make_finding(self, context, call, MESSAGE, SUGGESTION))
        return findings
