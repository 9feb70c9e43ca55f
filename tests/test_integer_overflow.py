"""Unit tests for the integer_overflow rule."""

import pytest

from aegis.context import ScanContext
from aegis.findings.models import Severity
from aegis.parser import is_version_08_or_higher
from aegis.rules.integer_overflow import IntegerOverflowRule
from aegis.syntax.nodes import (
    Assignment,
    BinaryOperation,
    Block,
    ExpressionStatement,
    FunctionDefinition,
    Identifier,
    Location,
    SourceUnit,
    UnaryOperation,
)


def _run_rule(*expressions, version: str | None = "^0.7.6") -> list:
    """Place expressions in a function body, build a context, run IntegerOverflowRule."""
    statements = [ExpressionStatement(expression=e) for e in expressions]
    tree = SourceUnit(children=[FunctionDefinition(name="f", body=Block(statements=statements))])
    ctx = ScanContext(
        path="Math.sol",
        source="",
        tree=tree,
        version=version,
        is_08_plus=is_version_08_or_higher(version),
    )
    return IntegerOverflowRule().check(ctx)


def _binary(op: str, line: int = 4) -> BinaryOperation:
    return BinaryOperation(
        operator=op,
        left=Identifier(name="a"),
        right=Identifier(name="b"),
        loc=Location(line, 16),
    )


@pytest.mark.parametrize(
    "op, word",
    [("+", "overflow"), ("-", "underflow"), ("*", "overflow")],
)
def test_arithmetic_flagged_before_08(op, word):
    findings = _run_rule(_binary(op))
    assert len(findings) == 1
    assert findings[0].rule_id == "INTEGER_OVERFLOW"
    assert findings[0].severity == Severity.HIGH
    assert word in findings[0].message
    assert (findings[0].line, findings[0].column) == (4, 16)


@pytest.mark.parametrize("op", ["/", "%", "==", "<", "&&", "**"])
def test_other_operators_ignored(op):
    assert _run_rule(_binary(op)) == []


@pytest.mark.parametrize("op", ["++", "--"])
def test_increment_decrement_is_medium(op):
    findings = _run_rule(UnaryOperation(operator=op, sub_expression=Identifier(name="i")))
    assert len(findings) == 1
    assert findings[0].severity == Severity.MEDIUM


def test_other_unary_ignored():
    assert _run_rule(UnaryOperation(operator="!", sub_expression=Identifier(name="ok"))) == []


def test_compound_assignment_not_flagged():
    """`x -= y` is an assignment, not a binary arithmetic node."""
    assignment = Assignment(operator="-=", left=Identifier(name="x"), right=Identifier(name="y"))
    assert _run_rule(assignment) == []


def test_nested_arithmetic_each_reported():
    expr = BinaryOperation(operator="*", left=_binary("+"), right=Identifier(name="c"))
    findings = _run_rule(expr)
    assert len(findings) == 2


@pytest.mark.parametrize("version", ["^0.8.0", "0.8.5", ">=0.8.0", "0.9.0"])
def test_suppressed_for_08_and_later(version):
    findings = _run_rule(
        _binary("+"),
        UnaryOperation(operator="++", sub_expression=Identifier(name="i")),
        version=version,
    )
    assert findings == []


def test_no_pragma_is_treated_as_pre_08():
    assert len(_run_rule(_binary("-"), version=None)) == 1
