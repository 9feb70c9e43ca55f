"""Unit tests for the tx_origin, unchecked_call, unbounded_loop and deprecated rules."""

import pytest

from aegis.context import ScanContext
from aegis.findings.models import Severity
from aegis.rules.deprecated import DeprecatedRule
from aegis.rules.tx_origin import TxOriginRule
from aegis.rules.unbounded_loop import UnboundedLoopRule
from aegis.rules.unchecked_call import UncheckedCallRule
from aegis.syntax.nodes import (
    Block,
    DoWhileStatement,
    ExpressionStatement,
    ForStatement,
    FunctionCall,
    FunctionDefinition,
    Identifier,
    IfStatement,
    Location,
    MemberAccess,
    NameValueExpression,
    SourceUnit,
    ThrowStatement,
    WhileStatement,
)


def _run_rule(rule, *statements) -> list:
    """Place statements in a function body, build a context, run rule."""
    body = Block(statements=[s if not _is_expression(s) else ExpressionStatement(expression=s) for s in statements])
    tree = SourceUnit(children=[FunctionDefinition(name="f", body=body)])
    ctx = ScanContext(path="contracts/Wallet.sol", source="", tree=tree)
    return rule.check(ctx)


def _is_expression(node) -> bool:
    return isinstance(node, (FunctionCall, MemberAccess, Identifier))


def _member_call(obj: str, member: str, line: int = 3) -> FunctionCall:
    return FunctionCall(
        expression=MemberAccess(expression=Identifier(name=obj), member_name=member),
        loc=Location(line, 5),
    )


# --- tx.origin --------------------------------------------------------------


def test_tx_origin_detected():
    access = MemberAccess(expression=Identifier(name="tx"), member_name="origin", loc=Location(7, 17))
    findings = _run_rule(TxOriginRule(), access)
    assert len(findings) == 1
    assert findings[0].rule_id == "TX_ORIGIN"
    assert findings[0].severity == Severity.HIGH
    assert findings[0].file == "contracts/Wallet.sol"
    assert (findings[0].line, findings[0].column) == (7, 17)
    assert "msg.sender" in findings[0].suggestion


def test_tx_origin_inside_condition_detected():
    cond = FunctionCall(
        expression=Identifier(name="require"),
        arguments=[MemberAccess(expression=Identifier(name="tx"), member_name="origin")],
    )
    assert len(_run_rule(TxOriginRule(), cond)) == 1


def test_origin_on_other_base_ignored():
    access = MemberAccess(expression=Identifier(name="msg"), member_name="origin")
    assert _run_rule(TxOriginRule(), access) == []


def test_tx_other_member_ignored():
    access = MemberAccess(expression=Identifier(name="tx"), member_name="gasprice")
    assert _run_rule(TxOriginRule(), access) == []


def test_nested_base_not_matched():
    """Only the exact two-level pattern `tx.origin` matches."""
    inner = MemberAccess(expression=Identifier(name="a"), member_name="tx")
    access = MemberAccess(expression=inner, member_name="origin")
    assert _run_rule(TxOriginRule(), access) == []


# --- unchecked low-level calls ---------------------------------------------


@pytest.mark.parametrize("member", ["call", "delegatecall", "callcode", "send"])
def test_low_level_calls_flagged(member):
    findings = _run_rule(UncheckedCallRule(), _member_call("target", member))
    assert len(findings) == 1
    assert findings[0].rule_id == "UNCHECKED_CALL"
    assert findings[0].severity == Severity.HIGH
    assert member in findings[0].message


def test_transfer_not_flagged_as_unchecked():
    assert _run_rule(UncheckedCallRule(), _member_call("to", "transfer")) == []


def test_checked_call_still_flagged():
    """The return value is not inspected: require(to.send(x)) is reported."""
    wrapped = FunctionCall(expression=Identifier(name="require"), arguments=[_member_call("to", "send")])
    assert len(_run_rule(UncheckedCallRule(), wrapped)) == 1


def test_bare_identifier_call_not_flagged():
    call = FunctionCall(expression=Identifier(name="call"))
    assert _run_rule(UncheckedCallRule(), call) == []


def test_value_attached_form_not_matched_by_unchecked_call():
    """The callee of `x.call{value: v}()` is the options wrapper, not a member access."""
    callee = NameValueExpression(
        expression=MemberAccess(expression=Identifier(name="x"), member_name="call"),
        names=["value"],
        values=[Identifier(name="v")],
    )
    assert _run_rule(UncheckedCallRule(), FunctionCall(expression=callee)) == []


# --- unbounded loops -------------------------------------------------------


def test_for_loop_flagged():
    loop = ForStatement(condition=Identifier(name="cond"), body=Block(), loc=Location(4, 9))
    findings = _run_rule(UnboundedLoopRule(), loop)
    assert len(findings) == 1
    assert findings[0].rule_id == "UNBOUNDED_LOOP"
    assert findings[0].severity == Severity.MEDIUM
    assert findings[0].line == 4
    assert "while" not in findings[0].message


def test_while_loop_flagged():
    loop = WhileStatement(condition=Identifier(name="cond"), body=Block())
    findings = _run_rule(UnboundedLoopRule(), loop)
    assert len(findings) == 1
    assert "while" in findings[0].message


def test_nested_loops_each_flagged():
    inner = WhileStatement(condition=Identifier(name="c"), body=Block())
    outer = ForStatement(body=Block(statements=[inner]))
    assert len(_run_rule(UnboundedLoopRule(), outer)) == 2


def test_do_while_not_flagged():
    loop = DoWhileStatement(body=Block(), condition=Identifier(name="c"))
    assert _run_rule(UnboundedLoopRule(), loop) == []


def test_no_loops_no_findings():
    branch = IfStatement(condition=Identifier(name="c"), true_body=Block())
    assert _run_rule(UnboundedLoopRule(), branch) == []


# --- deprecated constructs -------------------------------------------------


def test_suicide_call_flagged():
    call = FunctionCall(expression=Identifier(name="suicide"), arguments=[Identifier(name="owner")])
    findings = _run_rule(DeprecatedRule(), call)
    assert len(findings) == 1
    assert findings[0].rule_id == "DEPRECATED"
    assert findings[0].severity == Severity.MEDIUM
    assert findings[0].message == "Use of deprecated function: suicide"
    assert "selfdestruct" in findings[0].suggestion


def test_callcode_member_flagged():
    findings = _run_rule(DeprecatedRule(), _member_call("lib", "callcode"))
    assert len(findings) == 1
    assert findings[0].message == "Use of deprecated opcode/function: callcode"
    assert "delegatecall" in findings[0].suggestion


def test_throw_statement_flagged():
    findings = _run_rule(DeprecatedRule(), ThrowStatement(loc=Location(9, 13)))
    assert len(findings) == 1
    assert findings[0].line == 9
    assert "revert" in findings[0].suggestion


def test_modern_constructs_not_flagged():
    selfdestruct = FunctionCall(expression=Identifier(name="selfdestruct"))
    assert _run_rule(DeprecatedRule(), selfdestruct, _member_call("lib", "delegatecall")) == []


def test_name_match_is_exact():
    call = FunctionCall(expression=Identifier(name="Suicide"))
    assert _run_rule(DeprecatedRule(), call) == []
