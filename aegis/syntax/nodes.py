# Typed Solidity syntax tree: one dataclass per node kind with explicit child slots.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Optional


@dataclass(frozen=True)
class Location:
    """Start position of a node. 1-based; 0 means unknown."""

    line: int = 0
    column: int = 0


@dataclass(eq=False)
class Node:
    """
    Base class for every node kind.

    ``child_slots`` names the attributes holding owned children, in source
    declaration order. ``parent`` is a non-owning back-reference and is never
    listed as a slot, so walkers cannot loop through it.
    """

    child_slots: ClassVar[tuple[str, ...]] = ()

    loc: Location = field(default_factory=Location, kw_only=True)
    parent: Optional[Node] = field(default=None, kw_only=True, repr=False)

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def line(self) -> int:
        return self.loc.line

    @property
    def column(self) -> int:
        return self.loc.column


# --- declarations ----------------------------------------------------------


@dataclass(eq=False)
class SourceUnit(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("children",)

    children: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class PragmaDirective(Node):
    name: str = "solidity"
    value: str = ""


@dataclass(eq=False)
class ContractDefinition(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("members",)

    name: str = ""
    contract_kind: str = "contract"
    members: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class Parameter(Node):
    type_name: str = ""
    name: Optional[str] = None


@dataclass(eq=False)
class ModifierInvocation(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("arguments",)

    name: str = ""
    arguments: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class FunctionDefinition(Node):
    """A function, constructor, fallback or receive function."""

    child_slots: ClassVar[tuple[str, ...]] = ("parameters", "modifiers", "body")

    name: Optional[str] = None
    parameters: List[Parameter] = field(default_factory=list)
    modifiers: List[ModifierInvocation] = field(default_factory=list)
    visibility: Optional[str] = None
    state_mutability: Optional[str] = None
    body: Optional[Block] = None

    def has_modifier(self, name: str) -> bool:
        return any(mod.name == name for mod in self.modifiers)


@dataclass(eq=False)
class ModifierDefinition(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("parameters", "body")

    name: str = ""
    parameters: List[Parameter] = field(default_factory=list)
    body: Optional[Block] = None


@dataclass(eq=False)
class StateVariableDeclaration(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("initial_value",)

    type_name: str = ""
    name: str = ""
    initial_value: Optional[Node] = None


# --- statements ------------------------------------------------------------


@dataclass(eq=False)
class Block(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("statements",)

    statements: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ExpressionStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("expression",)

    expression: Optional[Node] = None


@dataclass(eq=False)
class VariableDeclarationStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("initial_value",)

    names: List[str] = field(default_factory=list)
    initial_value: Optional[Node] = None


@dataclass(eq=False)
class IfStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("condition", "true_body", "false_body")

    condition: Optional[Node] = None
    true_body: Optional[Node] = None
    false_body: Optional[Node] = None


@dataclass(eq=False)
class ForStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("init", "condition", "update", "body")

    init: Optional[Node] = None
    condition: Optional[Node] = None
    update: Optional[Node] = None
    body: Optional[Node] = None


@dataclass(eq=False)
class WhileStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("condition", "body")

    condition: Optional[Node] = None
    body: Optional[Node] = None


@dataclass(eq=False)
class DoWhileStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("body", "condition")

    body: Optional[Node] = None
    condition: Optional[Node] = None


@dataclass(eq=False)
class ReturnStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("expression",)

    expression: Optional[Node] = None


@dataclass(eq=False)
class EmitStatement(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("event", "arguments")

    event: Optional[Node] = None
    arguments: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class ThrowStatement(Node):
    pass


# --- expressions -----------------------------------------------------------


@dataclass(eq=False)
class Identifier(Node):
    name: str = ""


@dataclass(eq=False)
class Literal(Node):
    value: str = ""


@dataclass(eq=False)
class MemberAccess(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("expression",)

    expression: Optional[Node] = None
    member_name: str = ""


@dataclass(eq=False)
class IndexAccess(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("base", "index")

    base: Optional[Node] = None
    index: Optional[Node] = None


@dataclass(eq=False)
class NameValueExpression(Node):
    """``expr{name: value, ...}``, e.g. the call options in ``to.call{value: v}``."""

    child_slots: ClassVar[tuple[str, ...]] = ("expression", "values")

    expression: Optional[Node] = None
    names: List[str] = field(default_factory=list)
    values: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class FunctionCall(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("expression", "arguments")

    expression: Optional[Node] = None
    arguments: List[Node] = field(default_factory=list)


@dataclass(eq=False)
class BinaryOperation(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("left", "right")

    operator: str = ""
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass(eq=False)
class UnaryOperation(Node):
    child_slots: ClassVar[tuple[str, ...]] = ("sub_expression",)

    operator: str = ""
    sub_expression: Optional[Node] = None
    is_prefix: bool = True


@dataclass(eq=False)
class Assignment(Node):
    """Simple (``=``) or compound (``+=``, ``-=``, ...) assignment."""

    child_slots: ClassVar[tuple[str, ...]] = ("left", "right")

    operator: str = "="
    left: Optional[Node] = None
    right: Optional[Node] = None


@dataclass(eq=False)
class Other(Node):
    """Any construct not modelled above; keeps its children reachable."""

    child_slots: ClassVar[tuple[str, ...]] = ("children",)

    type_name: str = ""
    children: List[Node] = field(default_factory=list)
