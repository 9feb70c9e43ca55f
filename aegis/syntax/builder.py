# Convert a tree-sitter-solidity concrete syntax tree into the typed node classes.

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from tree_sitter import Node as TSNode

from aegis.syntax.nodes import (
    Assignment,
    BinaryOperation,
    Block,
    ContractDefinition,
    DoWhileStatement,
    EmitStatement,
    ExpressionStatement,
    ForStatement,
    FunctionCall,
    FunctionDefinition,
    Identifier,
    IfStatement,
    IndexAccess,
    Literal,
    Location,
    MemberAccess,
    ModifierDefinition,
    ModifierInvocation,
    NameValueExpression,
    Node,
    Other,
    Parameter,
    PragmaDirective,
    ReturnStatement,
    SourceUnit,
    StateVariableDeclaration,
    ThrowStatement,
    UnaryOperation,
    VariableDeclarationStatement,
    WhileStatement,
)
from aegis.syntax.walker import iter_children

logger = logging.getLogger(__name__)

# Wrapper node types that carry no meaning of their own when they hold one child.
TRANSPARENT_TYPES = frozenset(
    {
        "expression",
        "parenthesized_expression",
        "call_argument",
        "statement",
    }
)

IGNORED_TYPES = frozenset({"comment"})

LITERAL_TYPES = frozenset(
    {
        "number_literal",
        "string_literal",
        "string",
        "boolean_literal",
        "hex_string_literal",
        "unicode_string_literal",
        "true",
        "false",
    }
)

CONTRACT_TYPES = {
    "contract_declaration": "contract",
    "interface_declaration": "interface",
    "library_declaration": "library",
}

ASSIGNMENT_OPERATORS = frozenset(
    {"=", "+=", "-=", "*=", "/=", "%=", "|=", "&=", "^=", "<<=", ">>=", ">>>="}
)

BINARY_OPERATORS = frozenset(
    {
        "+", "-", "*", "/", "%", "**",
        "&&", "||", "&", "|", "^", "<<", ">>", ">>>",
        "==", "!=", "<", "<=", ">", ">=",
    }
)

UNARY_OPERATORS = frozenset({"!", "~", "-", "+", "++", "--", "delete"})


def _named(ts: TSNode) -> List[TSNode]:
    """Named children of ts, without comments."""
    return [c for c in ts.named_children if c.type not in IGNORED_TYPES]


def _operator(ts: TSNode, allowed: frozenset) -> Optional[str]:
    """The operator token of ts: its ``operator`` field or first anonymous child in allowed."""
    op = ts.child_by_field_name("operator")
    if op is not None:
        return op.type if not op.is_named else None
    for child in ts.children:
        if not child.is_named and child.type in allowed:
            return child.type
    return None


class TreeBuilder:
    """
    Builds the typed tree for one parsed file.

    Conversion is a dispatch over tree-sitter node types; anything without a
    dedicated handler becomes an ``Other`` node holding its converted named
    children, so nested expressions stay reachable.
    """

    def __init__(self, source: bytes) -> None:
        self.source = source
        self._handlers: Dict[str, Callable[[TSNode], Optional[Node]]] = {
            "source_file": self._source_file,
            "pragma_directive": self._pragma,
            "contract_declaration": self._contract,
            "interface_declaration": self._contract,
            "library_declaration": self._contract,
            "function_definition": self._function,
            "constructor_definition": self._function,
            "fallback_receive_definition": self._function,
            "modifier_definition": self._modifier_definition,
            "modifier_invocation": self._modifier_invocation,
            "state_variable_declaration": self._state_variable,
            "parameter": self._parameter,
            "function_body": self._block,
            "block_statement": self._block,
            "unchecked_block": self._block,
            "expression_statement": self._expression_statement,
            "variable_declaration_statement": self._variable_declaration,
            "if_statement": self._if,
            "for_statement": self._for,
            "while_statement": self._while,
            "do_while_statement": self._do_while,
            "return_statement": self._return,
            "emit_statement": self._emit,
            "identifier": self._identifier,
            "member_expression": self._member,
            "array_access": self._array_access,
            "call_expression": self._call,
            "struct_expression": self._name_value,
            "binary_expression": self._binary,
            "unary_expression": self._unary,
            "update_expression": self._update,
            "assignment_expression": self._assignment,
            "augmented_assignment_expression": self._assignment,
        }

    # --- entry points ------------------------------------------------------

    def build(self, root: TSNode) -> SourceUnit:
        unit = self.convert(root)
        if not isinstance(unit, SourceUnit):
            unit = SourceUnit(children=[unit] if unit is not None else [], loc=self._loc(root))
        _link_parents(unit)
        return unit

    def convert(self, ts: Optional[TSNode]) -> Optional[Node]:
        if ts is None or ts.type in IGNORED_TYPES:
            return None
        if ts.type in TRANSPARENT_TYPES:
            named = _named(ts)
            if len(named) == 1:
                return self.convert(named[0])
        if ts.type in LITERAL_TYPES:
            return Literal(value=self.text(ts), loc=self._loc(ts))
        handler = self._handlers.get(ts.type)
        if handler is None:
            return self._other(ts)
        return handler(ts)

    # --- helpers -----------------------------------------------------------

    def text(self, ts: Optional[TSNode]) -> str:
        if ts is None:
            return ""
        return self.source[ts.start_byte : ts.end_byte].decode("utf-8", errors="replace")

    @staticmethod
    def _loc(ts: TSNode) -> Location:
        # Tree-sitter points are 0-based (row, column)
        row, col = ts.start_point
        return Location(line=row + 1, column=col + 1)

    def _convert_all(self, nodes: List[TSNode]) -> List[Node]:
        converted = (self.convert(n) for n in nodes)
        return [n for n in converted if n is not None]

    def _field(self, ts: TSNode, name: str, index: Optional[int] = None) -> Optional[TSNode]:
        """Child in field ``name``; falls back to the index-th named child."""
        child = ts.child_by_field_name(name)
        if child is None and index is not None:
            named = _named(ts)
            if -len(named) <= index < len(named):
                child = named[index]
        return child

    def _other(self, ts: TSNode) -> Other:
        return Other(
            type_name=ts.type,
            children=self._convert_all(_named(ts)),
            loc=self._loc(ts),
        )

    # --- declarations ------------------------------------------------------

    def _source_file(self, ts: TSNode) -> SourceUnit:
        return SourceUnit(children=self._convert_all(_named(ts)), loc=self._loc(ts))

    def _pragma(self, ts: TSNode) -> PragmaDirective:
        words = self.text(ts).strip().rstrip(";").split(None, 2)
        name = words[1] if len(words) > 1 else ""
        value = words[2].strip() if len(words) > 2 else ""
        return PragmaDirective(name=name, value=value, loc=self._loc(ts))

    def _contract(self, ts: TSNode) -> ContractDefinition:
        body = ts.child_by_field_name("body")
        if body is None:
            body = next((c for c in _named(ts) if c.type == "contract_body"), None)
        members = self._convert_all(_named(body)) if body is not None else []
        return ContractDefinition(
            name=self.text(ts.child_by_field_name("name")),
            contract_kind=CONTRACT_TYPES.get(ts.type, "contract"),
            members=members,
            loc=self._loc(ts),
        )

    def _function(self, ts: TSNode) -> FunctionDefinition:
        name_node = ts.child_by_field_name("name")
        if name_node is not None:
            name: Optional[str] = self.text(name_node)
        elif ts.type == "constructor_definition":
            name = "constructor"
        elif ts.type == "fallback_receive_definition":
            name = self.text(ts).split("(", 1)[0].strip() or None
        else:
            name = None

        parameters: List[Parameter] = []
        modifiers: List[ModifierInvocation] = []
        visibility: Optional[str] = None
        mutability: Optional[str] = None
        body_ts = ts.child_by_field_name("body")
        for child in _named(ts):
            if child.type == "parameter":
                parameters.append(self._parameter(child))
            elif child.type == "modifier_invocation":
                modifiers.append(self._modifier_invocation(child))
            elif child.type == "visibility":
                visibility = self.text(child).strip()
            elif child.type == "state_mutability":
                mutability = self.text(child).strip()
            elif child.type == "function_body" and body_ts is None:
                body_ts = child

        body = self._block(body_ts) if body_ts is not None else None
        return FunctionDefinition(
            name=name,
            parameters=parameters,
            modifiers=modifiers,
            visibility=visibility,
            state_mutability=mutability,
            body=body,
            loc=self._loc(ts),
        )

    def _modifier_definition(self, ts: TSNode) -> ModifierDefinition:
        body_ts = ts.child_by_field_name("body")
        if body_ts is None:
            body_ts = next((c for c in _named(ts) if c.type == "function_body"), None)
        return ModifierDefinition(
            name=self.text(ts.child_by_field_name("name")),
            parameters=[self._parameter(c) for c in _named(ts) if c.type == "parameter"],
            body=self._block(body_ts) if body_ts is not None else None,
            loc=self._loc(ts),
        )

    def _modifier_invocation(self, ts: TSNode) -> ModifierInvocation:
        name = self.text(ts).split("(", 1)[0].strip()
        arguments = [c for c in _named(ts) if c.type not in ("identifier", "identifier_path")]
        return ModifierInvocation(
            name=name,
            arguments=self._convert_all(arguments),
            loc=self._loc(ts),
        )

    def _parameter(self, ts: TSNode) -> Parameter:
        name_node = ts.child_by_field_name("name")
        type_node = ts.child_by_field_name("type")
        return Parameter(
            type_name=self.text(type_node) if type_node is not None else self.text(ts).split(" ")[0],
            name=self.text(name_node) if name_node is not None else None,
            loc=self._loc(ts),
        )

    def _state_variable(self, ts: TSNode) -> StateVariableDeclaration:
        return StateVariableDeclaration(
            type_name=self.text(ts.child_by_field_name("type")),
            name=self.text(ts.child_by_field_name("name")),
            initial_value=self.convert(ts.child_by_field_name("value")),
            loc=self._loc(ts),
        )

    # --- statements --------------------------------------------------------

    def _block(self, ts: TSNode) -> Block:
        return Block(statements=self._convert_all(_named(ts)), loc=self._loc(ts))

    def _expression_statement(self, ts: TSNode) -> Node:
        named = _named(ts)
        expression = self.convert(named[0]) if named else None
        # The grammar has no throw statement; `throw;` parses as a bare identifier.
        if isinstance(expression, Identifier) and expression.name == "throw":
            return ThrowStatement(loc=self._loc(ts))
        return ExpressionStatement(expression=expression, loc=self._loc(ts))

    def _variable_declaration(self, ts: TSNode) -> VariableDeclarationStatement:
        names: List[str] = []
        for child in _named(ts):
            if child.type == "variable_declaration":
                names.append(self.text(child.child_by_field_name("name")))
            elif child.type == "variable_declaration_tuple":
                for item in _named(child):
                    name_node = item.child_by_field_name("name")
                    if name_node is not None:
                        names.append(self.text(name_node))
        value = ts.child_by_field_name("value")
        if value is None:
            # The initializer is whatever follows the "=" token.
            seen_eq = False
            for child in ts.children:
                if seen_eq and child.is_named and child.type not in IGNORED_TYPES:
                    value = child
                    break
                if child.type == "=":
                    seen_eq = True
        return VariableDeclarationStatement(
            names=[n for n in names if n],
            initial_value=self.convert(value),
            loc=self._loc(ts),
        )

    def _if(self, ts: TSNode) -> IfStatement:
        return IfStatement(
            condition=self.convert(self._field(ts, "condition", 0)),
            true_body=self.convert(self._field(ts, "body", 1)),
            false_body=self.convert(self._field(ts, "else", 2)),
            loc=self._loc(ts),
        )

    def _for(self, ts: TSNode) -> ForStatement:
        return ForStatement(
            init=self.convert(ts.child_by_field_name("initial")),
            condition=self.convert(ts.child_by_field_name("condition")),
            update=self.convert(ts.child_by_field_name("update")),
            body=self.convert(self._field(ts, "body", -1)),
            loc=self._loc(ts),
        )

    def _while(self, ts: TSNode) -> WhileStatement:
        return WhileStatement(
            condition=self.convert(self._field(ts, "condition", 0)),
            body=self.convert(self._field(ts, "body", -1)),
            loc=self._loc(ts),
        )

    def _do_while(self, ts: TSNode) -> DoWhileStatement:
        return DoWhileStatement(
            body=self.convert(self._field(ts, "body", 0)),
            condition=self.convert(self._field(ts, "condition", -1)),
            loc=self._loc(ts),
        )

    def _return(self, ts: TSNode) -> ReturnStatement:
        named = _named(ts)
        return ReturnStatement(
            expression=self.convert(named[0]) if named else None,
            loc=self._loc(ts),
        )

    def _emit(self, ts: TSNode) -> EmitStatement:
        event = self._field(ts, "name", 0)
        arguments = [c for c in _named(ts) if c != event]
        return EmitStatement(
            event=self.convert(event),
            arguments=self._convert_all(arguments),
            loc=self._loc(ts),
        )

    # --- expressions -------------------------------------------------------

    def _identifier(self, ts: TSNode) -> Identifier:
        return Identifier(name=self.text(ts), loc=self._loc(ts))

    def _member(self, ts: TSNode) -> MemberAccess:
        obj = self._field(ts, "object", 0)
        prop = self._field(ts, "property", -1)
        return MemberAccess(
            expression=self.convert(obj),
            member_name=self.text(prop).strip(),
            loc=self._loc(ts),
        )

    def _array_access(self, ts: TSNode) -> IndexAccess:
        base = self._field(ts, "base", 0)
        index = ts.child_by_field_name("index")
        if index is None:
            named = _named(ts)
            index = named[1] if len(named) > 1 else None
        return IndexAccess(base=self.convert(base), index=self.convert(index), loc=self._loc(ts))

    def _call(self, ts: TSNode) -> FunctionCall:
        callee = self._field(ts, "function", 0)
        has_paren = any(c.type == "(" for c in ts.children)
        options: List[TSNode] = []
        arguments: List[TSNode] = []
        seen_paren = not has_paren
        for child in ts.children:
            if child.type == "(":
                seen_paren = True
                continue
            if not child.is_named or child.type in IGNORED_TYPES or child == callee:
                continue
            (arguments if seen_paren else options).append(child)

        expression = self.convert(callee)
        if options and callee is not None:
            # `target{value: v}(...)` where the grammar attaches the options to the call
            names, values = self._name_value_pairs(options)
            expression = NameValueExpression(
                expression=expression,
                names=names,
                values=values,
                loc=self._loc(callee),
            )
        return FunctionCall(
            expression=expression,
            arguments=self._convert_all(arguments),
            loc=self._loc(ts),
        )

    def _name_value_pairs(self, nodes: List[TSNode]) -> tuple[List[str], List[Node]]:
        names: List[str] = []
        values: List[TSNode] = []
        pending = list(nodes)
        while pending:
            child = pending.pop(0)
            name_node = child.child_by_field_name("name")
            value_node = child.child_by_field_name("value")
            if name_node is not None and value_node is not None:
                names.append(self.text(name_node))
                values.append(value_node)
            elif child.type in TRANSPARENT_TYPES and _named(child):
                pending[0:0] = _named(child)
            else:
                values.append(child)
        return names, self._convert_all(values)

    def _name_value(self, ts: TSNode) -> NameValueExpression:
        target = self._field(ts, "type", 0)
        names, values = self._name_value_pairs([c for c in _named(ts) if c != target])
        return NameValueExpression(
            expression=self.convert(target),
            names=names,
            values=values,
            loc=self._loc(ts),
        )

    def _binary(self, ts: TSNode) -> BinaryOperation:
        return BinaryOperation(
            operator=_operator(ts, BINARY_OPERATORS) or "",
            left=self.convert(self._field(ts, "left", 0)),
            right=self.convert(self._field(ts, "right", -1)),
            loc=self._loc(ts),
        )

    def _unary(self, ts: TSNode) -> UnaryOperation:
        operand = self._field(ts, "argument", -1)
        operator = _operator(ts, UNARY_OPERATORS) or ""
        return UnaryOperation(
            operator=operator,
            sub_expression=self.convert(operand),
            is_prefix=bool(ts.children) and not ts.children[0].is_named,
            loc=self._loc(ts),
        )

    def _update(self, ts: TSNode) -> UnaryOperation:
        operand = self._field(ts, "argument", 0)
        operator = _operator(ts, frozenset({"++", "--"})) or ""
        return UnaryOperation(
            operator=operator,
            sub_expression=self.convert(operand),
            is_prefix=bool(ts.children) and not ts.children[0].is_named,
            loc=self._loc(ts),
        )

    def _assignment(self, ts: TSNode) -> Assignment:
        return Assignment(
            operator=_operator(ts, ASSIGNMENT_OPERATORS) or "=",
            left=self.convert(self._field(ts, "left", 0)),
            right=self.convert(self._field(ts, "right", -1)),
            loc=self._loc(ts),
        )


def _link_parents(root: Node) -> None:
    """Set each node's non-owning ``parent`` reference."""
    stack = [root]
    while stack:
        node = stack.pop()
        for child in iter_children(node):
            child.parent = node
            stack.append(child)


def build_tree(root: TSNode, source: bytes) -> SourceUnit:
    """Convert a tree-sitter root node into a typed ``SourceUnit``."""
    unit = TreeBuilder(source).build(root)
    logger.debug("Built typed tree: %d top-level node(s)", len(unit.children))
    return unit
