"""
Generic depth-first traversal over the typed syntax tree.

Children are read from each node kind's declared ``child_slots`` only, so the
``parent`` back-reference is never followed and traversal always terminates.

Typical usage:
    from aegis.syntax.walker import iter_nodes, walk

    for node in iter_nodes(context.tree):
        ...

    walk(context.tree, lambda node: print(node.kind))
"""

from __future__ import annotations

from typing import Callable, Iterator, Type, TypeVar

from aegis.syntax.nodes import Node

N = TypeVar("N", bound=Node)


def iter_children(node: Node) -> Iterator[Node]:
    """
    Yield the direct children of node in declaration order.

    List-valued slots are flattened in order; empty (None) slots and
    non-node values are skipped.
    """
    for slot in node.child_slots:
        value = getattr(node, slot)
        if value is None:
            continue
        if isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item
        elif isinstance(value, Node):
            yield value


def iter_nodes(root: Node) -> Iterator[Node]:
    """Yield every node reachable from root, pre-order (parent before children)."""
    stack: list[Node] = [root]
    while stack:
        node = stack.pop()
        yield node
        # Reverse so the first declared child is popped (visited) first.
        stack.extend(reversed(list(iter_children(node))))


def walk(root: Node, visitor: Callable[[Node], None]) -> None:
    """Invoke visitor(node) for every node reachable from root, depth-first pre-order."""
    for node in iter_nodes(root):
        visitor(node)


def find_all(root: Node, kind: Type[N]) -> list[N]:
    """Return all nodes of the given kind under root, in traversal order."""
    return [node for node in iter_nodes(root) if isinstance(node, kind)]
