# Per-file analysis context: display path, source text, typed tree and declared compiler version.
# Built once per parsed file and handed read-only to every rule.

import logging
from dataclasses import dataclass
from typing import Optional

from aegis.parser import extract_version, is_version_08_or_higher
from aegis.syntax.nodes import FunctionDefinition, Node, SourceUnit
from aegis.syntax.walker import iter_nodes

logger = logging.getLogger(__name__)


def count_tree_stats(root: Node) -> tuple[int, int]:
    """
    Return (total node count, function definition count) for the tree.

    Useful for logging how much was parsed (nodes and functions).
    """
    nodes = 0
    functions = 0
    for node in iter_nodes(root):
        nodes += 1
        if isinstance(node, FunctionDefinition):
            functions += 1
    return nodes, functions


@dataclass(frozen=True)
class ScanContext:
    """
    Immutable per-file state for static analysis.

    Rules use context.tree to walk the typed tree, context.path when building
    findings, and context.is_08_plus to gate version-specific checks.
    """

    path: str
    source: str
    tree: SourceUnit
    version: Optional[str] = None
    is_08_plus: bool = False


def create_context(path: str, source: str, tree: SourceUnit) -> ScanContext:
    """
    Bundle a parsed file into a ScanContext, deriving the pragma version fields.

    Logs node and function counts so it is visible how much was analyzed.
    """
    version = extract_version(source)
    context = ScanContext(
        path=path,
        source=source,
        tree=tree,
        version=version,
        is_08_plus=is_version_08_or_higher(version),
    )
    node_count, func_count = count_tree_stats(tree)
    logger.info(
        "Parsed %s: %d nodes, %d function(s), solidity %s",
        path,
        node_count,
        func_count,
        version or "(no pragma)",
    )
    return context
