# Tree-sitter setup and Solidity parsing: source text -> typed syntax tree, plus pragma helpers.

import logging
import re
from pathlib import Path
from typing import Optional, Union

import tree_sitter
from tree_sitter import Language
from tree_sitter import Node as TSNode
from tree_sitter_solidity import language as _solidity_language_capsule

from aegis.errors import ParseError, SourceReadError
from aegis.syntax.builder import build_tree
from aegis.syntax.nodes import SourceUnit

logger = logging.getLogger(__name__)

# Solidity grammar: wrap tree-sitter-solidity capsule for use with tree_sitter.Parser
_SOLIDITY_LANGUAGE = Language(_solidity_language_capsule())

_PRAGMA_RE = re.compile(r"pragma\s+solidity\s+([^;]+);", re.IGNORECASE)
_VERSION_RE = re.compile(r"^(\d+)\.(\d+)")


def get_solidity_language() -> Language:
    """Return the Tree-sitter Language object for Solidity."""
    return _SOLIDITY_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for Solidity."""
    return tree_sitter.Parser(_SOLIDITY_LANGUAGE)


def _first_error(node: TSNode) -> Optional[TSNode]:
    """Return the first ERROR or MISSING node in document order, or None."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def parse_source(
    source: str,
    parser: Optional[tree_sitter.Parser] = None,
    path: Union[str, Path, None] = None,
) -> SourceUnit:
    """
    Parse Solidity source text into a typed syntax tree.

    Args:
        source: Solidity source code.
        parser: Optional parser instance; if None, a new one is created.
        path: Display path, used only in error messages.

    Raises:
        ParseError: if the source contains syntax errors.
    """
    if parser is None:
        parser = create_parser()
    data = source.encode("utf-8")
    tree = parser.parse(data)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        line = bad.start_point[0] + 1 if bad is not None else 0
        logger.warning("Parse failed for %s at line %d", path or "<source>", line)
        raise ParseError(f"syntax error at line {line}", line=line, path=path)
    logger.debug("Parse succeeded: root=%s", root.type)
    return build_tree(root, data)


def read_source(path: Path) -> str:
    """
    Read a source file as UTF-8 text.

    Raises:
        SourceReadError: with an actionable message (not found, permission
            denied, not UTF-8, ...).
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SourceReadError(f"File not found: {path}", path) from None
    except PermissionError:
        raise SourceReadError(f"Permission denied: {path}", path) from None
    except IsADirectoryError:
        raise SourceReadError(f"Not a file: {path}", path) from None
    except UnicodeDecodeError:
        raise SourceReadError(f"File is not valid UTF-8 text: {path}", path) from None
    except OSError as e:
        raise SourceReadError(f"Cannot read {path}: {e.strerror or e}", path) from None


def extract_version(source: str) -> Optional[str]:
    """
    Return the version expression of the first ``pragma solidity ...;``.

    >>> extract_version("pragma solidity ^0.8.0;")
    '^0.8.0'
    >>> extract_version("contract A {}") is None
    True
    """
    match = _PRAGMA_RE.search(source)
    if match:
        return match.group(1).strip()
    return None


def is_version_08_or_higher(version: Optional[str]) -> bool:
    """
    True if the declared version's first constraint is 0.8 or newer.

    Range operators (^ ~ > < =) are stripped and only the first token is
    considered, so ``">=0.7.0 <0.9.0"`` counts as 0.7.
    """
    if not version:
        return False
    cleaned = re.sub(r"[\^>=<~]", "", version).strip().split(" ")[0]
    match = _VERSION_RE.match(cleaned)
    if not match:
        return False
    major, minor = int(match.group(1)), int(match.group(2))
    return major > 0 or minor >= 8
