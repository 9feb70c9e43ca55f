"""
File system traversal: walk directories and collect Solidity source files.

This module provides utilities for recursively traversing directories to find
Solidity sources (.sol) for static analysis. Dependency and build output
directories (node_modules, vendor, artifacts, ...) are skipped.

Typical usage:
    from pathlib import Path
    from aegis.traversal import find_sol_files

    sources = find_sol_files(Path("./contracts"))

    # Custom ignore patterns
    sources = find_sol_files(Path("./contracts"), ignore_dirs={"mocks"})
"""

import logging
import os
from pathlib import Path
from typing import Optional, Set, Union

logger = logging.getLogger(__name__)

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Dependency and package directories
    "node_modules",
    "vendor",

    # Build output of common Solidity toolchains
    "build",
    "artifacts",
    "cache",
    "coverage",
    "out",

    # Version control
    ".git",
    ".svn",
    ".hg",

    # Python virtual environments and caches
    "venv",
    ".venv",
    "__pycache__",
}


def is_sol_file(path: Path) -> bool:
    """
    Check if a file is a Solidity source file (.sol extension).

    Examples:
        >>> is_sol_file(Path("Token.sol"))
        True
        >>> is_sol_file(Path("Token.SOL"))
        True
        >>> is_sol_file(Path("token.js"))
        False
    """
    return path.suffix.lower() == ".sol"


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """
    Check if a directory should be ignored during traversal.

    Only the directory name is compared (case-sensitive), not the full path.

    Examples:
        >>> should_ignore_directory(Path("node_modules"), {"node_modules"})
        True
        >>> should_ignore_directory(Path("contracts"), {"node_modules"})
        False
    """
    return dir_path.name in ignore_dirs


def find_sol_files(
    root: Path,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
) -> list[Path]:
    """
    Recursively find all .sol files in a directory tree.

    Args:
        root: Root directory to start traversal from.
        ignore_dirs: Set of directory names to skip. If None, uses DEFAULT_IGNORE_DIRS.
        follow_symlinks: If True, follow symbolic links during traversal.
                         If False (default), symlinks are skipped.

    Returns:
        List of Path objects for all .sol files found, sorted by path.

    Raises:
        FileNotFoundError: If the root directory does not exist.
        NotADirectoryError: If root is not a directory.

    Notes:
        - Permission errors on subdirectories are logged but do not stop traversal.
        - The root path is resolved to an absolute path before traversal.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()

    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Directory not found: {root}")

    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Not a directory: {root}")

    logger.info("Starting traversal from: %s", root)

    collected_files: list[Path] = []

    def _walk_directory(current_dir: Path) -> None:
        """Recursive helper to walk directory tree."""
        try:
            for entry in current_dir.iterdir():
                if entry.is_symlink() and not follow_symlinks:
                    logger.debug("Skipping symlink: %s", entry)
                    continue

                if entry.is_dir():
                    if should_ignore_directory(entry, ignore_dirs):
                        logger.debug("Ignoring directory: %s", entry)
                        continue
                    _walk_directory(entry)

                elif entry.is_file() and is_sol_file(entry):
                    logger.debug("Found source file: %s", entry)
                    collected_files.append(entry)

        except PermissionError as e:
            logger.warning("Permission denied accessing directory %s: %s", current_dir, e)
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current_dir, e)

    _walk_directory(root)

    # Sort for deterministic ordering
    collected_files.sort()

    logger.info(
        "Traversal complete: found %d source file(s) in %s",
        len(collected_files),
        root,
    )

    return collected_files


def normalize_path(path: Union[str, Path], cwd: Optional[Path] = None) -> str:
    """
    Return path relative to cwd (default: the current directory) with forward slashes.

    Paths on another drive (Windows) cannot be made relative and are returned
    absolute, still with forward slashes.

    Examples:
        >>> normalize_path("/work/contracts/Token.sol", cwd=Path("/work"))
        'contracts/Token.sol'
    """
    base = cwd if cwd is not None else Path.cwd()
    try:
        relative = os.path.relpath(Path(path), base)
    except ValueError:
        relative = str(Path(path).resolve())
    return relative.replace("\\", "/")
