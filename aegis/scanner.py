"""
Scan orchestration: read, parse and run rules over files and directories.

Per-file failures never cross file boundaries. A file that cannot be read or
parsed becomes a ScanResult with ``error`` set; a rule that raises is logged
and its findings are dropped while the remaining rules still run. Only a bad
target (missing path, unreadable single file) raises TargetError.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import tree_sitter

from aegis.context import ScanContext, create_context
from aegis.errors import ParseError, SourceReadError, TargetError
from aegis.findings.models import Finding, ScanResult, ScanStatus
from aegis.parser import create_parser, parse_source, read_source
from aegis.rules.base import Rule
from aegis.traversal import find_sol_files, normalize_path

logger = logging.getLogger(__name__)


class Scanner:
    """Runs a fixed list of rules over Solidity sources, one file at a time."""

    def __init__(self, rules: Iterable[Rule], parser: Optional[tree_sitter.Parser] = None) -> None:
        self.rules: List[Rule] = list(rules)
        self._parser = parser if parser is not None else create_parser()

    def run_rules(self, context: ScanContext) -> List[Finding]:
        """Run every rule on context, isolating failures per rule."""
        findings: List[Finding] = []
        for rule in self.rules:
            try:
                rule_findings = rule.check(context)
            except Exception:
                logger.exception("Rule %s failed on %s; its findings are discarded", rule.id, context.path)
                continue
            findings.extend(rule_findings)
        return findings

    def scan_source(self, source: str, file: str) -> ScanResult:
        """Parse and check source text. Parse failures are recorded, not raised."""
        try:
            tree = parse_source(source, parser=self._parser, path=file)
        except ParseError as exc:
            return ScanResult(file=file, error=str(exc), status=ScanStatus.PARSE_ERROR)
        context = create_context(file, source, tree)
        findings = self.run_rules(context)
        logger.info("Scanned %s: %d finding(s)", file, len(findings))
        return ScanResult(file=file, version=context.version, findings=findings)

    def scan_file(self, path: Path) -> ScanResult:
        """Scan one file. Read and parse failures are recorded on the result."""
        file = normalize_path(path)
        try:
            source = read_source(path)
        except SourceReadError as exc:
            logger.error("Failed to read file %s: %s", file, exc)
            return ScanResult(file=file, error=str(exc), status=ScanStatus.IO_ERROR)
        return self.scan_source(source, file)

    def scan_directory(self, root: Path) -> List[ScanResult]:
        """Scan every .sol file under root, strictly one at a time."""
        files = find_sol_files(root)
        if not files:
            logger.warning("No .sol files found under %s", root)
        return [self.scan_file(path) for path in files]

    def scan(self, target: Path) -> List[ScanResult]:
        """
        Scan a file or a directory.

        Raises:
            TargetError: target does not exist, is neither a file nor a
                directory, or is a file that cannot be read.
        """
        if not target.exists():
            raise TargetError(f"Target not found: {target}")
        if target.is_file():
            try:
                source = read_source(target)
            except SourceReadError as exc:
                raise TargetError(str(exc)) from None
            return [self.scan_source(source, normalize_path(target))]
        if target.is_dir():
            return self.scan_directory(target)
        raise TargetError(f"Invalid target (not a file or directory): {target}")
