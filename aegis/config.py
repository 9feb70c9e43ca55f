"""
Scanner configuration: which rules run, the severity threshold and output mode.

The rule set is an explicit value built here from a RuleRegistry and handed
to the Scanner by the caller; nothing is looked up from module globals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from aegis.findings.models import Severity
from aegis.rules.base import Rule
from aegis.rules.registry import RuleRegistry


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


@dataclass
class Config:
    """
    Scanner configuration.

    ``rules`` is the selected subset of ``registry`` that will actually run.
    """

    registry: RuleRegistry
    rules: Sequence[Rule] = field(default_factory=list)
    min_severity: Optional[Severity] = None
    output_format: OutputFormat = OutputFormat.TEXT
    quiet: bool = False


def parse_rule_ids(raw: Optional[str]) -> list[str]:
    """Split a comma-separated id list, trimming blanks: "A, B," -> ["A", "B"]."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def build_config(
    only: Sequence[str] = (),
    ignore: Sequence[str] = (),
    min_severity: Optional[Severity] = None,
    output_format: OutputFormat = OutputFormat.TEXT,
    quiet: bool = False,
    registry: Optional[RuleRegistry] = None,
) -> Config:
    """
    Build a configuration from CLI-level options.

    An allow-list (``only``) is applied first, then the deny-list (``ignore``).
    """
    if registry is None:
        registry = RuleRegistry.default()
    rules = registry.only(only) if only else registry.all()
    if ignore:
        excluded = set(registry.excluding(ignore))
        rules = [rule for rule in rules if rule in excluded]
    return Config(
        registry=registry,
        rules=rules,
        min_severity=min_severity,
        output_format=output_format,
        quiet=quiet,
    )


def get_default_config() -> Config:
    """Return the default configuration: every built-in rule, no threshold, text output."""
    return build_config()


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the rules that will run for the given config (or the default config)."""
    if config is None:
        config = get_default_config()
    return config.rules
