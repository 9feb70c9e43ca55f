"""Rule registry: an explicit, ordered collection of rule instances."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from aegis.rules.base import Rule
from aegis.rules.deprecated import DeprecatedRule
from aegis.rules.integer_overflow import IntegerOverflowRule
from aegis.rules.reentrancy import ReentrancyRule
from aegis.rules.tx_origin import TxOriginRule
from aegis.rules.unbounded_loop import UnboundedLoopRule
from aegis.rules.unchecked_call import UncheckedCallRule

logger = logging.getLogger(__name__)


def default_rules() -> List[Rule]:
    """Construct one instance of every built-in rule, in reporting order."""
    return [
        ReentrancyRule(),
        TxOriginRule(),
        UncheckedCallRule(),
        IntegerOverflowRule(),
        UnboundedLoopRule(),
        DeprecatedRule(),
    ]


class RuleRegistry:
    """
    Named collection of rules with id-based selection.

    Ids match by exact string equality. Selections return new lists in
    registry order and never mutate the registry.
    """

    def __init__(self, rules: Iterable[Rule]) -> None:
        self._rules: List[Rule] = []
        for rule in rules:
            if self.get(rule.id) is not None:
                raise ValueError(f"Duplicate rule id: {rule.id}")
            self._rules.append(rule)

    @classmethod
    def default(cls) -> RuleRegistry:
        return cls(default_rules())

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def ids(self) -> List[str]:
        return [rule.id for rule in self._rules]

    def get(self, rule_id: str) -> Optional[Rule]:
        return next((rule for rule in self._rules if rule.id == rule_id), None)

    def all(self) -> List[Rule]:
        return list(self._rules)

    def only(self, rule_ids: Sequence[str]) -> List[Rule]:
        """Rules whose id is in the allow-list."""
        self._warn_unknown(rule_ids)
        wanted = set(rule_ids)
        return [rule for rule in self._rules if rule.id in wanted]

    def excluding(self, rule_ids: Sequence[str]) -> List[Rule]:
        """All rules except those whose id is in the deny-list."""
        self._warn_unknown(rule_ids)
        unwanted = set(rule_ids)
        return [rule for rule in self._rules if rule.id not in unwanted]

    def _warn_unknown(self, rule_ids: Sequence[str]) -> None:
        known = set(self.ids())
        for rule_id in rule_ids:
            if rule_id not in known:
                logger.warning("Unknown rule id %r (known: %s)", rule_id, ", ".join(self.ids()))
