"""Rule registry for managing the ordered pricing rules."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from treeops.rules.models import RuleContext, RuleEffect

RuleFunction = Callable[[RuleContext, RuleEffect], RuleEffect]


@dataclass(frozen=True)
class BusinessRule:
    rule_id: str
    name: str
    order: int
    apply: RuleFunction

    def __call__(self, context: RuleContext, effect: RuleEffect) -> RuleEffect:
        return self.apply(context, effect)

    @property
    def description(self) -> str:
        doc = self.apply.__doc__ or ""
        return doc.strip().split("\n")[0] if doc else ""


class RuleRegistry:
    def __init__(self) -> None:
        self._rules: dict[str, BusinessRule] = {}

    def register(self, rule: BusinessRule) -> None:
        if rule.rule_id not in self._rules:
            self._rules[rule.rule_id] = rule

    def extend(self, rules: Iterable[BusinessRule]) -> None:
        for rule in rules:
            self.register(rule)

    def active_rules(self) -> tuple[BusinessRule, ...]:
        # sorted() is stable, so equal orders keep registration order
        return tuple(sorted(self._rules.values(), key=lambda rule: rule.order))

    def __len__(self) -> int:
        return len(self._rules)


default_registry = RuleRegistry()
