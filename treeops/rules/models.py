"""Data models for the pricing rules engine."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from treeops.rules.thresholds import RuleThresholds
from treeops.scoring.models import CostParameters, TreeMeasurement


@dataclass(frozen=True)
class RuleContext:
    """Inputs every rule may inspect. Never modified during evaluation."""

    measurement: TreeMeasurement
    hazards: Mapping[str, bool]
    hazard_impact: float
    cost_parameters: CostParameters
    thresholds: RuleThresholds = field(default_factory=RuleThresholds)

    def has_hazard(self, name: str) -> bool:
        return bool(self.hazards.get(name, False))


@dataclass(frozen=True)
class RuleEffect:
    """Running state threaded through the ordered rules.

    Each helper returns a new effect. Entries are only ever appended, so a
    later rule can change ``cost`` but cannot drop what an earlier rule
    recorded.
    """

    cost: float
    applied_rules: tuple[str, ...] = ()
    risk_flags: tuple[str, ...] = ()
    additional_fees: Mapping[str, float] = field(default_factory=dict)

    def with_cost(self, cost: float) -> RuleEffect:
        return replace(self, cost=cost)

    def add_cost(self, amount: float) -> RuleEffect:
        return replace(self, cost=self.cost + amount)

    def record_rule(self, description: str) -> RuleEffect:
        return replace(self, applied_rules=self.applied_rules + (description,))

    def flag(self, *flags: str) -> RuleEffect:
        return replace(self, risk_flags=self.risk_flags + flags)

    def record_fee(self, name: str, amount: float) -> RuleEffect:
        """Record a named fee without touching ``cost``."""
        fees = dict(self.additional_fees)
        fees[name] = amount
        return replace(self, additional_fees=fees)
