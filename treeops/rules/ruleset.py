"""Default pricing rules and their evaluation order."""

from __future__ import annotations

from .categories import (
    crane_requirement_rule,
    high_risk_safety_rule,
    large_tree_bonus_rule,
    minimum_job_size_rule,
    permit_alert_rule,
)
from .registry import BusinessRule, RuleRegistry

# Order is load-bearing: the large tree bonus only scales the base cost, and
# the minimum job floor is applied before crane and permit fees are added.
DEFAULT_RULES: tuple[BusinessRule, ...] = (
    BusinessRule("BR-001", "Large Tree Bonus", 10, large_tree_bonus_rule),
    BusinessRule("BR-002", "High-Risk Safety Protocol", 20, high_risk_safety_rule),
    BusinessRule("BR-003", "Minimum Job Size", 30, minimum_job_size_rule),
    BusinessRule("BR-004", "Crane Requirement", 40, crane_requirement_rule),
    BusinessRule("BR-005", "Permit Alert", 50, permit_alert_rule),
)


def register_default_rules(registry: RuleRegistry) -> None:
    """Register the standard pricing rules. Safe to call repeatedly."""
    registry.extend(DEFAULT_RULES)


__all__ = ["DEFAULT_RULES", "register_default_rules"]
