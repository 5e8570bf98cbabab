"""Pricing business rules organized by category."""

from __future__ import annotations

from .permit_rules import permit_alert_rule
from .pricing_rules import minimum_job_size_rule
from .safety_rules import high_risk_safety_rule
from .size_rules import crane_requirement_rule, large_tree_bonus_rule

__all__ = [
    "crane_requirement_rule",
    "high_risk_safety_rule",
    "large_tree_bonus_rule",
    "minimum_job_size_rule",
    "permit_alert_rule",
]
