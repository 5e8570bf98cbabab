"""Trigger thresholds and amounts for the pricing business rules."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RuleThresholds:
    # BR-001
    large_tree_dbh: float = 24
    large_tree_multiplier: float = 1.15
    # BR-002
    high_risk_impact: float = 50
    safety_equipment_fee: float = 150
    # BR-003
    minimum_job_cost: float = 500
    # BR-004
    crane_height: float = 60
    crane_limited_access_height: float = 40
    crane_setup_fee: float = 800
    crane_rate_increase: float = 0.25
    # BR-005
    permit_processing_fee: float = 150

    @property
    def large_tree_bonus_percent(self) -> int:
        return round((self.large_tree_multiplier - 1) * 100)

    def needs_crane(self, height: float, limited_access: bool) -> bool:
        if height > self.crane_height:
            return True
        return height > self.crane_limited_access_height and limited_access
