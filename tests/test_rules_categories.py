"""Tests for the individual pricing rules."""

from __future__ import annotations

import pytest

from treeops.rules import RuleContext, RuleEffect, RuleThresholds
from treeops.rules.categories import (
    crane_requirement_rule,
    high_risk_safety_rule,
    large_tree_bonus_rule,
    minimum_job_size_rule,
    permit_alert_rule,
)
from treeops.scoring import DEFAULT_COST_PARAMETERS, TreeMeasurement


def make_context(
    height: float = 30,
    dbh: float = 12,
    hazard_impact: float = 0,
    hazards: dict | None = None,
    thresholds: RuleThresholds | None = None,
) -> RuleContext:
    return RuleContext(
        measurement=TreeMeasurement(height=height, canopy_radius=10, dbh=dbh),
        hazards=hazards or {},
        hazard_impact=hazard_impact,
        cost_parameters=DEFAULT_COST_PARAMETERS,
        thresholds=thresholds or RuleThresholds(),
    )


class TestLargeTreeBonusRule:
    """Test BR-001."""

    def test_applies_multiplier(self):
        """Test that a 24in trunk scales the cost by 15%."""
        effect = large_tree_bonus_rule(make_context(dbh=24), RuleEffect(cost=1000))

        assert effect.cost == pytest.approx(1150)
        assert effect.applied_rules == ("BR-001: Large Tree Bonus (+15%)",)

    def test_small_trunk_untouched(self):
        """Test that the input effect is returned unchanged below the threshold."""
        start = RuleEffect(cost=1000)
        assert large_tree_bonus_rule(make_context(dbh=20), start) is start

    def test_custom_multiplier_in_description(self):
        """Test that the recorded percentage follows the configured multiplier."""
        thresholds = RuleThresholds(large_tree_multiplier=1.2)
        effect = large_tree_bonus_rule(
            make_context(dbh=30, thresholds=thresholds), RuleEffect(cost=100)
        )

        assert effect.cost == pytest.approx(120)
        assert effect.applied_rules == ("BR-001: Large Tree Bonus (+20%)",)


class TestHighRiskSafetyRule:
    """Test BR-002."""

    def test_triggers_at_threshold(self):
        """Test that exactly 50% hazard impact is high risk."""
        effect = high_risk_safety_rule(make_context(hazard_impact=50), RuleEffect(cost=1000))

        assert effect.cost == 1150
        assert effect.additional_fees == {"Safety Equipment": 150}
        assert effect.risk_flags == (
            "HIGH RISK: Supervisor review required",
            "Site visit required before work begins",
        )
        assert effect.applied_rules == ("BR-002: High-Risk Safety Protocol",)

    def test_below_threshold(self):
        """Test that 49% hazard impact is not high risk."""
        start = RuleEffect(cost=1000)
        assert high_risk_safety_rule(make_context(hazard_impact=49), start) is start


class TestMinimumJobSizeRule:
    """Test BR-003."""

    def test_floors_low_cost(self):
        """Test that a low running cost is raised to exactly the minimum."""
        effect = minimum_job_size_rule(make_context(), RuleEffect(cost=120.5))

        assert effect.cost == 500
        assert effect.applied_rules == ("BR-003: Minimum Job Size Enforced ($500)",)

    def test_exact_minimum_not_recorded(self):
        """Test that a cost already at the minimum is left alone."""
        start = RuleEffect(cost=500)
        assert minimum_job_size_rule(make_context(), start) is start

    def test_keeps_earlier_entries(self):
        """Test that the floor preserves previously recorded fees and flags."""
        start = RuleEffect(
            cost=300,
            applied_rules=("BR-002: High-Risk Safety Protocol",),
            risk_flags=("HIGH RISK: Supervisor review required",),
            additional_fees={"Safety Equipment": 150},
        )
        effect = minimum_job_size_rule(make_context(), start)

        assert effect.applied_rules[0] == "BR-002: High-Risk Safety Protocol"
        assert effect.risk_flags == start.risk_flags
        assert effect.additional_fees == {"Safety Equipment": 150}


class TestCraneRequirementRule:
    """Test BR-004."""

    def test_tall_tree(self):
        """Test crane fee and height-based surcharge for an 80ft tree."""
        effect = crane_requirement_rule(make_context(height=80), RuleEffect(cost=15870))

        # 800 + 80 x (0.75 x 0.25) = 815
        assert effect.cost == pytest.approx(16685)
        assert effect.additional_fees == {"Crane Setup": 800}
        assert effect.risk_flags == ("CRANE REQUIRED: Specialized operator needed",)
        assert effect.applied_rules == ("BR-004: Crane Requirement (+$800 + 25% rate increase)",)

    def test_exactly_sixty_feet_needs_no_crane(self):
        """Test that the open-access height threshold is strict."""
        start = RuleEffect(cost=1000)
        assert crane_requirement_rule(make_context(height=60), start) is start

    def test_limited_access_lowers_threshold(self):
        """Test that limited access requires a crane above 40ft."""
        context = make_context(height=45, hazards={"limited_access": True})
        effect = crane_requirement_rule(context, RuleEffect(cost=1000))

        assert effect.cost == pytest.approx(1000 + 800 + 45 * 0.1875)

    def test_limited_access_at_forty_feet(self):
        """Test that 40ft with limited access does not need a crane."""
        start = RuleEffect(cost=1000)
        context = make_context(height=40, hazards={"limited_access": True})
        assert crane_requirement_rule(context, start) is start


class TestPermitAlertRule:
    """Test BR-005."""

    def test_permitting_site(self):
        """Test permit fee and timeline flag."""
        context = make_context(hazards={"permitting": True})
        effect = permit_alert_rule(context, RuleEffect(cost=1000))

        assert effect.cost == 1150
        assert effect.additional_fees == {"Permit Processing": 150}
        assert effect.risk_flags == ("PERMITS REQUIRED: 7-14 day timeline extension",)
        assert effect.applied_rules == ("BR-005: Permit Processing Fee (+$150)",)

    def test_no_permitting(self):
        """Test that sites without permitting are untouched."""
        start = RuleEffect(cost=1000)
        assert permit_alert_rule(make_context(hazards={"pool": True}), start) is start
