"""Tests for the TreeScore formulas and assessment pipeline."""

from __future__ import annotations

import pytest

from treeops.scoring import (
    DEFAULT_COST_PARAMETERS,
    HAZARD_INDICATORS,
    HAZARD_WEIGHTS,
    CostParameters,
    TreeMeasurement,
    calculate_base_cost,
    calculate_base_score,
    calculate_final_score,
    calculate_hazard_impact,
    normalize_hazards,
    round_half_up,
)
from treeops.scoring.engine import assess_tree, quick_estimate, size_category


class TestScoreComposer:
    """Test the base score, hazard impact and final score formulas."""

    def test_base_score_formula(self, large_tall_tree: TreeMeasurement):
        """Test height x canopy diameter x DBH in feet."""
        assert calculate_base_score(large_tall_tree) == 12000

    def test_base_score_is_unrounded(self):
        """Test that fractional scores are kept as floats."""
        measurement = TreeMeasurement(height=41, canopy_radius=1, dbh=1)
        assert calculate_base_score(measurement) == pytest.approx(41 * 2 / 12)

    def test_no_hazards_means_no_impact(self, no_hazards: dict):
        """Test that an all-false hazard set has zero impact."""
        assert calculate_hazard_impact(no_hazards) == 0

    @pytest.mark.parametrize(
        "measurement",
        [
            TreeMeasurement(height=80, canopy_radius=25, dbh=36),
            TreeMeasurement(height=10, canopy_radius=5, dbh=6),
            TreeMeasurement(height=41.3, canopy_radius=7.7, dbh=13.1),
        ],
    )
    def test_final_equals_base_without_hazards(
        self, measurement: TreeMeasurement, no_hazards: dict
    ):
        """Test that the final score is exactly the base score with no hazards."""
        base = calculate_base_score(measurement)
        impact = calculate_hazard_impact(no_hazards)
        assert calculate_final_score(base, impact) == base

    def test_hazard_impact_sums_weights(self, high_hazards: dict):
        """Test that active indicator weights are summed."""
        assert calculate_hazard_impact(high_hazards) == 77

    def test_hazard_impact_is_uncapped(self):
        """Test that a fully hazardous site exceeds 100%."""
        all_hazards = {name: True for name in HAZARD_INDICATORS}
        assert calculate_hazard_impact(all_hazards) == sum(HAZARD_WEIGHTS.values())
        assert calculate_hazard_impact(all_hazards) > 100

    def test_final_score_scales_by_impact(self):
        """Test that a 50% impact multiplies the base score by 1.5."""
        assert calculate_final_score(1000, 50) == 1500

    def test_weight_table_values(self):
        """Test the published indicator weights."""
        assert HAZARD_WEIGHTS == {
            "pool": 15,
            "fence": 10,
            "structures": 20,
            "utilities": 25,
            "permitting": 30,
            "steep_terrain": 12,
            "soft_soil": 8,
            "limited_access": 18,
            "nearby_vehicles": 14,
            "glass_windows": 9,
            "septic_tank": 7,
            "overhead_lines": 22,
            "underground_utilities": 19,
        }


class TestHazardNormalization:
    """Test the open hazard mapping handling."""

    def test_missing_keys_are_false(self):
        """Test that omitted indicators count as absent."""
        normalized = normalize_hazards({"pool": True})
        assert normalized["pool"] is True
        assert normalized["fence"] is False
        assert len(normalized) == len(HAZARD_INDICATORS)

    def test_unknown_keys_are_ignored(self):
        """Test that unknown indicators are not summed."""
        assert calculate_hazard_impact({"lava": True, "pool": True}) == 15
        assert "lava" not in normalize_hazards({"lava": True})

    def test_camel_case_names_are_accepted(self):
        """Test that camelCase indicator names map to the canonical names."""
        normalized = normalize_hazards({"steepTerrain": True, "undergroundUtilities": True})
        assert normalized["steep_terrain"] is True
        assert normalized["underground_utilities"] is True

    def test_only_real_true_marks_present(self):
        """Test that truthy non-boolean values do not switch an indicator on."""
        normalized = normalize_hazards({"pool": "false", "fence": "true", "structures": 1})

        assert not any(normalized.values())
        assert calculate_hazard_impact({"pool": "false"}) == 0

    def test_none_hazards(self):
        """Test that no hazard mapping at all is treated as all false."""
        assert calculate_hazard_impact(None) == 0


class TestMonotonicity:
    """Flipping any single indicator on never lowers impact, score or cost."""

    @pytest.mark.parametrize("indicator", HAZARD_INDICATORS)
    def test_single_indicator_never_decreases(
        self, indicator: str, medium_tree: TreeMeasurement, no_hazards: dict
    ):
        """Test monotonicity of impact, final score and base cost."""
        base = calculate_base_score(medium_tree)
        flipped = {**no_hazards, indicator: True}

        impact_off = calculate_hazard_impact(no_hazards)
        impact_on = calculate_hazard_impact(flipped)
        final_off = calculate_final_score(base, impact_off)
        final_on = calculate_final_score(base, impact_on)

        assert impact_on >= impact_off
        assert final_on >= final_off
        assert calculate_base_cost(final_on, DEFAULT_COST_PARAMETERS) >= calculate_base_cost(
            final_off, DEFAULT_COST_PARAMETERS
        )


class TestBaseCost:
    """Test the pre-rules base cost."""

    def test_default_parameters(self):
        """Test the shared default cost parameters."""
        assert DEFAULT_COST_PARAMETERS == CostParameters(
            setup_cost=200, rate_per_point=0.75, profit_multiplier=1.5
        )

    def test_base_cost_formula(self):
        """Test (setup + score x rate) x multiplier."""
        assert calculate_base_cost(12000, DEFAULT_COST_PARAMETERS) == 13800
        assert calculate_base_cost(50, DEFAULT_COST_PARAMETERS) == 356.25

    def test_custom_parameters(self):
        """Test that caller-supplied parameters are used."""
        params = CostParameters(setup_cost=100, rate_per_point=1.0, profit_multiplier=2.0)
        assert calculate_base_cost(400, params) == 1000


class TestRounding:
    """Test half-up rounding of published figures."""

    def test_half_rounds_up(self):
        """Test that .5 always rounds up, unlike round()."""
        assert round_half_up(356.5) == 357
        assert round_half_up(2.5) == 3
        assert round_half_up(37.5) == 38

    def test_below_half_rounds_down(self):
        """Test that values below .5 round down."""
        assert round_half_up(2.49) == 2
        assert round_half_up(0) == 0


class TestAssessTree:
    """Test the full assessment pipeline."""

    def test_scenario_large_tall_tree(self, large_tall_tree: TreeMeasurement, no_hazards: dict):
        """Test a large tall tree with no hazards and default parameters."""
        result = assess_tree(large_tall_tree, no_hazards)

        assert result.base_score == 12000
        assert result.hazard_impact == 0
        assert result.final_score == 12000
        assert result.total_cost == 16685
        assert result.applied_rules == (
            "BR-001: Large Tree Bonus (+15%)",
            "BR-004: Crane Requirement (+$800 + 25% rate increase)",
        )
        assert result.risk_flags == ("CRANE REQUIRED: Specialized operator needed",)
        assert result.breakdown.additional_fees == {"Crane Setup": 800}

    def test_scenario_large_tall_tree_breakdown(self, large_tall_tree: TreeMeasurement):
        """Test the display breakdown for the large tall tree."""
        breakdown = assess_tree(large_tall_tree).breakdown

        assert breakdown.setup_cost == 200
        assert breakdown.score_cost == 9000
        assert breakdown.subtotal == 9200
        assert breakdown.markup == 4600
        assert breakdown.final_cost == 16685

    def test_scenario_tiny_tree(self, tiny_tree: TreeMeasurement, no_hazards: dict):
        """Test that a tiny tree is raised to the minimum job size."""
        result = assess_tree(tiny_tree, no_hazards)

        assert result.base_score == 50
        assert result.final_score == 50
        assert result.total_cost == 500
        assert result.applied_rules == ("BR-003: Minimum Job Size Enforced ($500)",)
        assert result.risk_flags == ()
        assert result.breakdown.additional_fees == {}

    def test_scenario_tiny_tree_breakdown_rounds_half_up(self, tiny_tree: TreeMeasurement):
        """Test that each breakdown component is rounded independently."""
        breakdown = assess_tree(tiny_tree).breakdown

        assert breakdown.score_cost == 38  # 37.5
        assert breakdown.subtotal == 238  # 237.5
        assert breakdown.markup == 119  # 118.75
        assert breakdown.final_cost == 500

    def test_scenario_high_hazard(self, medium_tree: TreeMeasurement, high_hazards: dict):
        """Test that a 77% hazard site gets the safety and permit fees and flags."""
        result = assess_tree(medium_tree, high_hazards)

        assert result.hazard_impact == 77
        assert result.breakdown.additional_fees == {
            "Safety Equipment": 150,
            "Permit Processing": 150,
        }
        assert result.risk_flags == (
            "HIGH RISK: Supervisor review required",
            "Site visit required before work begins",
            "PERMITS REQUIRED: 7-14 day timeline extension",
        )
        assert "BR-002: High-Risk Safety Protocol" in result.applied_rules
        assert "BR-005: Permit Processing Fee (+$150)" in result.applied_rules
        # (200 + 600 * 1.77 * 0.75) * 1.5 + 150 + 150
        assert result.total_cost == 1795

    def test_final_score_never_below_base(self, medium_tree: TreeMeasurement, high_hazards: dict):
        """Test that hazards only ever raise the final score."""
        result = assess_tree(medium_tree, high_hazards)
        assert result.final_score >= result.base_score

    def test_missing_parameters_use_defaults(self, medium_tree: TreeMeasurement):
        """Test that omitted cost parameters fall back to the defaults."""
        assert assess_tree(medium_tree) == assess_tree(
            medium_tree, {}, DEFAULT_COST_PARAMETERS
        )

    def test_repeated_calls_are_identical(self, large_tall_tree: TreeMeasurement, high_hazards: dict):
        """Test that the pipeline is deterministic."""
        first = assess_tree(large_tall_tree, high_hazards)
        second = assess_tree(large_tall_tree, high_hazards)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_outputs_are_non_negative(self, tiny_tree: TreeMeasurement):
        """Test that published figures are non-negative."""
        result = assess_tree(tiny_tree)
        data = result.to_dict()
        for key in ("base_score", "hazard_impact", "final_score", "total_cost"):
            assert data[key] >= 0
        for key in ("score_cost", "subtotal", "markup", "final_cost"):
            assert data["breakdown"][key] >= 0

    def test_result_round_trips_through_dict(self, large_tall_tree: TreeMeasurement):
        """Test that stored results load back unchanged."""
        from treeops.scoring.models import AssessmentResult

        result = assess_tree(large_tall_tree)
        assert AssessmentResult.from_dict(result.to_dict()) == result


class TestQuickEstimate:
    """Test the geometry-only quick estimate."""

    def test_quick_estimate_values(self):
        """Test base score, estimated cost and category."""
        estimate = quick_estimate(height=100, canopy_radius=5, dbh=12)

        assert estimate.base_score == 1000
        assert estimate.estimated_cost == 1425
        assert estimate.category == "Medium"

    def test_quick_estimate_skips_business_rules(self):
        """Test that no minimum job size is applied."""
        estimate = quick_estimate(height=10, canopy_radius=5, dbh=6)

        assert estimate.estimated_cost == 356
        assert estimate.category == "Small"

    def test_quick_estimate_no_crane(self):
        """Test that tall trees get no crane surcharge in a quick estimate."""
        estimate = quick_estimate(height=80, canopy_radius=25, dbh=36)

        assert estimate.estimated_cost == 13800
        assert estimate.category == "Extra Large"

    @pytest.mark.parametrize(
        "base_score, category",
        [
            (999.9, "Small"),
            (1000, "Medium"),
            (1999.99, "Medium"),
            (2000, "Large"),
            (3499.99, "Large"),
            (3500, "Extra Large"),
            (0.5, "Small"),
        ],
    )
    def test_category_boundaries(self, base_score: float, category: str):
        """Test that each boundary belongs to the larger category."""
        assert size_category(base_score) == category

    @pytest.mark.parametrize(
        "height, category",
        [(100, "Medium"), (200, "Large"), (350, "Extra Large")],
    )
    def test_category_boundaries_from_geometry(self, height: float, category: str):
        """Test exact boundaries reached through the score formula."""
        assert quick_estimate(height=height, canopy_radius=5, dbh=12).category == category
