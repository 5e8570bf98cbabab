"""TreeScore assessment pipeline.

Measurement and hazards -> scores -> base cost -> business rules ->
published result. Pure and deterministic: no I/O, clock or randomness.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from treeops.rules import RuleContext, RuleEffect, RuleRegistry, RuleThresholds, apply_business_rules
from treeops.scoring.composer import (
    calculate_base_cost,
    calculate_base_score,
    calculate_final_score,
    calculate_hazard_impact,
    calculate_score_cost,
    calculate_subtotal,
    round_half_up,
)
from treeops.scoring.hazards import normalize_hazards
from treeops.scoring.models import (
    DEFAULT_COST_PARAMETERS,
    AssessmentResult,
    CostBreakdown,
    CostParameters,
    QuickEstimate,
    TreeMeasurement,
)

logger = logging.getLogger(__name__)

# (lower bound on base score, category), highest first
SIZE_CATEGORIES: tuple[tuple[float, str], ...] = (
    (3500, "Extra Large"),
    (2000, "Large"),
    (1000, "Medium"),
)
SMALLEST_CATEGORY = "Small"


def size_category(base_score: float) -> str:
    """Coarse size bucket; each boundary belongs to the larger bucket."""
    for lower_bound, category in SIZE_CATEGORIES:
        if base_score >= lower_bound:
            return category
    return SMALLEST_CATEGORY


def assemble_result(
    base_score: float,
    hazard_impact: float,
    final_score: float,
    effect: RuleEffect,
    params: CostParameters,
) -> AssessmentResult:
    """Round the pipeline figures for publication."""
    score_cost = calculate_score_cost(final_score, params)
    subtotal = calculate_subtotal(final_score, params)
    markup = subtotal * (params.profit_multiplier - 1)
    total_cost = round_half_up(effect.cost)

    return AssessmentResult(
        base_score=round_half_up(base_score),
        hazard_impact=hazard_impact,
        final_score=round_half_up(final_score),
        total_cost=total_cost,
        applied_rules=effect.applied_rules,
        risk_flags=effect.risk_flags,
        breakdown=CostBreakdown(
            setup_cost=params.setup_cost,
            score_cost=round_half_up(score_cost),
            subtotal=round_half_up(subtotal),
            markup=round_half_up(markup),
            final_cost=total_cost,
            additional_fees=dict(effect.additional_fees),
        ),
    )


def assess_tree(
    measurement: TreeMeasurement,
    hazards: Mapping[str, Any] | None = None,
    cost_parameters: CostParameters | None = None,
    thresholds: RuleThresholds | None = None,
    registry: RuleRegistry | None = None,
) -> AssessmentResult:
    """Price a single tree and annotate it with rule and risk information.

    Args:
        measurement: Tree geometry. Must already be validated as positive.
        hazards: Indicator name -> present. Unknown names are ignored and
            missing names count as absent.
        cost_parameters: Rates to price with; ``DEFAULT_COST_PARAMETERS``
            when omitted.
        thresholds: Rule trigger thresholds and fee amounts.
        registry: Rules to evaluate; the default pricing rules when omitted.

    Returns:
        The rounded, published assessment.
    """
    params = cost_parameters or DEFAULT_COST_PARAMETERS
    normalized = normalize_hazards(hazards)

    base_score = calculate_base_score(measurement)
    hazard_impact = calculate_hazard_impact(normalized)
    final_score = calculate_final_score(base_score, hazard_impact)
    base_cost = calculate_base_cost(final_score, params)

    context = RuleContext(
        measurement=measurement,
        hazards=normalized,
        hazard_impact=hazard_impact,
        cost_parameters=params,
        thresholds=thresholds or RuleThresholds(),
    )
    effect = apply_business_rules(context, base_cost, registry=registry)

    result = assemble_result(base_score, hazard_impact, final_score, effect, params)
    logger.debug(
        f"TreeScore base={result.base_score} impact={hazard_impact} "
        f"final={result.final_score} total={result.total_cost}"
    )
    return result


def quick_estimate(height: float, canopy_radius: float, dbh: float) -> QuickEstimate:
    """Geometry-only estimate: default rates, no hazards, no business rules."""
    base_score = calculate_base_score(
        TreeMeasurement(height=height, canopy_radius=canopy_radius, dbh=dbh)
    )
    estimated_cost = calculate_base_cost(base_score, DEFAULT_COST_PARAMETERS)

    return QuickEstimate(
        base_score=round_half_up(base_score),
        estimated_cost=round_half_up(estimated_cost),
        category=size_category(base_score),
    )
