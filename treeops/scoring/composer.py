"""TreeScore formulas.

TS-001  base score      height x canopy diameter x DBH in feet
HI-001  hazard impact   sum of indicator weights, uncapped
FTS-001 final score     base score scaled by hazard impact
TC-002  base cost       (setup + score x rate) x profit multiplier

Everything here returns unrounded floats. Rounding happens only when the
result is assembled, because rule thresholds compare unrounded figures.
"""
from __future__ import annotations

import math
from collections.abc import Mapping

from treeops.scoring.hazards import HAZARD_WEIGHTS, normalize_hazards
from treeops.scoring.models import CostParameters, TreeMeasurement


def calculate_base_score(measurement: TreeMeasurement) -> float:
    """Relative structural complexity score, not a physical volume."""
    canopy_diameter = measurement.canopy_radius * 2
    dbh_feet = measurement.dbh / 12
    return measurement.height * canopy_diameter * dbh_feet


def calculate_hazard_impact(
    hazards: Mapping[str, bool] | None,
    weights: Mapping[str, float] = HAZARD_WEIGHTS,
) -> float:
    normalized = normalize_hazards(hazards)
    return sum(weight for name, weight in weights.items() if normalized.get(name, False))


def calculate_final_score(base_score: float, hazard_impact: float) -> float:
    return base_score * (1 + hazard_impact / 100)


def calculate_score_cost(final_score: float, params: CostParameters) -> float:
    return final_score * params.rate_per_point


def calculate_subtotal(final_score: float, params: CostParameters) -> float:
    return params.setup_cost + calculate_score_cost(final_score, params)


def calculate_base_cost(final_score: float, params: CostParameters) -> float:
    """Pre-rules cost; the starting value of the business rule accumulator."""
    return calculate_subtotal(final_score, params) * params.profit_multiplier


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit with halves rounded up.

    ``round()`` would send 356.5 to 356; published figures round it to 357.
    """
    return int(math.floor(value + 0.5))
