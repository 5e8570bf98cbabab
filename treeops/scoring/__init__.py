"""TreeScore measurement models and scoring formulas.

The full assessment pipeline lives in :mod:`treeops.scoring.engine`; it is
not imported here because the rules package depends on these models.
"""

from .composer import (
    calculate_base_cost,
    calculate_base_score,
    calculate_final_score,
    calculate_hazard_impact,
    round_half_up,
)
from .hazards import HAZARD_INDICATORS, HAZARD_TABLE_VERSION, HAZARD_WEIGHTS, normalize_hazards
from .models import (
    DEFAULT_COST_PARAMETERS,
    AssessmentResult,
    CostBreakdown,
    CostParameters,
    QuickEstimate,
    TreeMeasurement,
)

__all__ = [
    "calculate_base_cost",
    "calculate_base_score",
    "calculate_final_score",
    "calculate_hazard_impact",
    "round_half_up",
    "HAZARD_INDICATORS",
    "HAZARD_TABLE_VERSION",
    "HAZARD_WEIGHTS",
    "normalize_hazards",
    "DEFAULT_COST_PARAMETERS",
    "AssessmentResult",
    "CostBreakdown",
    "CostParameters",
    "QuickEstimate",
    "TreeMeasurement",
]
